"""
Error types surfaced by the HTTP handlers and their JSON rendering.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from firebase_admin import exceptions as firebase_exceptions
from google.api_core import exceptions as google_exceptions

from eventboard.images import ImageHostError

logger = logging.getLogger(__name__)

# Failures of the database, identity provider and image host.
EXTERNAL_ERRORS = (
    ImageHostError,
    google_exceptions.GoogleAPICallError,
    firebase_exceptions.FirebaseError,
    requests.RequestException,
)


class ApiError(Exception):
    """Base class for errors that map onto a specific HTTP status."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def as_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    status_code = 400


class UnauthenticatedError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.as_dict())


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed bodies (e.g. invalid JSON) are client errors, not 422s.
    messages = [error.get("msg", "invalid request") for error in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"error": "; ".join(messages) or "invalid request"},
    )


async def _external_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "External service failure on %s %s: %s", request.method, request.url.path, exc
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    # Handled inside the middleware stack so CORS headers reach the client.
    for exc_type in EXTERNAL_ERRORS:
        app.add_exception_handler(exc_type, _external_error_handler)
    # Last resort; served outside CORSMiddleware.
    app.add_exception_handler(Exception, _unexpected_error_handler)
