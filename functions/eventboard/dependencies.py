"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header
from firebase_admin import firestore

from eventboard.config import get_settings
from eventboard.db import DocumentDbClient, FirestoreDbClient, InMemoryDbClient
from eventboard.errors import UnauthenticatedError
from eventboard.identity import (
    AuthClient,
    FirebaseAuthClient,
    Identity,
    InMemoryAuthClient,
    InvalidTokenError,
    initialize_firebase_app,
)
from eventboard.images import ImageHostClient, ImgbbClient, InMemoryImageHostClient

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

_db_client: DocumentDbClient | None = None
_auth_client: AuthClient | None = None
_image_host_client: ImageHostClient | None = None


def get_db_client() -> DocumentDbClient:
    """
    Return a singleton document database client shared by all requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _db_client = InMemoryDbClient()
    else:
        app = initialize_firebase_app(
            settings.firebase_credentials_path, settings.firebase_project_id
        )
        _db_client = FirestoreDbClient(firestore.client(app))
    return _db_client


def get_auth_client() -> AuthClient:
    global _auth_client
    if _auth_client:
        return _auth_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _auth_client = InMemoryAuthClient()
    else:
        app = initialize_firebase_app(
            settings.firebase_credentials_path, settings.firebase_project_id
        )
        _auth_client = FirebaseAuthClient(app)
    return _auth_client


def get_image_host_client() -> ImageHostClient:
    global _image_host_client
    if _image_host_client:
        return _image_host_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _image_host_client = InMemoryImageHostClient()
    else:
        _image_host_client = ImgbbClient(
            api_key=settings.imgbb_api_key,
            upload_url=settings.imgbb_upload_url,
            timeout=settings.image_host_timeout,
        )
    return _image_host_client


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):] or None


def require_identity(
    authorization: Optional[str] = Header(default=None),
    auth_client: AuthClient = Depends(get_auth_client),
) -> Identity:
    """
    Authentication gate: verify the bearer token and return the caller's identity.
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise UnauthenticatedError("Missing Authorization Bearer token")
    try:
        return auth_client.verify_id_token(token)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise UnauthenticatedError("Invalid token", details=str(e)) from e
