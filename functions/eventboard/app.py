"""
FastAPI application entry point for the eventboard service.
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventboard.config import get_settings
from eventboard.errors import register_error_handlers
from eventboard.events import router as events_router
from eventboard.uploads import router as uploads_router
from eventboard.users import router as users_router


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Eventboard Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(users_router)
    app.include_router(events_router)
    app.include_router(uploads_router, prefix="/api")
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "eventboard.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
