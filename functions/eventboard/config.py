"""
Configuration and settings for the eventboard service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Firebase (Firestore + Auth)
    firebase_credentials_path: Optional[str] = Field(default=None)
    firebase_project_id: Optional[str] = Field(default=None)
    users_collection: str = Field(default="users")
    events_collection: str = Field(default="events")

    # Image hosting (imgbb)
    imgbb_api_key: Optional[str] = Field(default=None)
    imgbb_upload_url: str = Field(default="https://api.imgbb.com/1/upload")
    image_host_timeout: float = Field(default=30.0)

    # Listing limits
    default_list_limit: int = Field(default=50)
    max_list_limit: int = Field(default=200)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
