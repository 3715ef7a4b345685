"""
Image hosting abstraction for imgbb and in-memory testing.
"""

from __future__ import annotations

import base64
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds


class ImageHostError(Exception):
    """The image host rejected or failed a request."""


@dataclass
class ImageUploadResult:
    url: str
    delete_url: Optional[str] = None


class ImageHostClient(Protocol):
    """Defines the operations the API needs from the image host."""

    def upload(self, content: bytes, filename: Optional[str] = None) -> ImageUploadResult:
        ...

    def delete(self, delete_url: str) -> None:
        ...


@dataclass
class ImgbbClient:
    """
    Client for the imgbb upload API.

    Uploads are sent form-encoded with the image as base64 text. Deletion
    follows the provider's convention of fetching the returned delete URL.
    """

    api_key: Optional[str]
    upload_url: str = "https://api.imgbb.com/1/upload"
    timeout: float = REQUEST_TIMEOUT

    def upload(self, content: bytes, filename: Optional[str] = None) -> ImageUploadResult:
        if not self.api_key:
            raise ImageHostError("IMGBB_API_KEY is not configured")

        form = {
            "key": self.api_key,
            "image": base64.b64encode(content).decode("ascii"),
        }
        if filename:
            form["name"] = filename

        try:
            response = requests.post(self.upload_url, data=form, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ImageHostError(f"Image upload failed: {e}") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            raise ImageHostError("Image upload failed: no URL in response")
        logger.info("Uploaded image to %s", url)
        return ImageUploadResult(url=url, delete_url=data.get("delete_url"))

    def delete(self, delete_url: str) -> None:
        try:
            response = requests.get(delete_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageHostError(f"Image delete failed: {e}") from e
        logger.info("Image delete request returned %s", response.status_code)


@dataclass
class InMemoryImageHostClient:
    """Test double for image hosting."""

    base_url: str = "https://example.test/images"
    uploads: dict = field(default_factory=dict)
    deleted: list = field(default_factory=list)

    def upload(self, content: bytes, filename: Optional[str] = None) -> ImageUploadResult:
        image_id = uuid.uuid4().hex[:8]
        self.uploads[image_id] = content
        return ImageUploadResult(
            url=f"{self.base_url}/{image_id}/{filename or 'image'}",
            delete_url=f"{self.base_url}/delete/{image_id}",
        )

    def delete(self, delete_url: str) -> None:
        self.deleted.append(delete_url)
