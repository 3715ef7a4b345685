"""
HTTP routes proxying image uploads to the external image host.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from eventboard.dependencies import get_image_host_client, require_identity
from eventboard.errors import ValidationError
from eventboard.identity import Identity
from eventboard.images import ImageHostClient
from eventboard.schemas import DeleteImageRequest, OkResponse, UploadImageResponse
from eventboard.validation import is_non_empty_string

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


@router.post("/uploadImage", response_model=UploadImageResponse)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    identity: Identity = Depends(require_identity),
    image_host: ImageHostClient = Depends(get_image_host_client),
):
    if image is None:
        raise ValidationError("No image file uploaded (field name: image)")

    content = await image.read()
    logger.info(
        "User %s uploading %s (%d bytes)", identity.uid, image.filename, len(content)
    )
    # The image host clients are blocking; keep them off the event loop.
    result = await run_in_threadpool(image_host.upload, content, image.filename)
    return UploadImageResponse(url=result.url, delete_url=result.delete_url)


@router.post("/deleteImage", response_model=OkResponse)
def delete_image(
    payload: DeleteImageRequest,
    identity: Identity = Depends(require_identity),
    image_host: ImageHostClient = Depends(get_image_host_client),
):
    if not is_non_empty_string(payload.delete_url):
        raise ValidationError("delete_url is required")

    image_host.delete(payload.delete_url.strip())
    logger.info("User %s deleted hosted image", identity.uid)
    return OkResponse()
