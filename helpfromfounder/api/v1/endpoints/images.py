"""Image relay HTTP API: upload, serve, and presigned upload URLs.

Bodies use the {success, key|uploadUrl|error} envelope.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from helpfromfounder.api.v1.dependencies import get_image_relay_service
from helpfromfounder.application.services import ImageRelayService
from helpfromfounder.core.config import get_settings
from helpfromfounder.domain.exceptions import ValidationException
from helpfromfounder.infrastructure.exceptions import StorageException, StorageNotFoundError
from helpfromfounder.schemas.image import (
    ImageErrorResponse,
    ImageUploadResponse,
    ImageUploadUrlRequest,
    ImageUploadUrlResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ImageRelayDep = Annotated[ImageRelayService, Depends(get_image_relay_service)]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ImageErrorResponse(error=message).model_dump())


@router.post("/upload")
async def upload_image(request: Request, images: ImageRelayDep):
    """Multipart upload (field "file"); returns the generated key."""
    form = await request.form()
    file = form.get("file")
    if not isinstance(file, UploadFile):
        return _error(400, "No file provided")
    if not (file.content_type or "").startswith("image/"):
        return _error(400, "Only image files are allowed")
    data = await file.read()
    try:
        key = await images.upload(data, file.content_type)
    except StorageException:
        logger.exception("Error uploading image")
        return _error(500, "Failed to upload image")
    return ImageUploadResponse(key=key).model_dump()


@router.post("/upload-url")
async def create_upload_url(request: Request, images: ImageRelayDep):
    """Presigned PUT URL for a direct upload; JSON body {"fileType": "image/..."}."""
    try:
        body = ImageUploadUrlRequest.model_validate(await request.json())
    except ValueError as e:
        message = e.errors()[0]["msg"] if isinstance(e, ValidationError) else "Invalid JSON body"
        return _error(400, message)
    try:
        upload = await images.create_upload_url(body.file_type)
    except ValidationException as e:
        return _error(400, e.message)
    except StorageException:
        logger.exception("Error generating upload URL")
        return _error(500, "Failed to generate upload URL")
    return ImageUploadUrlResponse(upload_url=upload.upload_url, key=upload.key).model_dump(
        by_alias=True
    )


@router.get("/{key}")
async def serve_image(key: str, images: ImageRelayDep):
    """Stored bytes with their content type, cacheable for a year."""
    try:
        image = await images.fetch(key)
    except StorageNotFoundError:
        return _error(404, "Image not found")
    except StorageException:
        logger.exception("Error retrieving image")
        return _error(500, "Failed to retrieve image")
    return Response(
        content=image.data,
        media_type=image.content_type,
        headers={"Cache-Control": f"public, max-age={get_settings().image_cache_max_age}"},
    )
