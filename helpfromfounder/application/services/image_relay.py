"""Image upload, serving, and presigned upload URLs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from helpfromfounder.domain.exceptions import ValidationException
from helpfromfounder.shared.telemetry.tracing import traced
from helpfromfounder.shared.utils.generators import generate_image_key

if TYPE_CHECKING:
    from helpfromfounder.infrastructure.external.storage.protocol import ImageStorageProtocol

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_CONTENT_TYPE = "image/png"


@dataclass(frozen=True)
class StoredImage:
    data: bytes
    content_type: str


@dataclass(frozen=True)
class UploadUrl:
    upload_url: str
    key: str


def require_image_type(content_type: str | None) -> str:
    """Return the content type if it is image/*, else raise ValidationException."""
    if not content_type or not content_type.startswith("image/"):
        raise ValidationException("Only image files are allowed", field="fileType")
    return content_type


class ImageRelayService:
    """Stores images under generated keys and serves them back.

    Keys are '<uuid4>.<subtype>'; the uploader's file name is ignored.
    """

    def __init__(self, storage: ImageStorageProtocol, upload_url_expiry: int = 600) -> None:
        self._storage = storage
        self._upload_url_expiry = upload_url_expiry

    @traced("image_relay.upload")
    async def upload(self, data: bytes, content_type: str | None) -> str:
        content_type = require_image_type(content_type)
        key = generate_image_key(content_type)
        await self._storage.put(key, data, content_type)
        logger.info("Stored image %s (%d bytes, %s)", key, len(data), content_type)
        return key

    async def fetch(self, key: str) -> StoredImage:
        data, content_type = await self._storage.get(key)
        return StoredImage(data=data, content_type=content_type or DEFAULT_IMAGE_CONTENT_TYPE)

    @traced("image_relay.create_upload_url")
    async def create_upload_url(self, file_type: str | None) -> UploadUrl:
        content_type = require_image_type(file_type)
        key = generate_image_key(content_type)
        url = await self._storage.generate_upload_url(key, content_type, self._upload_url_expiry)
        return UploadUrl(upload_url=url, key=key)
