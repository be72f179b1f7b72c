"""Image storage protocol (DIP). Implementations: LocalImageStorage, S3ImageStorage."""

from typing import Protocol


class ImageStorageProtocol(Protocol):
    """Key/value object storage for uploaded images."""

    backend_name: str

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key with their content type. Overwrites."""
        ...

    async def get(self, key: str) -> tuple[bytes, str | None]:
        """Return (bytes, stored content type). Raises StorageNotFoundError."""
        ...

    async def generate_upload_url(self, key: str, content_type: str, expires_in: int) -> str:
        """Return a presigned PUT URL. Raises StorageNotSupportedError without presigning."""
        ...
