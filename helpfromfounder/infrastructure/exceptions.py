"""Infrastructure exceptions for image storage.

Storage errors extend HelpFromFounderException so the exception handlers
map them to HTTP responses like any other domain error.
"""

from helpfromfounder.domain.exceptions import HelpFromFounderException


class StorageException(HelpFromFounderException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """Object not found in storage."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Image not found: {key}",
            "STORAGE_NOT_FOUND",
            {"key": key},
        )


class StorageUploadError(StorageException):
    """Object write failed."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload image: {key}",
            "STORAGE_UPLOAD_ERROR",
            {"key": key, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """Object read failed."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to read image: {key}",
            "STORAGE_DOWNLOAD_ERROR",
            {"key": key, "reason": reason},
        )


class StorageNotSupportedError(StorageException):
    """Operation not supported by this storage backend."""

    def __init__(self, operation: str, backend: str) -> None:
        super().__init__(
            f"Operation '{operation}' not supported by {backend} backend",
            "STORAGE_NOT_SUPPORTED",
            {"operation": operation, "backend": backend},
        )


class StoragePermissionError(StorageException):
    """Key resolves outside the storage root."""

    def __init__(self, key: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {key}",
            "STORAGE_PERMISSION_ERROR",
            {"key": key, "operation": operation},
        )
