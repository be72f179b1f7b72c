"""Local filesystem image storage with path validation and atomic writes."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os

from helpfromfounder.infrastructure.exceptions import (
    StorageDownloadError,
    StorageNotFoundError,
    StorageNotSupportedError,
    StoragePermissionError,
    StorageUploadError,
)
from helpfromfounder.shared.utils.datetime import utc_now


class LocalImageStorage:
    """Images as flat files under storage_root.

    Writes use temp file + rename. The content type lives in a .meta.json
    sidecar next to the object. No presigned uploads.
    """

    backend_name = "local"

    def __init__(self, storage_root: str) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, key: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / key).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(key, "path_validation") from e
        if full_path == self.storage_root:
            raise StoragePermissionError(key, "path_validation")
        return full_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_name(file_path.name + ".meta.json")

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        target_path = self._get_full_path(key)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(dir=target_path.parent, prefix=".tmp_")
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(data)
                os.replace(temp_path, target_path)
            finally:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
            meta = {
                "content_type": content_type,
                "size": len(data),
                "uploaded_at": utc_now().isoformat(),
            }
            async with aiofiles.open(self._meta_path(target_path), "w") as f:
                await f.write(json.dumps(meta))
        except OSError as e:
            raise StorageUploadError(key, str(e)) from e

    async def get(self, key: str) -> tuple[bytes, str | None]:
        file_path = self._get_full_path(key)
        if not file_path.is_file():
            raise StorageNotFoundError(key)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                data = await f.read()
            content_type = None
            meta_path = self._meta_path(file_path)
            if await aiofiles.os.path.exists(meta_path):
                async with aiofiles.open(meta_path) as f:
                    stored = json.loads(await f.read())
                if isinstance(stored, dict):
                    content_type = stored.get("content_type")
        except (OSError, ValueError) as e:
            raise StorageDownloadError(key, str(e)) from e
        return data, content_type

    async def generate_upload_url(self, key: str, content_type: str, expires_in: int) -> str:
        raise StorageNotSupportedError("generate_upload_url", self.backend_name)
