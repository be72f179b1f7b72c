"""Tests for local filesystem image storage."""

import pytest

from helpfromfounder.infrastructure.exceptions import (
    StorageNotFoundError,
    StorageNotSupportedError,
    StoragePermissionError,
)
from helpfromfounder.infrastructure.external.storage.local_storage import LocalImageStorage


@pytest.fixture
def storage(tmp_path) -> LocalImageStorage:
    return LocalImageStorage(str(tmp_path / "images"))


async def test_put_then_get_keeps_content_type(storage) -> None:
    await storage.put("abc.png", b"\x89PNG", "image/png")
    data, content_type = await storage.get("abc.png")
    assert data == b"\x89PNG"
    assert content_type == "image/png"


async def test_missing_key_raises_not_found(storage) -> None:
    with pytest.raises(StorageNotFoundError):
        await storage.get("nope.png")


async def test_path_traversal_is_rejected(storage) -> None:
    with pytest.raises(StoragePermissionError):
        await storage.put("../escape.png", b"x", "image/png")
    with pytest.raises(StoragePermissionError):
        await storage.get("../../etc/passwd")


async def test_presigned_upload_not_supported(storage) -> None:
    with pytest.raises(StorageNotSupportedError):
        await storage.generate_upload_url("abc.png", "image/png", 600)
