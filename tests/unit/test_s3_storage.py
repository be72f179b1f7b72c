"""Tests for S3-compatible image storage against a stubbed boto3 client."""

import io
from urllib.parse import parse_qs, urlparse

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from helpfromfounder.application.services import ImageRelayService
from helpfromfounder.infrastructure.exceptions import (
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)
from helpfromfounder.infrastructure.external.storage.s3_storage import S3ImageStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test-access",
        aws_secret_access_key="test-secret",
    )


@pytest.fixture
def storage(s3_client) -> S3ImageStorage:
    return S3ImageStorage(bucket="images-bucket", region="us-east-1", client=s3_client)


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


async def test_put_sends_bucket_key_and_content_type(storage, stubber) -> None:
    stubber.add_response(
        "put_object",
        {},
        {"Bucket": "images-bucket", "Key": "abc.png", "Body": PNG_BYTES, "ContentType": "image/png"},
    )
    await storage.put("abc.png", PNG_BYTES, "image/png")


async def test_put_failure_raises_upload_error(storage, stubber) -> None:
    stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
    with pytest.raises(StorageUploadError):
        await storage.put("abc.png", PNG_BYTES, "image/png")


async def test_get_returns_body_and_content_type(storage, stubber) -> None:
    stubber.add_response(
        "get_object",
        {"Body": StreamingBody(io.BytesIO(PNG_BYTES), len(PNG_BYTES)), "ContentType": "image/png"},
        {"Bucket": "images-bucket", "Key": "abc.png"},
    )
    data, content_type = await storage.get("abc.png")
    assert data == PNG_BYTES
    assert content_type == "image/png"


async def test_missing_key_raises_not_found(storage, stubber) -> None:
    stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
    with pytest.raises(StorageNotFoundError):
        await storage.get("gone.png")


async def test_other_get_errors_raise_download_error(storage, stubber) -> None:
    stubber.add_client_error("get_object", service_error_code="InternalError", http_status_code=500)
    with pytest.raises(StorageDownloadError):
        await storage.get("abc.png")


async def test_presigned_upload_url_expires_in_ten_minutes(storage) -> None:
    relay = ImageRelayService(storage, upload_url_expiry=600)
    upload = await relay.create_upload_url("image/webp")

    assert upload.key.endswith(".webp")
    url = urlparse(upload.upload_url)
    query = parse_qs(url.query)
    assert url.path.endswith(f"/{upload.key}")
    assert query["X-Amz-Expires"] == ["600"]
    assert "content-type" in query["X-Amz-SignedHeaders"][0].split(";")
