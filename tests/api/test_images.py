"""API tests for the image relay (local filesystem and stubbed S3 backends)."""

import os
from urllib.parse import parse_qs, urlparse

import boto3
import pytest
from botocore.stub import Stubber
from httpx import AsyncClient

from helpfromfounder.api.v1.dependencies import get_image_relay_service
from helpfromfounder.application.services import ImageRelayService
from helpfromfounder.infrastructure.external.storage.s3_storage import S3ImageStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def test_upload_then_fetch(client: AsyncClient) -> None:
    uploaded = await client.post(
        "/api/images/upload", files={"file": ("logo.png", PNG_BYTES, "image/png")}
    )
    assert uploaded.status_code == 200
    body = uploaded.json()
    assert body["success"] is True
    assert body["key"].endswith(".png")

    fetched = await client.get(f"/api/images/{body['key']}")
    assert fetched.status_code == 200
    assert fetched.content == PNG_BYTES
    assert fetched.headers["content-type"] == "image/png"
    assert fetched.headers["Cache-Control"] == "public, max-age=31536000"
    assert fetched.headers["Cross-Origin-Resource-Policy"] == "cross-origin"


async def test_upload_rejects_non_images(client: AsyncClient) -> None:
    before = set(os.listdir(os.environ["STORAGE_ROOT"]))
    response = await client.post(
        "/api/images/upload", files={"file": ("notes.txt", b"hello", "text/plain")}
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Only image files are allowed"}
    assert set(os.listdir(os.environ["STORAGE_ROOT"])) == before


async def test_upload_without_file(client: AsyncClient) -> None:
    response = await client.post("/api/images/upload", data={"other": "value"})
    assert response.status_code == 400
    assert response.json()["error"] == "No file provided"


async def test_oversized_upload_rejected(client: AsyncClient) -> None:
    """Only the request-size limit applies; nothing is stored."""
    before = set(os.listdir(os.environ["STORAGE_ROOT"]))
    big = b"\x00" * (64 * 1024 + 1)
    response = await client.post("/api/images/upload", files={"file": ("big.png", big, "image/png")})
    assert response.status_code == 413
    assert response.json() == {"success": False, "error": "Request body must be at most 65536 bytes"}
    assert set(os.listdir(os.environ["STORAGE_ROOT"])) == before


async def test_missing_image_is_404(client: AsyncClient) -> None:
    response = await client.get("/api/images/does-not-exist.png")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Image not found"}


async def test_upload_url_not_available_on_local_backend(client: AsyncClient) -> None:
    response = await client.post("/api/images/upload-url", json={"fileType": "image/png"})
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate upload URL"

    wrong_type = await client.post("/api/images/upload-url", json={"fileType": "application/pdf"})
    assert wrong_type.status_code == 400
    assert wrong_type.json()["error"] == "Only image files are allowed"


@pytest.fixture
def s3_stub(app):
    """Route the image endpoints to S3 storage backed by a stubbed boto3 client."""
    client = boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test-access",
        aws_secret_access_key="test-secret",
    )
    storage = S3ImageStorage(bucket="images-bucket", region="us-east-1", client=client)
    app.dependency_overrides[get_image_relay_service] = lambda: ImageRelayService(storage, upload_url_expiry=600)
    with Stubber(client) as stubber:
        yield stubber
    del app.dependency_overrides[get_image_relay_service]


async def test_s3_missing_object_is_404(client: AsyncClient, s3_stub) -> None:
    s3_stub.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
    response = await client.get("/api/images/gone.png")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Image not found"}


async def test_s3_upload_url_is_presigned_put(client: AsyncClient, s3_stub) -> None:
    response = await client.post("/api/images/upload-url", json={"fileType": "image/png"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["key"].endswith(".png")
    query = parse_qs(urlparse(body["uploadUrl"]).query)
    assert query["X-Amz-Expires"] == ["600"]
    assert "content-type" in query["X-Amz-SignedHeaders"][0].split(";")
