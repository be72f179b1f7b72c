"""S3-compatible image storage (Cloudflare R2, AWS S3, MinIO) with presigned uploads."""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from helpfromfounder.infrastructure.exceptions import (
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class S3ImageStorage:
    """S3-compatible storage for images.

    Uses boto3 (sync) via asyncio.to_thread for async API. For R2 pass the
    account endpoint and region "auto".
    """

    backend_name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str = "auto",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        if client is not None:
            self._client = client
            return
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        def _put() -> None:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )

        try:
            await asyncio.to_thread(_put)
        except (ClientError, BotoCoreError) as e:
            raise StorageUploadError(key, str(e)) from e

    async def get(self, key: str) -> tuple[bytes, str | None]:
        def _get() -> tuple[bytes, str | None]:
            try:
                resp = self._client.get_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                if e.response["Error"]["Code"] in _MISSING_CODES:
                    raise StorageNotFoundError(key) from e
                raise
            return resp["Body"].read(), resp.get("ContentType")

        try:
            return await asyncio.to_thread(_get)
        except (ClientError, BotoCoreError) as e:
            raise StorageDownloadError(key, str(e)) from e

    async def generate_upload_url(self, key: str, content_type: str, expires_in: int) -> str:
        """Presigned PUT URL; the uploader must send the same Content-Type."""
        def _presign() -> str:
            return self._client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=expires_in,
            )

        try:
            return await asyncio.to_thread(_presign)
        except (ClientError, BotoCoreError) as e:
            raise StorageUploadError(key, str(e)) from e
