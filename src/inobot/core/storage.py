"""S3-compatible blob storage for uploaded files (Cloudflare R2).

boto3 is synchronous, so each call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from typing import Annotated, Any

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends, FastAPI, Request

from inobot.configs.config import AppConfig, get_app_config
from inobot.configs.system import StorageConfig
from inobot.core.errors import ConfigurationError, UpstreamError
from inobot.infra.lifespan import get_app

logger = logging.getLogger(__name__)


def create_s3_client(config: StorageConfig) -> Any:
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint_url or None,
        aws_access_key_id=config.access_key_id or None,
        aws_secret_access_key=config.secret_access_key or None,
        region_name=config.region_name,
        config=Config(signature_version="s3v4"),
    )


class S3BlobStorage:
    """Writes objects to one bucket and builds their public URLs."""

    def __init__(self, config: StorageConfig, client: Any | None = None) -> None:
        self._config = config
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._config.bucket)

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        if not self.configured:
            raise ConfigurationError("Blob storage bucket is not configured")
        if self._client is None:
            self._client = create_s3_client(self._config)

        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._config.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise UpstreamError(f"Blob storage put failed: {exc}") from exc
        logger.info("Stored %s (%d bytes) in %s", key, len(data), self._config.bucket)


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_storage(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the shared blob storage and attach it to ``app.state``."""
    storage_config = config.storage
    client = create_s3_client(storage_config) if storage_config.bucket else None
    app.state.blob_storage = S3BlobStorage(storage_config, client)
    if client is None:
        logger.warning("Blob storage bucket not configured; uploads will fail")
    yield


def get_blob_storage(request: Request) -> S3BlobStorage:
    """Return the ``S3BlobStorage`` from ``app.state``."""
    return request.app.state.blob_storage
