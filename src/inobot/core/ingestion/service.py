"""Upload service: validate, store the original file, then ingest it."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from inobot.configs.system import APIConfig
from inobot.core.errors import InputValidationError
from inobot.core.service.models import BlobStorage

from .models import UploadedDocument, UploadResult
from .pipeline import IngestionPipeline

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def parse_metadata(raw: str | None) -> dict[str, Any]:
    """Parse the optional ``metadata`` form field; anything invalid is ``{}``."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def object_key(filename: str, now_ms: int | None = None) -> str:
    """``<epoch_ms>_<filename>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}_{filename}"


class UploadService:
    """Stores an uploaded file in blob storage and ingests its text."""

    def __init__(
        self,
        storage: BlobStorage,
        pipeline: IngestionPipeline,
        public_base_url: str,
        config: APIConfig,
    ) -> None:
        self._storage = storage
        self._pipeline = pipeline
        self._public_base_url = public_base_url.rstrip("/")
        self._config = config

    def validate(self, filename: str | None, size: int) -> str:
        """Return the filename, or raise ``InputValidationError``."""
        if not filename:
            raise InputValidationError("Missing file")
        if size > self._config.max_upload_bytes:
            limit_mb = self._config.max_upload_bytes // (1024 * 1024)
            raise InputValidationError(
                f"File too large. Maximum size is {limit_mb}MB."
            )
        return filename

    async def upload(
        self,
        filename: str | None,
        content_type: str | None,
        data: bytes,
        metadata_raw: str | None = None,
    ) -> UploadResult:
        filename = self.validate(filename, len(data))

        key = object_key(filename)
        await self._storage.put(key, data, content_type or DEFAULT_CONTENT_TYPE)
        file_url = f"{self._public_base_url}/{key}"
        logger.info("Uploaded %s (%d bytes) as %s", filename, len(data), key)

        document = UploadedDocument(
            filename=filename,
            content_type=content_type or "",
            data=data,
            file_url=file_url,
            metadata=parse_metadata(metadata_raw),
        )
        ingestion = await self._pipeline.ingest(document)
        return UploadResult(key=key, file_url=file_url, ingestion=ingestion)
