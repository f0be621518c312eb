"""Upload ingestion: detect, extract, chunk, embed, upsert.

Chunks are processed sequentially.  A failing chunk is recorded in
``IngestionResult.errors`` and the rest of the document still goes in.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from inobot.configs.system import IngestionConfig
from inobot.core.service.metrics import INGESTION_CHUNKS_TOTAL, UPLOADS_TOTAL
from inobot.core.service.models import Embedder, VectorRecord, VectorStore
from inobot.infra.id_utils import generate_chunk_id
from inobot.infra.telemetry import (
    ATTR_INGEST_CHUNKS,
    ATTR_INGEST_FILENAME,
    SPAN_INGEST_FILE,
    tracer,
)

from .chunking import split_into_chunks
from .detection import detect_file_type
from .extraction import extract_text
from .models import IngestionResult, UploadedDocument

logger = logging.getLogger(__name__)

UNKNOWN_FILE_TYPE = "unknown"


def chunk_metadata(
    document: UploadedDocument,
    index: int,
    total: int,
    uploaded_at: str,
) -> dict[str, Any]:
    """Metadata stored with each chunk; caller metadata wins on key clashes."""
    return {
        "filename": document.filename,
        "file_type": document.content_type or UNKNOWN_FILE_TYPE,
        "file_size": document.size,
        "file_url": document.file_url,
        "chunk_index": index,
        "total_chunks": total,
        "uploaded_at": uploaded_at,
        **document.metadata,
    }


class IngestionPipeline:
    """Turns one uploaded document into vector records."""

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        config: IngestionConfig,
    ) -> None:
        self._embedder = embedder
        self._store = store
        self._config = config

    async def ingest(self, document: UploadedDocument) -> IngestionResult:
        with tracer.start_as_current_span(SPAN_INGEST_FILE) as span:
            span.set_attribute(ATTR_INGEST_FILENAME, document.filename)
            result = await self._ingest(document)
            span.set_attribute(ATTR_INGEST_CHUNKS, result.chunks_created)
            return result

    async def _ingest(self, document: UploadedDocument) -> IngestionResult:
        result = IngestionResult()
        file_type = detect_file_type(document.filename, document.content_type)
        UPLOADS_TOTAL.labels(
            file_type=file_type.name if file_type else UNKNOWN_FILE_TYPE
        ).inc()

        try:
            text = await extract_text(document.data, file_type)
        except Exception as exc:
            logger.warning(
                "Failed to extract text from %s", document.filename, exc_info=True
            )
            result.errors.append(f"Failed to process file: {exc}")
            return result

        if not text.strip():
            logger.info("No text extracted from %s", document.filename)
            return result

        result.text_extracted = True
        chunks = split_into_chunks(text, self._config.chunk_size)
        result.chunks_created = len(chunks)
        uploaded_at = datetime.now(timezone.utc).isoformat()

        for index, chunk in enumerate(chunks):
            if len(chunk.strip()) < self._config.min_chunk_length:
                result.chunks_skipped += 1
                INGESTION_CHUNKS_TOTAL.labels(status="skipped").inc()
                continue

            try:
                embedding = await self._embedder.embed(chunk)
                await self._store.upsert(
                    VectorRecord(
                        id=generate_chunk_id(),
                        embedding=embedding,
                        content=chunk,
                        metadata=chunk_metadata(
                            document, index, len(chunks), uploaded_at
                        ),
                    )
                )
            except Exception as exc:
                message = f"Failed to vectorize chunk {index}: {exc}"
                logger.error(message)
                result.errors.append(message)
                INGESTION_CHUNKS_TOTAL.labels(status="failed").inc()
                continue

            result.chunks_processed += 1
            INGESTION_CHUNKS_TOTAL.labels(status="processed").inc()

        logger.info(
            "Ingested %s: %d processed, %d skipped, %d errors",
            document.filename,
            result.chunks_processed,
            result.chunks_skipped,
            len(result.errors),
        )
        return result
