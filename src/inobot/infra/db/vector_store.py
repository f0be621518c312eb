"""Document-chunk vector store: repository + low-level helpers.

``PgVectorStore`` wraps session lifecycle and exposes ``query`` and
``upsert``.  All SQL and implementation details are internal.
"""

from __future__ import annotations

import logging
import time

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inobot.core.service.metrics import VECTOR_STORE_LATENCY_SECONDS
from inobot.core.service.models import ContextChunk, VectorRecord
from inobot.infra.telemetry import (
    ATTR_VECTOR_MIN_SCORE,
    ATTR_VECTOR_RESULT_COUNT,
    ATTR_VECTOR_TOP_K,
    SPAN_VECTOR_QUERY,
    tracer,
)

from .models import DocumentChunk

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants (no magic strings below)
# ---------------------------------------------------------------------------

_TABLE = DocumentChunk.__table__

COL_ID = "id"
COL_CONTENT = "content"
COL_EMBEDDING = "embedding"
COL_METADATA = "metadata"

# Chunk text is mirrored into metadata so references carry it too.
CONTENT_KEY = "content"


async def query(
    session: AsyncSession,
    query_embedding: list[float],
    top_k: int,
    min_score: float | None = None,
) -> list[ContextChunk]:
    """Nearest chunks by cosine similarity, highest first."""
    distance = DocumentChunk.embedding.cosine_distance(query_embedding)
    score = (1 - distance).label("score")
    stmt = (
        select(
            DocumentChunk.content,
            DocumentChunk.chunk_metadata,
            score,
        )
        .order_by(distance)
        .limit(top_k)
    )
    if min_score is not None:
        stmt = stmt.where(1 - distance >= min_score)

    result = await session.execute(stmt)
    return [
        ContextChunk(
            content=content,
            metadata=dict(metadata or {}),
            score=float(chunk_score),
        )
        for content, metadata, chunk_score in result.all()
    ]


async def upsert(session: AsyncSession, record: VectorRecord) -> None:
    """Insert *record*; an existing id is overwritten."""
    stmt = pg_insert(_TABLE).values(
        {
            COL_ID: record.id,
            COL_CONTENT: record.content,
            COL_EMBEDDING: record.embedding,
            COL_METADATA: {CONTENT_KEY: record.content, **record.metadata},
        }
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[COL_ID],
        set_={
            col: stmt.excluded[col]
            for col in (COL_CONTENT, COL_EMBEDDING, COL_METADATA)
        },
    )
    await session.execute(stmt)


class PgVectorStore:
    """Async repository for ``document_chunks``.

    Hides session lifecycle and SQL; callers use ``query`` / ``upsert``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._session_factory = session_factory

    async def query(
        self,
        vector: list[float],
        top_k: int,
        min_score: float | None = None,
    ) -> list[ContextChunk]:
        with tracer.start_as_current_span(SPAN_VECTOR_QUERY) as span:
            span.set_attribute(ATTR_VECTOR_TOP_K, top_k)
            if min_score is not None:
                span.set_attribute(ATTR_VECTOR_MIN_SCORE, min_score)
            start = time.monotonic()
            async with self._session_factory() as session:
                results = await query(session, vector, top_k, min_score)
            VECTOR_STORE_LATENCY_SECONDS.labels(operation="query").observe(
                time.monotonic() - start
            )
            span.set_attribute(ATTR_VECTOR_RESULT_COUNT, len(results))
            logger.debug(
                "Vector query: %d results (top_k=%d, min_score=%s)",
                len(results),
                top_k,
                min_score,
            )
            return results

    async def upsert(self, record: VectorRecord) -> None:
        """Write one record; commits the session."""
        start = time.monotonic()
        async with self._session_factory() as session:
            await upsert(session, record)
            await session.commit()
        VECTOR_STORE_LATENCY_SECONDS.labels(operation="upsert").observe(
            time.monotonic() - start
        )
