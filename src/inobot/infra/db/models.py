"""SQLAlchemy ORM models.

All tables are managed by Alembic migrations.  The ``Base.metadata``
naming convention ensures deterministic constraint names for
auto-generated migrations.
"""

from datetime import datetime
from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared declarative base with explicit naming convention."""


Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


EMBEDDING_DIMENSIONS = 768
"""Must match ``EmbeddingConfig.dimensions`` in ``configs/system.py``.
Changing this value requires an alembic migration to ALTER the
``Vector()`` column."""


class DocumentChunk(Base):
    """One embedded slice of an uploaded document.

    Rows are insert-only: re-uploading a file creates new rows with new
    ids.  ``metadata`` holds the source filename, chunk index, public URL
    and any caller-supplied keys.
    """

    __tablename__ = "document_chunks"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(
        Vector(EMBEDDING_DIMENSIONS),
        nullable=False,
    )
    # ``metadata`` is reserved on declarative classes.
    chunk_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        server_default="{}",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_document_chunks_created_at", "created_at"),)

    def __repr__(self) -> str:
        return f"<DocumentChunk(id={self.id!r}, content_len={len(self.content)})>"
