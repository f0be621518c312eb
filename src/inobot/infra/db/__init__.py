"""Database layer: ORM models and the pgvector document store."""

from .engine import build_db, get_vector_store
from .models import EMBEDDING_DIMENSIONS, Base, DocumentChunk
from .vector_store import PgVectorStore

__all__ = [
    "EMBEDDING_DIMENSIONS",
    "Base",
    "DocumentChunk",
    "PgVectorStore",
    "build_db",
    "get_vector_store",
]
