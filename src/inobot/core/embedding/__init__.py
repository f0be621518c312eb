"""Embedding infrastructure -- client and lifespan wiring."""

from .client import EmbeddingClient
from .deps import build_embedding_client, get_embedding_client

__all__ = [
    "EmbeddingClient",
    "build_embedding_client",
    "get_embedding_client",
]
