"""Collaborator protocols the pipeline depends on.

Concrete implementations live in ``core.embedding``, ``infra.db``,
``core.live_data`` and ``core.storage``; tests substitute fakes.
"""

from typing import Protocol

from .context import ContextChunk, VectorRecord
from .outcomes import LiveDataResult


class Embedder(Protocol):
    async def embed(self, text: str) -> list[float]: ...


class VectorStore(Protocol):
    async def query(
        self,
        vector: list[float],
        top_k: int,
        min_score: float | None = None,
    ) -> list[ContextChunk]: ...

    async def upsert(self, record: VectorRecord) -> None: ...


class LiveDataProvider(Protocol):
    async def fetch(self) -> LiveDataResult: ...


class BlobStorage(Protocol):
    async def put(self, key: str, data: bytes, content_type: str) -> None: ...
