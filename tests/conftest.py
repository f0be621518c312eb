"""Shared fixtures: default config and in-memory collaborators."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from inobot.configs.config import AppConfig
from inobot.core.service.models import ContextChunk, Message

QUESTION_VECTOR = [0.1, 0.2, 0.3]


def _make_history(n: int) -> list[Message]:
    """*n* alternating user / assistant turns, user first."""
    return [
        Message(
            role="user" if i % 2 == 0 else "assistant",
            content=f"turn {i}",
        )
        for i in range(n)
    ]


@pytest.fixture
def config() -> AppConfig:
    """Field defaults only; ``model_construct`` bypasses env, ``.env`` and YAML."""
    return AppConfig.model_construct()


@pytest.fixture
def make_history():
    return _make_history


@pytest.fixture
def question_vector() -> list[float]:
    return list(QUESTION_VECTOR)


@pytest.fixture
def embedder() -> MagicMock:
    embedder = MagicMock()
    embedder.embed = AsyncMock(return_value=list(QUESTION_VECTOR))
    return embedder


@pytest.fixture
def chunks() -> list[ContextChunk]:
    return [
        ContextChunk(
            content="Inovus Labs is the innovation and entrepreneurship "
            "development centre of Kristu Jyoti College.",
            metadata={"filename": "about.md", "chunk_index": 0},
            score=0.91,
        ),
        ContextChunk(
            content="Inovus Labs runs workshops, mentorship programs and "
            "startup incubation for students.",
            metadata={"filename": "programs.md", "chunk_index": 2},
            score=0.84,
        ),
    ]


@pytest.fixture
def store(chunks) -> MagicMock:
    store = MagicMock()
    store.query = AsyncMock(return_value=list(chunks))
    store.upsert = AsyncMock(return_value=None)
    return store
