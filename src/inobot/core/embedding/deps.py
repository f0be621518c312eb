"""Lifespan construction and per-request access for the embedding client."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from inobot.configs.config import AppConfig, get_app_config
from inobot.infra.lifespan import get_app

from .client import EmbeddingClient

logger = logging.getLogger(__name__)


async def build_embedding_client(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the shared ``EmbeddingClient`` and attach it to ``app.state``."""
    client = EmbeddingClient(config.embedding)
    app.state.embedding_client = client
    logger.info("Embedding client ready (model=%s)", client.model_name)
    yield
    await client.aclose()


def get_embedding_client(request: Request) -> EmbeddingClient:
    """Return the ``EmbeddingClient`` from ``app.state``."""
    return request.app.state.embedding_client
