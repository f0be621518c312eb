"""Engine lifecycle and per-request access to the document store.

``build_db`` runs in the lifespan: it opens the async engine for the
pgvector database, instruments it for tracing and disposes it on
shutdown.  Requests get a ``PgVectorStore`` bound to the shared session
factory.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inobot.configs.config import AppConfig, get_app_config
from inobot.configs.system import ThirdPartyConfig
from inobot.infra.lifespan import get_app
from inobot.infra.telemetry import instrument_sqlalchemy

from .vector_store import PgVectorStore

logger = logging.getLogger(__name__)


def create_engine(config: ThirdPartyConfig) -> AsyncEngine:
    return create_async_engine(
        config.postgres_uri,
        pool_pre_ping=True,
        pool_size=config.postgres_pool_size,
        max_overflow=config.postgres_max_overflow,
    )


async def build_db(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Attach the engine and session factory to ``app.state``."""
    engine = create_engine(config.third_party)
    instrument_sqlalchemy(engine)
    app.state.engine = engine
    app.state.session_factory = async_sessionmaker(engine, expire_on_commit=False)
    logger.info("Vector database engine ready")
    yield
    await engine.dispose()


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_vector_store(
    sf: Annotated[
        async_sessionmaker[AsyncSession],
        Depends(get_session_factory),
    ],
) -> PgVectorStore:
    """Return the document-chunk vector store for this app."""
    return PgVectorStore(sf)
