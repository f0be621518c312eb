"""Alembic environment for the document store.

The database URL comes from ``AppConfig`` so migrations see exactly what
the service sees: ``INOBOT_THIRD_PARTY__POSTGRES_URI``, then ``.env``,
then ``configs/config.yaml``.  An explicit ``-x db_url=...`` wins over
all of them.
"""

import asyncio

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine

from inobot.configs.config import get_app_config
from inobot.infra.db.models import Base

target_metadata = Base.metadata

# Created with raw SQL in the migrations; autogenerate cannot express them.
_UNMANAGED_INDEXES = frozenset({"ix_document_chunks_embedding_hnsw"})


def _database_url() -> str:
    override = context.get_x_argument(as_dictionary=True).get("db_url")
    return override or get_app_config().third_party.postgres_uri


def _include_object(obj, name, type_, reflected, compare_to) -> bool:
    return not (type_ == "index" and name in _UNMANAGED_INDEXES)


def run_migrations_offline() -> None:
    """Emit SQL without connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        include_object=_include_object,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=_include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply migrations through an asyncpg engine."""
    engine = create_async_engine(_database_url())
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
