"""FastAPI dependency factories for the ask pipeline.

Long-lived clients come from ``app.state`` (created in lifespan).
``get_ask_pipeline`` is a per-request ``Depends`` factory with an
explicit parameter chain.
"""

from typing import Annotated

from fastapi import Depends
from langchain_core.language_models import BaseChatModel

from inobot.configs.config import AppConfig, get_app_config
from inobot.core.embedding import EmbeddingClient, get_embedding_client
from inobot.core.live_data import LiveDataSource, get_live_data_source
from inobot.core.llm import get_llm
from inobot.infra.db import PgVectorStore, get_vector_store

from .generator import AnswerGenerator
from .rag import AskPipeline


def get_answer_generator(
    llm: Annotated[BaseChatModel, Depends(get_llm)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AnswerGenerator:
    return AnswerGenerator(llm, config.prompt)


def get_ask_pipeline(
    config: Annotated[AppConfig, Depends(get_app_config)],
    embedder: Annotated[EmbeddingClient, Depends(get_embedding_client)],
    store: Annotated[PgVectorStore, Depends(get_vector_store)],
    generator: Annotated[AnswerGenerator, Depends(get_answer_generator)],
    live_data: Annotated[LiveDataSource, Depends(get_live_data_source)],
) -> AskPipeline:
    """Create a configured ask pipeline per request."""
    return AskPipeline(config, embedder, store, generator, live_data)
