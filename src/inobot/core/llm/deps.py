"""Chat model construction and per-request access."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from inobot.configs.config import AppConfig, get_app_config
from inobot.configs.system import LLMConfig
from inobot.infra.lifespan import get_app

logger = logging.getLogger(__name__)


def create_llm(config: LLMConfig) -> ChatOpenAI:
    """Create a ``ChatOpenAI`` against the configured OpenAI-compatible endpoint."""
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=config.api_key or "unused",
        model=config.model_name,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.model_timeout.total_seconds(),
        top_p=config.top_p,
        max_retries=config.max_retries,
    )


async def build_llm(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the shared chat model and attach it to ``app.state``."""
    app.state.llm = create_llm(config.llm)
    logger.info("Chat model ready (model=%s)", config.llm.model_name)
    yield


def get_llm(request: Request) -> BaseChatModel:
    """Return the chat model from ``app.state``."""
    return request.app.state.llm
