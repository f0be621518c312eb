"""Lifespan construction and per-request access for feedback delivery."""

from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import Depends, FastAPI, Request

from inobot.configs.config import AppConfig, get_app_config
from inobot.infra.lifespan import get_app

from .discord import DiscordWebhookNotifier
from .service import FeedbackService
from .turnstile import TurnstileVerifier


async def build_feedback(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the shared HTTP client used for captcha and webhook calls."""
    client = httpx.AsyncClient(timeout=config.feedback.timeout.total_seconds())
    app.state.feedback_http_client = client
    yield
    await client.aclose()


def get_feedback_service(
    request: Request,
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> FeedbackService:
    client: httpx.AsyncClient = request.app.state.feedback_http_client
    return FeedbackService(
        TurnstileVerifier(client, config.feedback),
        DiscordWebhookNotifier(client, config.feedback),
        config.feedback,
    )
