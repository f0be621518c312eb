"""Live operational data source.

``LiveDataSource.fetch`` never raises: every failure is reported through
``LiveDataResult.status`` so the ask pipeline can carry on without it.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import Depends, FastAPI, Request

from inobot.configs.config import AppConfig, get_app_config
from inobot.configs.system import ThirdPartyConfig
from inobot.core.service.metrics import LIVE_DATA_FETCHES_TOTAL
from inobot.core.service.models import (
    LIVE_DATA_EMPTY,
    LIVE_DATA_FAILED,
    LIVE_DATA_NOT_CONFIGURED,
    LIVE_DATA_OK,
    LiveDataResult,
)
from inobot.infra.lifespan import get_app

logger = logging.getLogger(__name__)


class LiveDataSource:
    """GETs the configured live-data endpoint and returns its body as text."""

    def __init__(self, client: httpx.AsyncClient, url: str) -> None:
        self._client = client
        self._url = url

    async def fetch(self) -> LiveDataResult:
        result = await self._fetch()
        LIVE_DATA_FETCHES_TOTAL.labels(status=result.status).inc()
        return result

    async def _fetch(self) -> LiveDataResult:
        if not self._url:
            return LiveDataResult(text="", status=LIVE_DATA_NOT_CONFIGURED)

        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Live data fetch failed: %s", exc)
            return LiveDataResult(text="", status=LIVE_DATA_FAILED)

        text = response.text.strip()
        if not text:
            return LiveDataResult(text="", status=LIVE_DATA_EMPTY)
        return LiveDataResult(text=text, status=LIVE_DATA_OK)


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


def create_live_data_client(config: ThirdPartyConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=config.live_data_timeout.total_seconds())


async def build_live_data(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the shared live-data source and attach it to ``app.state``."""
    client = create_live_data_client(config.third_party)
    app.state.live_data_source = LiveDataSource(
        client, config.third_party.live_data_url
    )
    if not config.third_party.live_data_url:
        logger.info("Live data URL not configured; live data disabled")
    yield
    await client.aclose()


def get_live_data_source(request: Request) -> LiveDataSource:
    """Return the ``LiveDataSource`` from ``app.state``."""
    return request.app.state.live_data_source
