"""FastAPI application entry point."""

import logging
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inobot.api.ask import router as ask_router
from inobot.api.exceptions import register_exception_handlers
from inobot.api.feedback import router as feedback_router
from inobot.api.health import router as health_router
from inobot.api.upload import router as upload_router
from inobot.configs.config import get_app_config
from inobot.core.embedding import build_embedding_client
from inobot.core.feedback import build_feedback
from inobot.core.live_data import build_live_data
from inobot.core.llm import build_llm
from inobot.core.service.metrics import setup_metrics
from inobot.core.storage import build_storage
from inobot.infra.db import build_db
from inobot.infra.lifespan import inject
from inobot.infra.logging import setup_logging
from inobot.infra.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from inobot.infra.telemetry import init_telemetry

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _db: Annotated[None, Depends(build_db)],
    _embedding: Annotated[None, Depends(build_embedding_client)],
    _llm: Annotated[None, Depends(build_llm)],
    _live_data: Annotated[None, Depends(build_live_data)],
    _storage: Annotated[None, Depends(build_storage)],
    _feedback: Annotated[None, Depends(build_feedback)],
):
    """Application lifespan: every dependency above is built on startup
    and torn down in reverse order on shutdown."""
    logger.info("InoBot started")
    yield
    logger.info("InoBot shutting down")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="InoBot",
        description="Retrieval-augmented question answering over the "
        "Inovus Labs knowledge base",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    # Middleware can only be added before the app starts serving.
    init_telemetry(app, config.tracing)
    setup_metrics(app, config)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(ask_router)
    app.include_router(upload_router)
    app.include_router(feedback_router)

    return app


app = get_app()
