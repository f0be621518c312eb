"""Ask API endpoint implementation."""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter

from inobot.configs.system import APIConfig
from inobot.core.errors import InputValidationError, RequestTimeoutError

from .deps import AppConfigDep, AskPipelineDep
from .models import AskRequest, AskResponse, ErrorResponse, filter_history

logger = logging.getLogger(__name__)

INVALID_QUESTION_DETAIL = "Invalid or too short question."

router = APIRouter(prefix="/api/v1", tags=["ask"])


def validate_question(question: Any, config: APIConfig) -> str:
    """Return *question* if it is a string of acceptable length."""
    if not isinstance(question, str):
        raise InputValidationError(INVALID_QUESTION_DETAIL)
    if not config.min_question_length <= len(question) <= config.max_question_length:
        raise InputValidationError(INVALID_QUESTION_DETAIL)
    return question


@router.post(
    "/ask",
    response_model=AskResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def ask(
    ask_request: AskRequest,
    pipeline: AskPipelineDep,
    config: AppConfigDep,
) -> AskResponse:
    """Answer one question, grounded in the document store.

    The conversation history is owned by the client and sent whole with
    every request; malformed entries are dropped silently.
    ``followUpSuggestions`` is present only when history was sent.
    """
    question = validate_question(ask_request.question, config.api)
    history = filter_history(ask_request.conversation_history)

    timeout = config.api.request_timeout.total_seconds()
    try:
        result = await asyncio.wait_for(pipeline.run(question, history), timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("Ask pipeline exceeded %.1fs", timeout)
        raise RequestTimeoutError(f"Ask timed out after {timeout:.1f}s") from exc

    return AskResponse.from_result(result)
