"""Pydantic models for the HTTP API.

Wire names are camelCase (``conversationHistory``, ``fileUrl``); Python
attributes stay snake_case.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from inobot.core.ingestion import UploadResult
from inobot.core.service.models import AskResult, Message

logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# /ask
# ---------------------------------------------------------------------------


class AskRequest(_CamelModel):
    """Request model for the ask endpoint.

    Fields are typed loosely; ``validate_question`` and
    ``filter_history`` apply the real rules so that bad input becomes a
    400 ``VALIDATION_ERROR`` instead of a schema error.
    """

    question: Any = Field(default=None, description="User question")
    conversation_history: Any = Field(
        default_factory=list,
        description="Client-held previous messages, oldest first",
    )


def filter_history(raw: Any) -> list[Message]:
    """Keep only well-formed user/assistant messages, in order."""
    if not isinstance(raw, list):
        return []

    history: list[Message] = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("content"), str):
            continue
        try:
            history.append(Message.model_validate(item))
        except ValidationError:
            # Bad timestamp only: keep the message, stamp it now.
            try:
                history.append(
                    Message.model_validate(
                        {"role": item.get("role"), "content": item["content"]}
                    )
                )
            except ValidationError:
                continue
    if len(history) != len(raw):
        logger.debug("Dropped %d malformed history entries", len(raw) - len(history))
    return history


class AskResponse(_CamelModel):
    answer: str = Field(description="HTML answer")
    references: list[dict[str, Any]] = Field(
        default_factory=list, description="Metadata of the chunks used"
    )
    follow_up_suggestions: list[str] | None = Field(
        default=None, description="Present only when history was sent"
    )

    @classmethod
    def from_result(cls, result: AskResult) -> "AskResponse":
        return cls(
            answer=result.answer,
            references=result.references,
            follow_up_suggestions=result.follow_up_suggestions or None,
        )


# ---------------------------------------------------------------------------
# /upload
# ---------------------------------------------------------------------------


class UploadResponse(_CamelModel):
    success: bool = True
    key: str
    file_url: str
    text_extracted: bool
    chunks_created: int
    chunks_processed: int
    chunks_skipped: int
    vectorization_errors: list[str] | None = None
    message: str

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadResponse":
        ingestion = result.ingestion
        return cls(
            key=result.key,
            file_url=result.file_url,
            text_extracted=ingestion.text_extracted,
            chunks_created=ingestion.chunks_created,
            chunks_processed=ingestion.chunks_processed,
            chunks_skipped=ingestion.chunks_skipped,
            vectorization_errors=ingestion.errors or None,
            message=result.message,
        )


# ---------------------------------------------------------------------------
# /feedback, errors, health
# ---------------------------------------------------------------------------


class FeedbackResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    detail: str = Field(description="Human-readable error message")
    code: str = Field(description="Stable machine-readable error code")


class HealthResponse(BaseModel):
    status: str = "ok"
