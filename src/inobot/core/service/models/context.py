"""Per-request value objects flowing through the ask pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """One turn of client-held conversation history."""

    role: Literal["user", "assistant"] = Field(description="Who spoke")
    content: str = Field(description="Message text")
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the message was sent; defaults to now",
    )


@dataclass(frozen=True)
class ContextChunk:
    """A retrieved document chunk and its similarity score."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    score: float = 0.0


@dataclass(frozen=True)
class VectorRecord:
    """One chunk ready to be written to the vector store."""

    id: str
    embedding: list[float]
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ConversationDigest:
    """Summary of older turns plus the recent window kept verbatim.

    ``summary_failed`` is set when summarization was attempted and
    raised, so a degraded digest is distinguishable from a short history.
    """

    digest: str = ""
    recent_turns: list[Message] = field(default_factory=list)
    summarized: bool = False
    summary_failed: bool = False


@dataclass
class PromptPayload:
    """Everything the prompt builder renders.  Empty sections are omitted."""

    question: str
    context: str = ""
    live_data: str = ""
    digest: str = ""
    is_follow_up: bool = False
