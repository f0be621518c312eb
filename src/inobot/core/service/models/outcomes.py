"""Explicit outcome objects returned by optional collaborators."""

from dataclasses import dataclass, field
from typing import Any

from .constants import GUARDRAIL_DISABLED, GUARDRAIL_FAIL_OPEN


@dataclass
class GuardrailOutcome:
    """Result of one relevance check.

    ``embedding`` carries the question vector when it was computed so
    retrieval can reuse it.
    """

    in_scope: bool
    reason: str
    match_count: int = 0
    embedding: list[float] | None = None

    @property
    def checked(self) -> bool:
        """False when the decision did not come from the vector store."""
        return self.reason not in (GUARDRAIL_DISABLED, GUARDRAIL_FAIL_OPEN)


@dataclass
class LiveDataDecision:
    """Score and verdict of the live-data trigger."""

    score: float
    needs_live_data: bool
    matched_keywords: list[str] = field(default_factory=list)


@dataclass
class LiveDataResult:
    """What a live-data fetch produced.  ``text`` is empty unless ``ok``."""

    text: str
    status: str


@dataclass
class AskResult:
    """Final answer returned by the ask pipeline."""

    answer: str
    references: list[dict[str, Any]] = field(default_factory=list)
    follow_up_suggestions: list[str] | None = None
    rejected: bool = False
