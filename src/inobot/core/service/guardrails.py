"""Pre-generation gates: domain relevance and live-data need.

``RelevanceGuardrail`` decides whether a question belongs to the
organization's knowledge domain by checking that at least one stored
chunk is similar enough.  ``LiveDataTrigger`` scores a question for
temporal phrasing; it is pure and performs no I/O.
"""

from __future__ import annotations

import logging
import re

from inobot.configs.system import LiveDataConfig, RagConfig

from .metrics import GUARDRAIL_DECISIONS_TOTAL
from .models import (
    GUARDRAIL_DISABLED,
    GUARDRAIL_EMPTY,
    GUARDRAIL_FAIL_OPEN,
    GUARDRAIL_MATCHED,
    GUARDRAIL_NO_MATCH,
    Embedder,
    GuardrailOutcome,
    LiveDataDecision,
    VectorStore,
)

logger = logging.getLogger(__name__)


class RelevanceGuardrail:
    """Embedding-similarity check against the document store.

    Fails open: any embedding or store error lets the question through
    with ``reason="fail_open"``.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        config: RagConfig,
    ) -> None:
        self._embedder = embedder
        self._store = store
        self._config = config

    async def check(self, question: str) -> GuardrailOutcome:
        outcome = await self._check(question)
        GUARDRAIL_DECISIONS_TOTAL.labels(reason=outcome.reason).inc()
        return outcome

    async def is_in_scope(self, question: str) -> bool:
        return (await self.check(question)).in_scope

    async def _check(self, question: str) -> GuardrailOutcome:
        if not question or not question.strip():
            return GuardrailOutcome(in_scope=False, reason=GUARDRAIL_EMPTY)

        if not self._config.guardrail_enabled:
            return GuardrailOutcome(in_scope=True, reason=GUARDRAIL_DISABLED)

        embedding: list[float] | None = None
        try:
            embedding = await self._embedder.embed(question)
            matches = await self._store.query(
                embedding,
                top_k=self._config.guardrail_top_k,
                min_score=self._config.guardrail_threshold,
            )
        except Exception:
            logger.warning(
                "Relevance check failed; allowing question through",
                exc_info=True,
            )
            return GuardrailOutcome(
                in_scope=True,
                reason=GUARDRAIL_FAIL_OPEN,
                embedding=embedding,
            )

        count = len(matches)
        in_scope = count >= self._config.guardrail_min_matches
        logger.info(
            "Relevance check: %d matches >= %.2f (in_scope=%s)",
            count,
            self._config.guardrail_threshold,
            in_scope,
        )
        return GuardrailOutcome(
            in_scope=in_scope,
            reason=GUARDRAIL_MATCHED if in_scope else GUARDRAIL_NO_MATCH,
            match_count=count,
            embedding=embedding,
        )


class LiveDataTrigger:
    """Weighted keyword + phrasing score deciding whether to fetch live data."""

    def __init__(self, config: LiveDataConfig) -> None:
        self._config = config
        self._patterns = [
            (re.compile(b.pattern, re.IGNORECASE), b.bonus)
            for b in config.pattern_bonuses
        ]

    def evaluate(self, question: str) -> LiveDataDecision:
        normalized = (question or "").strip().lower()
        if not normalized:
            return LiveDataDecision(score=0.0, needs_live_data=False)

        matched = [
            keyword
            for keyword in self._config.keyword_weights
            if keyword in normalized
        ]
        score = sum(self._config.keyword_weights[k] for k in matched)
        for pattern, bonus in self._patterns:
            if pattern.search(normalized):
                score += bonus

        # Round so that 0.3 + 0.3 compares equal to a 0.6 threshold.
        score = round(score, 6)
        return LiveDataDecision(
            score=score,
            needs_live_data=score >= self._config.threshold,
            matched_keywords=matched,
        )

    def needs_live_data(self, question: str) -> bool:
        return self.evaluate(question).needs_live_data
