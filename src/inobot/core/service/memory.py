"""Conversation memory: summarize older turns, keep the recent window verbatim."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence

from inobot.configs.system import MemoryConfig

from .metrics import SUMMARIZATIONS_TOTAL
from .models import ConversationDigest, Message

logger = logging.getLogger(__name__)

Summarizer = Callable[[Sequence[Message]], Awaitable[str]]


class ConversationMemoryManager:
    """Builds a ``ConversationDigest`` from client-supplied history.

    Histories no longer than ``recent_window`` pass through untouched.
    Longer ones get exactly one summarization call for the older part.
    A failing or blank summary degrades to an empty digest flagged with
    ``summary_failed``.
    """

    def __init__(self, summarize: Summarizer, config: MemoryConfig) -> None:
        self._summarize = summarize
        self._window = max(config.recent_window, 1)

    async def build(self, history: Sequence[Message]) -> ConversationDigest:
        history = list(history)
        if len(history) <= self._window:
            return ConversationDigest(recent_turns=history)

        older = history[: -self._window]
        recent = history[-self._window :]

        try:
            digest = (await self._summarize(older)).strip()
        except Exception:
            logger.warning(
                "Summarizing %d older messages failed; continuing without digest",
                len(older),
                exc_info=True,
            )
            digest = ""
        else:
            if not digest:
                logger.warning(
                    "Summary of %d older messages was blank; continuing without digest",
                    len(older),
                )

        if not digest:
            SUMMARIZATIONS_TOTAL.labels(status="error").inc()
            return ConversationDigest(
                recent_turns=recent,
                summarized=False,
                summary_failed=True,
            )

        SUMMARIZATIONS_TOTAL.labels(status="ok").inc()
        logger.debug("Summarized %d older messages", len(older))
        return ConversationDigest(
            digest=digest,
            recent_turns=recent,
            summarized=True,
        )
