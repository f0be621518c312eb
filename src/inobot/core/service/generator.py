"""Answer generation over a LangChain chat model.

Three capabilities share one ``BaseChatModel``:

- ``answer``: the grounded multi-turn reply (errors propagate as
  ``UpstreamError``)
- ``summarize``: condenses older conversation turns for the memory manager
- ``suggest_follow_ups``: three follow-up questions, falling back to a
  fixed list instead of failing the request
"""

from __future__ import annotations

import logging
import time
from typing import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
)

from inobot.configs.prompt import PromptConfig
from inobot.core.errors import UpstreamError

from .metrics import LLM_LATENCY_SECONDS
from .models import ROLE_ASSISTANT, Message

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3

OP_ANSWER = "answer"
OP_SUMMARIZE = "summarize"
OP_SUGGEST = "suggest"


def to_langchain_messages(turns: Sequence[Message]) -> list[BaseMessage]:
    """Map ``user`` to ``HumanMessage`` and ``assistant`` to ``AIMessage``."""
    return [
        AIMessage(content=t.content)
        if t.role == ROLE_ASSISTANT
        else HumanMessage(content=t.content)
        for t in turns
    ]


def format_transcript(turns: Sequence[Message]) -> str:
    """Render turns as ``role: content`` lines."""
    return "\n".join(f"{t.role}: {t.content}" for t in turns)


def _text_of(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    # Some providers return a list of content parts.
    return "".join(
        part.get("text", "") if isinstance(part, dict) else str(part)
        for part in content
    )


class AnswerGenerator:
    """Thin, typed facade over the chat model."""

    def __init__(self, llm: BaseChatModel, prompts: PromptConfig) -> None:
        self._llm = llm
        self._prompts = prompts

    async def _invoke(self, operation: str, messages: list[BaseMessage]) -> str:
        start = time.monotonic()
        try:
            response = await self._llm.ainvoke(messages)
        except Exception as exc:
            raise UpstreamError(f"Chat model call failed: {exc}") from exc
        finally:
            LLM_LATENCY_SECONDS.labels(operation=operation).observe(
                time.monotonic() - start
            )
        return _text_of(response).strip()

    async def answer(
        self,
        question: str,
        recent_turns: Sequence[Message],
        system_instruction: str,
    ) -> str:
        """One multi-turn exchange; raises ``UpstreamError`` on an empty reply."""
        messages: list[BaseMessage] = [
            SystemMessage(content=system_instruction),
            *to_langchain_messages(recent_turns),
            HumanMessage(content=question),
        ]
        logger.info(
            "Generating answer with %d recent turns in history",
            len(recent_turns),
        )
        text = await self._invoke(OP_ANSWER, messages)
        if not text:
            raise UpstreamError("Chat model returned an empty answer")
        return text

    async def summarize(self, messages: Sequence[Message]) -> str:
        if not messages:
            return ""
        prompt = (
            "<conversation_history>\n"
            f"{format_transcript(messages)}\n"
            "</conversation_history>"
        )
        summary = await self._invoke(
            OP_SUMMARIZE,
            [
                SystemMessage(content=self._prompts.summary_instruction),
                HumanMessage(content=prompt),
            ],
        )
        if not summary:
            raise UpstreamError("Chat model returned an empty summary")
        return summary

    async def suggest_follow_ups(
        self, answer: str, conversation_context: str
    ) -> list[str]:
        prompt = (
            "<context>\n"
            f"<assistant_response>\n{answer}\n</assistant_response>\n\n"
            f"<conversation_context>\n{conversation_context}\n"
            "</conversation_context>\n"
            "</context>"
        )
        try:
            text = await self._invoke(
                OP_SUGGEST,
                [
                    SystemMessage(content=self._prompts.suggestion_instruction),
                    HumanMessage(content=prompt),
                ],
            )
        except UpstreamError:
            logger.warning("Follow-up suggestion call failed", exc_info=True)
            return list(self._prompts.error_suggestions)

        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            logger.info("Empty follow-up suggestions; using defaults")
            return list(self._prompts.default_suggestions)
        return lines[:MAX_SUGGESTIONS]
