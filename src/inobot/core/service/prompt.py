"""System instruction rendering for the answer model.

The rendered prompt always has the same section order:

1. identity preamble
2. ``<knowledge_base>`` (static context, then optional live data and
   conversation history)
3. ``<user_query type="initial|follow_up">``
4. ``<instructions>``

Wording comes from ``PromptConfig`` (``configs/prompt.yml``).
"""

from __future__ import annotations

from typing import Iterable

from inobot.configs.prompt import PromptConfig

from .models import QUERY_TYPE_FOLLOW_UP, QUERY_TYPE_INITIAL, PromptPayload

IDENTITY_PROMPT = (
    "You are {assistant_name}, the AI assistant for {organization} "
    "({handles}). You ONLY answer questions about {organization}, and you "
    "MUST only use the provided knowledge base to answer."
)

INSTRUCTIONS_COMMON = [
    "Answer ONLY from the knowledge base above. NEVER make up or infer "
    "information that is not explicitly provided, and NEVER use external "
    "knowledge.",
    'If the answer is not in the knowledge base, respond exactly: "{fallback}"',
    'For off-topic questions, respond exactly: "{refusal}"',
    "Respond with clean, semantic HTML structured inside a body tag. "
    "NO markdown formatting, NO inline styles, NO CSS.",
    "Keep a friendly, helpful tone and use emojis sparingly.",
]

INSTRUCTION_TOPICS = "Valid topics: {topics}"
INSTRUCTION_NEXT_STEPS = "Provide actionable next steps when applicable."
INSTRUCTION_BUILD_ON_HISTORY = (
    "Build naturally on the previous conversation context."
)


def is_follow_up_question(question: str, indicators: Iterable[str]) -> bool:
    """True when any indicator occurs as a substring of the lower-cased question."""
    lowered = question.lower()
    return any(indicator in lowered for indicator in indicators)


def _section(tag: str, body: str, **attrs: str) -> str:
    rendered_attrs = "".join(f' {k}="{v}"' for k, v in attrs.items())
    return f"<{tag}{rendered_attrs}>\n{body}\n</{tag}>"


class PromptBuilder:
    """Renders the system instruction from a ``PromptConfig``."""

    def __init__(self, config: PromptConfig) -> None:
        self._config = config

    def identity(self) -> str:
        return IDENTITY_PROMPT.format(
            assistant_name=self._config.assistant_name,
            organization=self._config.organization,
            handles=self._config.organization_handles,
        )

    def instructions(self, is_follow_up: bool) -> list[str]:
        cfg = self._config
        rules = [
            rule.format(fallback=cfg.fallback_message, refusal=cfg.refusal_message)
            for rule in INSTRUCTIONS_COMMON
        ]
        if is_follow_up:
            rules.append(INSTRUCTION_BUILD_ON_HISTORY)
        else:
            rules.append(
                INSTRUCTION_TOPICS.format(topics=", ".join(cfg.valid_topics))
            )
            rules.append(INSTRUCTION_NEXT_STEPS)
        return rules

    def build(
        self,
        question: str,
        context: str,
        live_data: str = "",
        digest: str = "",
        is_follow_up: bool = False,
    ) -> str:
        knowledge = [_section("static_context", context)]
        if live_data:
            knowledge.append(_section("live_data", live_data))
        if digest:
            knowledge.append(_section("conversation_history", digest))

        query_type = QUERY_TYPE_FOLLOW_UP if is_follow_up else QUERY_TYPE_INITIAL
        rules = "\n".join(f"- {rule}" for rule in self.instructions(is_follow_up))

        return "\n\n".join(
            [
                self.identity(),
                _section("knowledge_base", "\n\n".join(knowledge)),
                _section("user_query", question, type=query_type),
                _section("instructions", rules),
            ]
        )

    def build_from_payload(self, payload: PromptPayload) -> str:
        return self.build(
            question=payload.question,
            context=payload.context,
            live_data=payload.live_data,
            digest=payload.digest,
            is_follow_up=payload.is_follow_up,
        )
