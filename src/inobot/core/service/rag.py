"""Ask pipeline -- LangGraph StateGraph over the question-answering steps.

Pipeline nodes:
    guardrail ─┬─ (rejected) → refuse → END
               └─ (accepted) → embed_query → retrieve_topk → live_data
                              → build_memory → build_prompt → generate
                              → suggest → END

The relevance guardrail reuses its question embedding for retrieval when
it computed one.  Errors from embedding, retrieval or generation abort the
run and propagate to the API layer; the guardrail, live data,
summarization and suggestions degrade instead.
"""

from __future__ import annotations

import logging
import time
from typing import Sequence, TypedDict

from langgraph.graph import END, START, StateGraph

from inobot.configs.config import AppConfig
from inobot.core.errors import UpstreamError
from inobot.infra.telemetry import (
    ATTR_ASK_HISTORY_LEN,
    ATTR_ASK_IS_FOLLOW_UP,
    ATTR_ASK_QUESTION_LEN,
    ATTR_ASK_RESULT_COUNT,
    ATTR_ASK_TOP_K,
    SPAN_ASK_GENERATE,
    SPAN_ASK_PIPELINE,
    SPAN_ASK_RETRIEVE,
    tracer,
)

from .context import assemble_context
from .generator import AnswerGenerator, format_transcript
from .guardrails import LiveDataTrigger, RelevanceGuardrail
from .memory import ConversationMemoryManager
from .metrics import (
    LIVE_DATA_FETCHES_TOTAL,
    RAG_RETRIEVAL_LATENCY_SECONDS,
    RAG_SOURCES_RETURNED,
    observe_ask,
)
from .models import (
    AskResult,
    ContextChunk,
    ConversationDigest,
    Embedder,
    GuardrailOutcome,
    LiveDataProvider,
    Message,
    VectorStore,
)
from .prompt import PromptBuilder, is_follow_up_question

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Node / edge constants  (avoid magic strings)
# ---------------------------------------------------------------------------

NODE_GUARDRAIL = "guardrail"
NODE_REFUSE = "refuse"
NODE_EMBED_QUERY = "embed_query"
NODE_RETRIEVE_TOPK = "retrieve_topk"
NODE_LIVE_DATA = "live_data"
NODE_BUILD_MEMORY = "build_memory"
NODE_BUILD_PROMPT = "build_prompt"
NODE_GENERATE = "generate"
NODE_SUGGEST = "suggest"

ROUTE_REJECTED = "rejected"
ROUTE_ACCEPTED = "accepted"

LIVE_DATA_SKIPPED_DISABLED = "disabled"
LIVE_DATA_SKIPPED_NOT_NEEDED = "not_needed"

# State field keys
KEY_QUESTION = "question"
KEY_HISTORY = "history"
KEY_GUARDRAIL = "guardrail"
KEY_QUERY_EMBEDDING = "query_embedding"
KEY_CHUNKS = "chunks"
KEY_LIVE_DATA = "live_data"
KEY_DIGEST = "digest"
KEY_IS_FOLLOW_UP = "is_follow_up"
KEY_SYSTEM_PROMPT = "system_prompt"
KEY_ANSWER = "answer"
KEY_FOLLOW_UPS = "follow_ups"
KEY_REJECTED = "rejected"

# ---------------------------------------------------------------------------
# Graph state
# ---------------------------------------------------------------------------


class AskState(TypedDict, total=False):
    """Typed state threaded through every node in the ask graph."""

    question: str
    history: list[Message]

    guardrail: GuardrailOutcome
    query_embedding: list[float]
    chunks: list[ContextChunk]
    live_data: str
    digest: ConversationDigest
    is_follow_up: bool
    system_prompt: str

    answer: str
    follow_ups: list[str] | None
    rejected: bool


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AskPipeline:
    """Question answering over the document store.

    The graph is compiled once at construction.  Node functions are bound
    methods so they have full access to the collaborators and config.
    """

    def __init__(
        self,
        config: AppConfig,
        embedder: Embedder,
        store: VectorStore,
        generator: AnswerGenerator,
        live_data: LiveDataProvider,
    ) -> None:
        self._config = config
        self._rag_config = config.rag
        self._embedder = embedder
        self._store = store
        self._generator = generator
        self._live_data = live_data

        self._guardrail = RelevanceGuardrail(embedder, store, config.rag)
        self._trigger = LiveDataTrigger(config.live_data)
        self._memory = ConversationMemoryManager(
            generator.summarize, config.memory
        )
        self._prompt_builder = PromptBuilder(config.prompt)

        self._graph = self._build_graph()

    # ------------------------------------------------------------------
    # Graph construction
    # ------------------------------------------------------------------

    def _build_graph(self):
        builder: StateGraph = StateGraph(AskState)

        builder.add_node(NODE_GUARDRAIL, self._guardrail_node)
        builder.add_node(NODE_REFUSE, self._refuse_node)
        builder.add_node(NODE_EMBED_QUERY, self._embed_query_node)
        builder.add_node(NODE_RETRIEVE_TOPK, self._retrieve_topk_node)
        builder.add_node(NODE_LIVE_DATA, self._live_data_node)
        builder.add_node(NODE_BUILD_MEMORY, self._build_memory_node)
        builder.add_node(NODE_BUILD_PROMPT, self._build_prompt_node)
        builder.add_node(NODE_GENERATE, self._generate_node)
        builder.add_node(NODE_SUGGEST, self._suggest_node)

        builder.add_edge(START, NODE_GUARDRAIL)
        builder.add_conditional_edges(
            NODE_GUARDRAIL,
            self._route_after_guardrail,
            {ROUTE_REJECTED: NODE_REFUSE, ROUTE_ACCEPTED: NODE_EMBED_QUERY},
        )
        builder.add_edge(NODE_REFUSE, END)
        builder.add_edge(NODE_EMBED_QUERY, NODE_RETRIEVE_TOPK)
        builder.add_edge(NODE_RETRIEVE_TOPK, NODE_LIVE_DATA)
        builder.add_edge(NODE_LIVE_DATA, NODE_BUILD_MEMORY)
        builder.add_edge(NODE_BUILD_MEMORY, NODE_BUILD_PROMPT)
        builder.add_edge(NODE_BUILD_PROMPT, NODE_GENERATE)
        builder.add_edge(NODE_GENERATE, NODE_SUGGEST)
        builder.add_edge(NODE_SUGGEST, END)

        return builder.compile()

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    @staticmethod
    def _route_after_guardrail(state: AskState) -> str:
        return ROUTE_REJECTED if state.get(KEY_REJECTED) else ROUTE_ACCEPTED

    # ------------------------------------------------------------------
    # Node: guardrail
    # ------------------------------------------------------------------

    async def _guardrail_node(self, state: AskState) -> dict:
        outcome = await self._guardrail.check(state[KEY_QUESTION])
        update: dict = {KEY_GUARDRAIL: outcome, KEY_REJECTED: not outcome.in_scope}
        if outcome.embedding:
            update[KEY_QUERY_EMBEDDING] = outcome.embedding
        return update

    # ------------------------------------------------------------------
    # Node: refuse  (out-of-domain; no model call)
    # ------------------------------------------------------------------

    def _refuse_node(self, state: AskState) -> dict:
        logger.info(
            "Question rejected by relevance guardrail (%s)",
            state[KEY_GUARDRAIL].reason,
        )
        return {
            KEY_ANSWER: self._config.prompt.refusal_message,
            KEY_CHUNKS: [],
            KEY_FOLLOW_UPS: None,
        }

    # ------------------------------------------------------------------
    # Node: embed_query
    # ------------------------------------------------------------------

    async def _embed_query_node(self, state: AskState) -> dict:
        if state.get(KEY_QUERY_EMBEDDING):
            return {}
        return {KEY_QUERY_EMBEDDING: await self._embedder.embed(state[KEY_QUESTION])}

    # ------------------------------------------------------------------
    # Node: retrieve_topk
    # ------------------------------------------------------------------

    async def _retrieve_topk_node(self, state: AskState) -> dict:
        with tracer.start_as_current_span(SPAN_ASK_RETRIEVE) as span:
            span.set_attribute(ATTR_ASK_TOP_K, self._rag_config.top_k)

            start = time.monotonic()
            try:
                chunks = await self._store.query(
                    state[KEY_QUERY_EMBEDDING],
                    top_k=self._rag_config.top_k,
                    min_score=self._rag_config.similarity_threshold,
                )
            except UpstreamError:
                raise
            except Exception as exc:
                raise UpstreamError(f"Vector search failed: {exc}") from exc

            RAG_RETRIEVAL_LATENCY_SECONDS.observe(time.monotonic() - start)
            RAG_SOURCES_RETURNED.observe(len(chunks))
            span.set_attribute(ATTR_ASK_RESULT_COUNT, len(chunks))
            logger.info("RAG: retrieved %d chunks", len(chunks))
            return {KEY_CHUNKS: chunks}

    # ------------------------------------------------------------------
    # Node: live_data
    # ------------------------------------------------------------------

    async def _live_data_node(self, state: AskState) -> dict:
        if not self._config.live_data.enabled:
            LIVE_DATA_FETCHES_TOTAL.labels(status=LIVE_DATA_SKIPPED_DISABLED).inc()
            return {KEY_LIVE_DATA: ""}

        decision = self._trigger.evaluate(state[KEY_QUESTION])
        logger.debug(
            "Live data check: score=%.2f keywords=%s needs=%s",
            decision.score,
            decision.matched_keywords,
            decision.needs_live_data,
        )
        if not decision.needs_live_data:
            LIVE_DATA_FETCHES_TOTAL.labels(status=LIVE_DATA_SKIPPED_NOT_NEEDED).inc()
            return {KEY_LIVE_DATA: ""}

        result = await self._live_data.fetch()
        return {KEY_LIVE_DATA: result.text}

    # ------------------------------------------------------------------
    # Node: build_memory
    # ------------------------------------------------------------------

    async def _build_memory_node(self, state: AskState) -> dict:
        return {KEY_DIGEST: await self._memory.build(state.get(KEY_HISTORY, []))}

    # ------------------------------------------------------------------
    # Node: build_prompt
    # ------------------------------------------------------------------

    def _build_prompt_node(self, state: AskState) -> dict:
        question = state[KEY_QUESTION]
        is_follow_up = is_follow_up_question(
            question, self._config.prompt.follow_up_indicators
        )
        payload = assemble_context(
            question,
            state.get(KEY_CHUNKS, []),
            live_data=state.get(KEY_LIVE_DATA),
            digest=state[KEY_DIGEST].digest,
            is_follow_up=is_follow_up,
        )
        return {
            KEY_IS_FOLLOW_UP: is_follow_up,
            KEY_SYSTEM_PROMPT: self._prompt_builder.build_from_payload(payload),
        }

    # ------------------------------------------------------------------
    # Node: generate
    # ------------------------------------------------------------------

    async def _generate_node(self, state: AskState) -> dict:
        with tracer.start_as_current_span(SPAN_ASK_GENERATE) as span:
            span.set_attribute(ATTR_ASK_IS_FOLLOW_UP, state[KEY_IS_FOLLOW_UP])
            answer = await self._generator.answer(
                state[KEY_QUESTION],
                state[KEY_DIGEST].recent_turns,
                state[KEY_SYSTEM_PROMPT],
            )
        return {KEY_ANSWER: answer}

    # ------------------------------------------------------------------
    # Node: suggest  (only when the client sent history)
    # ------------------------------------------------------------------

    async def _suggest_node(self, state: AskState) -> dict:
        history = state.get(KEY_HISTORY) or []
        if not history:
            return {KEY_FOLLOW_UPS: None}

        window = max(self._config.memory.suggestion_context_messages, 1)
        suggestions = await self._generator.suggest_follow_ups(
            state[KEY_ANSWER], format_transcript(history[-window:])
        )
        return {KEY_FOLLOW_UPS: suggestions or None}

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    @observe_ask
    async def run(self, question: str, history: Sequence[Message]) -> AskResult:
        """Execute the graph for one question and return the final result."""
        with tracer.start_as_current_span(SPAN_ASK_PIPELINE) as span:
            span.set_attribute(ATTR_ASK_QUESTION_LEN, len(question))
            span.set_attribute(ATTR_ASK_HISTORY_LEN, len(history))

            graph_input: AskState = {
                KEY_QUESTION: question,
                KEY_HISTORY: list(history),
            }
            final: AskState = await self._graph.ainvoke(graph_input)

            return AskResult(
                answer=final[KEY_ANSWER],
                references=[c.metadata for c in final.get(KEY_CHUNKS, [])],
                follow_up_suggestions=final.get(KEY_FOLLOW_UPS),
                rejected=bool(final.get(KEY_REJECTED)),
            )
