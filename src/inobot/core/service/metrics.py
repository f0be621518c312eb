"""Prometheus metrics for the InoBot application.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``inobot_`` prefix.
"""

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from inobot.configs.config import AppConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Ask pipeline metrics
# ---------------------------------------------------------------------------

ASK_IN_PROGRESS = Gauge(
    "inobot_ask_in_progress",
    "Number of ask pipeline runs currently in progress",
)

ASK_TOTAL = Counter(
    "inobot_ask_total",
    "Total ask pipeline runs by outcome",
    ["status"],  # "ok" | "rejected" | "error" | "cancelled"
)

ASK_DURATION_SECONDS = Histogram(
    "inobot_ask_duration_seconds",
    "End-to-end duration of one ask pipeline run",
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, 120),
)

GUARDRAIL_DECISIONS_TOTAL = Counter(
    "inobot_guardrail_decisions_total",
    "Relevance guardrail outcomes",
    ["reason"],  # matched | no_match | fail_open | disabled | empty
)

LIVE_DATA_FETCHES_TOTAL = Counter(
    "inobot_live_data_fetches_total",
    "Live-data fetch outcomes",
    ["status"],  # ok | empty | failed | not_configured | not_needed | disabled
)

SUMMARIZATIONS_TOTAL = Counter(
    "inobot_summarizations_total",
    "Conversation summarization calls by outcome",
    ["status"],  # "ok" | "error"
)

# ---------------------------------------------------------------------------
# Provider latency
# ---------------------------------------------------------------------------

EMBEDDING_LATENCY_SECONDS = Histogram(
    "inobot_embedding_latency_seconds",
    "Latency of embedding API calls",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

LLM_LATENCY_SECONDS = Histogram(
    "inobot_llm_latency_seconds",
    "Latency of chat model calls",
    ["operation"],  # "answer" | "summarize" | "suggest"
    buckets=(0.25, 0.5, 1, 2, 5, 10, 30, 60),
)

VECTOR_STORE_LATENCY_SECONDS = Histogram(
    "inobot_vector_store_latency_seconds",
    "Latency of vector store operations",
    ["operation"],  # "query" | "upsert"
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2),
)

RAG_RETRIEVAL_LATENCY_SECONDS = Histogram(
    "inobot_rag_retrieval_latency_seconds",
    "Time spent retrieving chunks for one question",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

RAG_SOURCES_RETURNED = Histogram(
    "inobot_rag_sources_returned",
    "Number of chunks returned per retrieval",
    buckets=(0, 1, 2, 3, 5, 10),
)

# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

INGESTION_CHUNKS_TOTAL = Counter(
    "inobot_ingestion_chunks_total",
    "Ingested chunks by outcome",
    ["status"],  # "processed" | "skipped" | "failed"
)

UPLOADS_TOTAL = Counter(
    "inobot_uploads_total",
    "Uploaded files by detected type",
    ["file_type"],
)


# ---------------------------------------------------------------------------
# Decorator
# ---------------------------------------------------------------------------


def observe_ask(
    fn: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Decorator for the ask coroutine that records pipeline metrics.

    Tracks the in-progress gauge, the total counter by outcome
    (ok / rejected / error / cancelled) and the duration histogram.
    The wrapped coroutine's result is inspected for a ``rejected``
    attribute.
    """

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        ASK_IN_PROGRESS.inc()
        start = time.monotonic()
        status = "ok"
        try:
            result = await fn(*args, **kwargs)
            if getattr(result, "rejected", False):
                status = "rejected"
            return result
        except asyncio.CancelledError:
            status = "cancelled"
            raise
        except Exception:
            status = "error"
            raise
        finally:
            ASK_IN_PROGRESS.dec()
            ASK_TOTAL.labels(status=status).inc()
            ASK_DURATION_SECONDS.observe(time.monotonic() - start)

    return wrapper


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------


def setup_metrics(app: FastAPI, config: AppConfig) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint to *app*.

    Adds middleware, so it must run before the app starts serving.
    """
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")

    logger.info("Prometheus metrics initialised")
