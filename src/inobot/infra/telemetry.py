"""OpenTelemetry bootstrap: tracing initialisation and helpers.

Configures a ``TracerProvider`` with an OTLP HTTP exporter when tracing is
enabled via ``TracingConfig``.  When disabled the module is a graceful no-op
(local dev without a collector).

Auto-instrumentations wired here:

- **FastAPI** (inbound HTTP spans)
- **httpx** (outbound HTTP spans: covers the OpenAI / LangChain clients,
  live-data fetches and webhook deliveries)
- **SQLAlchemy** (vector-store spans)

Usage::

    from inobot.infra.telemetry import SPAN_ASK_PIPELINE, tracer

    with tracer.start_as_current_span(SPAN_ASK_PIPELINE) as span:
        ...
"""

from __future__ import annotations

import base64
import logging

from opentelemetry import trace

from inobot.configs.system import TracingConfig

logger = logging.getLogger(__name__)

_otel_enabled = False

tracer = trace.get_tracer("inobot")

# ---------------------------------------------------------------------------
# Span names: single source of truth for all custom spans
# ---------------------------------------------------------------------------

SPAN_ASK_PIPELINE = "ask.pipeline"
SPAN_ASK_RETRIEVE = "ask.retrieve"
SPAN_ASK_GENERATE = "ask.generate"
SPAN_EMBEDDING_EMBED = "embedding.embed"
SPAN_VECTOR_QUERY = "vector.query"
SPAN_INGEST_FILE = "ingest.file"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_ASK_QUESTION_LEN = "ask.question_len"
ATTR_ASK_HISTORY_LEN = "ask.history_len"
ATTR_ASK_IS_FOLLOW_UP = "ask.is_follow_up"
ATTR_ASK_RESULT_COUNT = "ask.result_count"
ATTR_ASK_TOP_K = "ask.top_k"

ATTR_EMBEDDING_MODEL = "embedding.model"
ATTR_EMBEDDING_TEXT_LEN = "embedding.text_len"

ATTR_VECTOR_TOP_K = "vector.top_k"
ATTR_VECTOR_MIN_SCORE = "vector.min_score"
ATTR_VECTOR_RESULT_COUNT = "vector.result_count"

ATTR_INGEST_FILENAME = "ingest.filename"
ATTR_INGEST_CHUNKS = "ingest.chunks"


def init_telemetry(
    app: object | None = None,
    settings: TracingConfig | None = None,
) -> None:
    """Initialise the OTEL ``TracerProvider`` and auto-instrumentations.

    No-op when *settings* is ``None`` or tracing is disabled.
    """
    global _otel_enabled  # noqa: PLW0603

    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return

    if not settings.endpoint or not settings.username or not settings.password:
        logger.warning(
            "Tracing enabled but endpoint/credentials not configured; "
            "skipping OpenTelemetry setup."
        )
        return

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})

    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    credentials = f"{settings.username}:{settings.password}"
    encoded = base64.b64encode(credentials.encode()).decode()

    exporter = OTLPSpanExporter(
        endpoint=settings.endpoint,
        headers={"Authorization": f"Basic {encoded}"},
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls) if settings.excluded_urls else ""
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()

    _otel_enabled = True
    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )


def instrument_sqlalchemy(engine: object) -> None:
    """Instrument a SQLAlchemy engine; no-op when OTEL is not enabled."""
    if not _otel_enabled:
        return

    from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

    sync_engine = getattr(engine, "sync_engine", engine)
    SQLAlchemyInstrumentor().instrument(engine=sync_engine)
    logger.info("SQLAlchemy engine instrumented for OTEL tracing.")
