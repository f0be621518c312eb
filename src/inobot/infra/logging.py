"""Structured logging bootstrap.

Configures the root logger so every ``logging.getLogger(__name__)`` call
across the app (and uvicorn) emits either:

* **JSON lines** (``json_output=True``, default): machine-parseable.
* **Human-readable** (``json_output=False``): coloured, timestamp-prefixed
  lines for local development.

Every record carries the current ``request_id`` (see
``inobot.infra.request_id``) and, when OpenTelemetry tracing is active,
the ``trace_id`` / ``span_id`` of the current span.
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from inobot.configs.system import LoggingConfig
from inobot.infra.request_id import current_request_id


class _ContextFilter(logging.Filter):
    """Injects the request ID and OTEL trace/span IDs into every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()  # type: ignore[attr-defined]
        span = trace.get_current_span()
        ctx = span.get_span_context()
        if ctx and ctx.is_valid:
            record.trace_id = format(ctx.trace_id, "032x")  # type: ignore[attr-defined]
            record.span_id = format(ctx.span_id, "016x")  # type: ignore[attr-defined]
        else:
            record.trace_id = ""  # type: ignore[attr-defined]
            record.span_id = ""  # type: ignore[attr-defined]
        return True


_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s [%(request_id)s] %(message)s"
_DEV_DATEFMT = "%H:%M:%S"


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger (call once at startup, before lifespan)."""
    if config is None:
        config = LoggingConfig()

    level = config.level.upper()
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_ContextFilter())

    if config.json_output:
        from pythonjsonlogger.json import JsonFormatter

        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s "
            "%(request_id)s %(trace_id)s %(span_id)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            defaults={"request_id": "", "trace_id": "", "span_id": ""},
        )
    else:
        from uvicorn.logging import DefaultFormatter

        formatter = DefaultFormatter(
            fmt=_DEV_FORMAT,
            datefmt=_DEV_DATEFMT,
            use_colors=True,
        )

    handler.setFormatter(formatter)

    root.handlers = [handler]

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvi = logging.getLogger(name)
        uvi.handlers = [handler]
        uvi.propagate = False

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)
