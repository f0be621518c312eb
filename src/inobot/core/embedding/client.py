"""EmbeddingClient -- OpenAI-compatible embeddings for questions and chunks."""

import logging
import time
from typing import Any

import openai

from inobot.configs.system import EmbeddingConfig
from inobot.core.errors import EmptyEmbeddingError, UpstreamError
from inobot.core.service.metrics import EMBEDDING_LATENCY_SECONDS
from inobot.infra.telemetry import (
    ATTR_EMBEDDING_MODEL,
    ATTR_EMBEDDING_TEXT_LEN,
    SPAN_EMBEDDING_EMBED,
    tracer,
)

logger = logging.getLogger(__name__)

# Low characters-per-token ratio; estimates err towards more tokens.
CHARS_PER_TOKEN = 3


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """Cut *text* to roughly *max_tokens* tokens."""
    return text[: max_tokens * CHARS_PER_TOKEN]


def _flatten(raw: Any) -> list[float]:
    """Unwrap the ``[[...]]`` shape some servers return for one input."""
    if raw and isinstance(raw, list) and isinstance(raw[0], list):
        raw = raw[0]
    return [float(v) for v in raw or []]


class EmbeddingClient:
    """OpenAI-compatible embedding client.

    Public API
    ----------
    ``embed(text)``
        Truncates *text* to the configured input budget and returns its
        vector.  Raises ``EmptyEmbeddingError`` when the provider returns
        nothing and ``UpstreamError`` for any provider failure.

    ``aclose()``
        Closes the underlying HTTP client (lifespan shutdown).
    """

    def __init__(
        self,
        config: EmbeddingConfig,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self._config = config
        self._openai = client or openai.AsyncOpenAI(
            base_url=config.endpoint,
            api_key=config.api_key or "unused",
            max_retries=0,
        )

    @property
    def model_name(self) -> str:
        return self._config.model_name

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for *text*."""
        text = truncate_to_tokens(text, self._config.max_input_tokens)
        with tracer.start_as_current_span(SPAN_EMBEDDING_EMBED) as span:
            span.set_attribute(ATTR_EMBEDDING_MODEL, self._config.model_name)
            span.set_attribute(ATTR_EMBEDDING_TEXT_LEN, len(text))
            start = time.monotonic()
            try:
                response = await self._openai.embeddings.create(
                    input=text,
                    model=self._config.model_name,
                )
            except openai.OpenAIError as exc:
                raise UpstreamError(f"Embedding request failed: {exc}") from exc
            finally:
                EMBEDDING_LATENCY_SECONDS.observe(time.monotonic() - start)

        data = getattr(response, "data", None) or []
        vector = _flatten(data[0].embedding) if data else []
        if not vector:
            raise EmptyEmbeddingError("Embedding provider returned no vector")
        return vector

    async def aclose(self) -> None:
        await self._openai.close()
