"""Context assembly: retrieved chunks + live data + digest -> prompt payload."""

from typing import Sequence

from inobot.configs.prompt import NO_CONTEXT_MARKER

from .models import ContextChunk, PromptPayload

CHUNK_SEPARATOR = "\n---\n"


def join_chunks(chunks: Sequence[ContextChunk]) -> str:
    """Join chunk contents, or return the no-context marker."""
    if not chunks:
        return NO_CONTEXT_MARKER
    return CHUNK_SEPARATOR.join(chunk.content for chunk in chunks)


def assemble_context(
    question: str,
    chunks: Sequence[ContextChunk],
    live_data: str | None = None,
    digest: str | None = None,
    is_follow_up: bool = False,
) -> PromptPayload:
    """Build the payload the prompt builder renders.

    Blank live data and digest collapse to ``""`` so their sections are
    left out of the prompt.
    """
    return PromptPayload(
        question=question,
        context=join_chunks(chunks),
        live_data=(live_data or "").strip(),
        digest=(digest or "").strip(),
        is_follow_up=is_follow_up,
    )
