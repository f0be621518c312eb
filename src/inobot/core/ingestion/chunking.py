"""Character-window chunking that never splits a word.

Each window of ``chunk_size`` characters is cut, in order of preference:

1. just after the last sentence-ending punctuation (``.``, ``!``, ``?``)
   that is followed by whitespace, when it lies past 70 % of the window;
2. just after the last space or newline in the window;
3. at the next whitespace after the window, when the window has none.
"""

from __future__ import annotations

import re

DEFAULT_CHUNK_SIZE = 1000
SENTENCE_BREAK_RATIO = 0.7

_SENTENCE_END = re.compile(r"[.!?](?=\s)")
_WHITESPACE = re.compile(r"\s")


def _cut_point(text: str, start: int, chunk_size: int) -> int:
    """Absolute index where the chunk starting at *start* ends."""
    end = start + chunk_size
    window = text[start:end]

    # Lookahead sees one char past the window so a trailing "." counts.
    sentence_ends = [
        m.end()
        for m in _SENTENCE_END.finditer(text, start, min(end + 1, len(text)))
        if m.start() < end
    ]
    min_offset = chunk_size * SENTENCE_BREAK_RATIO
    if sentence_ends and sentence_ends[-1] - start > min_offset:
        return sentence_ends[-1]

    last_space = max(window.rfind(" "), window.rfind("\n"))
    if last_space > 0:
        return start + last_space + 1

    nxt = _WHITESPACE.search(text, end)
    return nxt.start() if nxt else len(text)


def split_into_chunks(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split *text* into stripped, non-empty chunks of about *chunk_size* chars."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not text or not text.strip():
        return []

    chunks: list[str] = []
    start = 0
    length = len(text)
    while start < length:
        if start + chunk_size >= length:
            end = length
        else:
            end = _cut_point(text, start, chunk_size)
        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)
        start = end
    return chunks
