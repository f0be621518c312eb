"""Text extraction per detected file type.

Each text format has a ``TextProcessor`` (``str -> str``); PDFs are
decoded from bytes with PyMuPDF in a worker thread.
"""

from __future__ import annotations

import asyncio
import re
from abc import abstractmethod
from typing import Protocol

from bs4 import BeautifulSoup

from .detection import (
    FILE_TYPE_CSV,
    FILE_TYPE_HTML,
    FILE_TYPE_JSON,
    FILE_TYPE_MARKDOWN,
    FILE_TYPE_PDF,
    FILE_TYPE_PLAIN,
    FileType,
)

DEFAULT_ENCODING = "utf-8"
_PDF_FILETYPE = "pdf"


class TextProcessor(Protocol):
    """Structural protocol: anything with ``.process(str) -> str``."""

    @property
    def processor_name(self) -> str:
        return ""

    @abstractmethod
    def process(self, content: str) -> str: ...


# ---------------------------------------------------------------------------
# Built-in processors
# ---------------------------------------------------------------------------


class PlainText(TextProcessor):
    """Returns the decoded text unchanged (txt, json, csv)."""

    processor_name = "plain"

    def process(self, content: str) -> str:
        return content


class HtmlText(TextProcessor):
    """Visible text of an HTML document, one block per line."""

    processor_name = "html"

    dropped_tags = ("script", "style", "noscript", "template")

    def process(self, html_content: str) -> str:
        soup = BeautifulSoup(html_content, "html.parser")
        for tag in soup(list(self.dropped_tags)):
            tag.decompose()
        return soup.get_text("\n", strip=True)


_FENCED_CODE = re.compile(r"^(```|~~~).*?^\1[^\n]*$", re.MULTILINE | re.DOTALL)
_MDX_IMPORT_EXPORT = re.compile(r"^[ \t]*(import|export)\s.*$", re.MULTILINE)
_HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_HORIZONTAL_RULE = re.compile(r"^[ \t]*([-*_])([ \t]*\1){2,}[ \t]*$", re.MULTILINE)
_IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
# Opening tags glued to a preceding word (``a<b and c>d``) are prose, not markup.
_HTML_TAG = re.compile(
    r"</[A-Za-z][\w:.-]*\s*>"
    r"|(?<!\w)<[A-Za-z][\w:.-]*"
    r"(?:\s+[\w:@.-]+(?:\s*=\s*(?:\"[^\"]*\"|'[^']*'|\{[^{}]*\}|[^\s\"'<>]+))?)*"
    r"\s*/?>"
)
_JSX_EXPRESSION = re.compile(r"\{[^{}]*\}")
_H1 = re.compile(r"^[ \t]*#[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
_H2_PLUS = re.compile(r"^[ \t]*#{2,6}[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
_LINK = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_BOLD = re.compile(r"(\*\*|__)(.+?)\1")
_ITALIC = re.compile(r"(?<![\w*])([*_])(?!\s)(.+?)(?<!\s)\1(?![\w*])")
_STRIKE = re.compile(r"~~(.+?)~~")
_INLINE_CODE = re.compile(r"`([^`]*)`")
_TABLE_SEPARATOR = re.compile(
    r"^[ \t]*\|?[ \t]*:?-{3,}:?[ \t]*(\|[ \t]*:?-{3,}:?[ \t]*)*\|?[ \t]*$",
    re.MULTILINE,
)
_TABLE_ROW = re.compile(r"^[ \t]*\|(.*)\|[ \t]*$", re.MULTILINE)
_BLOCKQUOTE = re.compile(r"^[ \t]*>+[ \t]?", re.MULTILINE)
_UNORDERED_ITEM = re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE)
_ORDERED_ITEM = re.compile(r"^[ \t]*\d+[.)][ \t]+", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")


def _table_row(match: re.Match[str]) -> str:
    cells = [cell.strip() for cell in match.group(1).split("|")]
    return " ".join(cell for cell in cells if cell)


class MarkdownText(TextProcessor):
    """Markdown / MDX reduced to plain prose.

    Headers become ``TITLE:`` (h1) or ``SECTION:`` (h2 and deeper) lines
    and images become ``[IMAGE: alt]`` placeholders.  Code blocks, MDX
    module lines, comments, tags and JSX expressions are dropped.
    """

    processor_name = "markdown"

    def process(self, content: str) -> str:
        text = content.replace("\r\n", "\n")
        text = _FENCED_CODE.sub("", text)
        text = _MDX_IMPORT_EXPORT.sub("", text)
        text = _HTML_COMMENT.sub("", text)
        text = _HORIZONTAL_RULE.sub("", text)
        text = _IMAGE.sub(lambda m: f"[IMAGE: {m.group(1).strip()}]", text)
        text = _HTML_TAG.sub("", text)
        text = _JSX_EXPRESSION.sub("", text)
        text = _H1.sub(r"TITLE: \1", text)
        text = _H2_PLUS.sub(r"SECTION: \1", text)
        text = _LINK.sub(r"\1", text)
        text = _TABLE_SEPARATOR.sub("", text)
        text = _TABLE_ROW.sub(_table_row, text)
        text = _BLOCKQUOTE.sub("", text)
        text = _UNORDERED_ITEM.sub("", text)
        text = _ORDERED_ITEM.sub("", text)
        text = _BOLD.sub(r"\2", text)
        text = _STRIKE.sub(r"\1", text)
        text = _ITALIC.sub(r"\2", text)
        text = _INLINE_CODE.sub(r"\1", text)
        text = "\n".join(line.rstrip() for line in text.split("\n"))
        return _BLANK_RUNS.sub("\n\n", text).strip()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_KNOWN_PROCESSORS: dict[str, type] = {
    FILE_TYPE_PLAIN: PlainText,
    FILE_TYPE_JSON: PlainText,
    FILE_TYPE_CSV: PlainText,
    FILE_TYPE_MARKDOWN: MarkdownText,
    FILE_TYPE_HTML: HtmlText,
}


def get_processor(name: str) -> TextProcessor:
    """Look up a processor by file type name and return an instance."""
    cls = _KNOWN_PROCESSORS.get(name)
    if cls is None:
        raise NotImplementedError(f"Processor '{name}' is not supported.")
    return cls()


def extract_text_from_pdf(data: bytes) -> str:
    """Extract readable text from raw PDF bytes using pymupdf."""
    import pymupdf  # lazy, only needed for PDF documents

    with pymupdf.open(stream=data, filetype=_PDF_FILETYPE) as doc:
        return "\n".join(page.get_text() for page in doc)


def decode_text(data: bytes) -> str:
    return data.decode(DEFAULT_ENCODING, errors="replace")


async def extract_text(data: bytes, file_type: FileType | None) -> str:
    """Extract text from *data*.  Unknown types are decoded as plain text.

    Raises whatever the underlying decoder raises; the pipeline turns
    that into an ``errors`` entry.
    """
    if file_type is None:
        return decode_text(data)
    if file_type.name == FILE_TYPE_PDF:
        return await asyncio.to_thread(extract_text_from_pdf, data)
    return get_processor(file_type.name).process(decode_text(data))
