"""File type detection for uploads.

Order: exact MIME match, then any ``text/*`` MIME as plain text, then
filename extension.  Unknown files return ``None`` and are decoded as
plain text by the extractor.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

FILE_TYPE_PLAIN = "plain"
FILE_TYPE_MARKDOWN = "markdown"
FILE_TYPE_JSON = "json"
FILE_TYPE_CSV = "csv"
FILE_TYPE_HTML = "html"
FILE_TYPE_PDF = "pdf"


@dataclass(frozen=True)
class FileType:
    name: str
    extensions: tuple[str, ...]
    mime_types: tuple[str, ...]


FILE_TYPES: tuple[FileType, ...] = (
    FileType(FILE_TYPE_PLAIN, (".txt",), ("text/plain",)),
    FileType(
        FILE_TYPE_MARKDOWN, (".md", ".mdx"), ("text/markdown", "text/x-markdown")
    ),
    FileType(FILE_TYPE_JSON, (".json",), ("application/json",)),
    FileType(FILE_TYPE_CSV, (".csv",), ("text/csv", "application/csv")),
    FileType(FILE_TYPE_HTML, (".html", ".htm"), ("text/html",)),
    FileType(FILE_TYPE_PDF, (".pdf",), ("application/pdf", "application/x-pdf")),
)

_BY_NAME = {t.name: t for t in FILE_TYPES}


def _base_mime(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def detect_file_type(filename: str, content_type: str | None) -> FileType | None:
    """Return the matching ``FileType`` or ``None`` when nothing matches."""
    mime = _base_mime(content_type)

    if mime:
        for file_type in FILE_TYPES:
            if mime in file_type.mime_types:
                return file_type
        if mime.startswith("text/"):
            return _BY_NAME[FILE_TYPE_PLAIN]

    suffix = PurePath(filename or "").suffix.lower()
    if suffix:
        for file_type in FILE_TYPES:
            if suffix in file_type.extensions:
                return file_type
    return None
