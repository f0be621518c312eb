"""Ingestion value objects."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UploadedDocument:
    """An uploaded file after it has been stored."""

    filename: str
    content_type: str
    data: bytes
    file_url: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class IngestionResult:
    """Outcome of ingesting one document.  Per-chunk failures land in ``errors``."""

    text_extracted: bool = False
    chunks_created: int = 0
    chunks_processed: int = 0
    chunks_skipped: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class UploadResult:
    """What ``/upload`` reports back to the caller."""

    key: str
    file_url: str
    ingestion: IngestionResult

    @property
    def message(self) -> str:
        if self.ingestion.text_extracted:
            return "File uploaded and vectorized successfully"
        return "File uploaded but no text content found for vectorization"
