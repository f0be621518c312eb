"""Document ingestion -- type detection, extraction, chunking, vectorization."""

from .chunking import split_into_chunks
from .deps import get_ingestion_pipeline, get_upload_service
from .detection import FileType, detect_file_type
from .extraction import extract_text
from .models import IngestionResult, UploadedDocument, UploadResult
from .pipeline import IngestionPipeline
from .service import UploadService, parse_metadata

__all__ = [
    "FileType",
    "IngestionPipeline",
    "IngestionResult",
    "UploadResult",
    "UploadService",
    "UploadedDocument",
    "detect_file_type",
    "extract_text",
    "get_ingestion_pipeline",
    "get_upload_service",
    "parse_metadata",
    "split_into_chunks",
]
