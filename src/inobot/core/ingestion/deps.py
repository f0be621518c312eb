"""FastAPI dependency factories for the upload path."""

from typing import Annotated

from fastapi import Depends

from inobot.configs.config import AppConfig, get_app_config
from inobot.core.embedding import EmbeddingClient, get_embedding_client
from inobot.core.storage import S3BlobStorage, get_blob_storage
from inobot.infra.db import PgVectorStore, get_vector_store

from .pipeline import IngestionPipeline
from .service import UploadService


def get_ingestion_pipeline(
    config: Annotated[AppConfig, Depends(get_app_config)],
    embedder: Annotated[EmbeddingClient, Depends(get_embedding_client)],
    store: Annotated[PgVectorStore, Depends(get_vector_store)],
) -> IngestionPipeline:
    return IngestionPipeline(embedder, store, config.ingestion)


def get_upload_service(
    config: Annotated[AppConfig, Depends(get_app_config)],
    storage: Annotated[S3BlobStorage, Depends(get_blob_storage)],
    pipeline: Annotated[IngestionPipeline, Depends(get_ingestion_pipeline)],
) -> UploadService:
    return UploadService(
        storage, pipeline, config.storage.public_base_url, config.api
    )
