"""Tests for the ingestion pipeline, upload service and blob storage."""

import re
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from inobot.configs.system import APIConfig, IngestionConfig, StorageConfig
from inobot.core.errors import ConfigurationError, InputValidationError, UpstreamError
from inobot.core.ingestion import (
    IngestionPipeline,
    IngestionResult,
    UploadedDocument,
    UploadService,
    parse_metadata,
)
from inobot.core.ingestion.service import object_key
from inobot.core.storage import S3BlobStorage

SENTENCE = "Inovus Labs mentors student founders through every stage. "


def _document(data: bytes, **kwargs) -> UploadedDocument:
    defaults = {
        "filename": "about.txt",
        "content_type": "text/plain",
        "file_url": "https://files.example.org/1_about.txt",
    }
    defaults.update(kwargs)
    return UploadedDocument(data=data, **defaults)


class TestIngestionPipeline:
    @pytest.mark.asyncio
    async def test_single_short_chunk_is_skipped(self, embedder, store):
        pipeline = IngestionPipeline(embedder, store, IngestionConfig())

        result = await pipeline.ingest(_document(b"Too short."))

        assert result.text_extracted is True
        assert result.chunks_created == 1
        assert result.chunks_processed == 0
        assert result.chunks_skipped == 1
        assert result.errors == []
        embedder.embed.assert_not_awaited()
        store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_every_chunk_vectorized(self, embedder, store, question_vector):
        pipeline = IngestionPipeline(embedder, store, IngestionConfig())
        data = (SENTENCE * 60).encode()

        result = await pipeline.ingest(
            _document(data, metadata={"source": "website"})
        )

        assert result.chunks_created > 1
        assert result.chunks_processed == result.chunks_created
        assert store.upsert.await_count == result.chunks_created

        first = store.upsert.await_args_list[0].args[0]
        assert first.id.startswith("chunk_")
        assert first.embedding == question_vector
        assert first.metadata["filename"] == "about.txt"
        assert first.metadata["file_type"] == "text/plain"
        assert first.metadata["file_size"] == len(data)
        assert first.metadata["file_url"] == "https://files.example.org/1_about.txt"
        assert first.metadata["chunk_index"] == 0
        assert first.metadata["total_chunks"] == result.chunks_created
        assert first.metadata["source"] == "website"
        assert "uploaded_at" in first.metadata

        ids = {call.args[0].id for call in store.upsert.await_args_list}
        assert len(ids) == result.chunks_created

    @pytest.mark.asyncio
    async def test_caller_metadata_wins(self, embedder, store):
        pipeline = IngestionPipeline(embedder, store, IngestionConfig())

        await pipeline.ingest(
            _document((SENTENCE * 2).encode(), metadata={"filename": "renamed.txt"})
        )

        record = store.upsert.await_args.args[0]
        assert record.metadata["filename"] == "renamed.txt"

    @pytest.mark.asyncio
    async def test_failed_chunk_is_reported(self, store, question_vector):
        calls = 0

        async def flaky_embed(text):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise UpstreamError("boom")
            return question_vector

        embedder = MagicMock()
        embedder.embed = flaky_embed
        pipeline = IngestionPipeline(embedder, store, IngestionConfig())

        result = await pipeline.ingest(_document((SENTENCE * 60).encode()))

        assert result.errors == ["Failed to vectorize chunk 1: boom"]
        assert result.chunks_processed == result.chunks_created - 1

    @pytest.mark.asyncio
    async def test_no_text(self, embedder, store):
        pipeline = IngestionPipeline(embedder, store, IngestionConfig())

        result = await pipeline.ingest(_document(b"  \n "))

        assert result.text_extracted is False
        assert result.chunks_created == 0

    @pytest.mark.asyncio
    async def test_extraction_failure_is_reported(self, embedder, store):
        pipeline = IngestionPipeline(embedder, store, IngestionConfig())

        with patch(
            "inobot.core.ingestion.pipeline.extract_text",
            AsyncMock(side_effect=ValueError("broken pdf")),
        ):
            result = await pipeline.ingest(
                _document(b"%PDF", filename="a.pdf", content_type="application/pdf")
            )

        assert result.text_extracted is False
        assert result.errors == ["Failed to process file: broken pdf"]


class TestUploadService:
    def _service(self, storage=None, pipeline=None, config=None) -> UploadService:
        if storage is None:
            storage = MagicMock()
            storage.put = AsyncMock()
        if pipeline is None:
            pipeline = MagicMock()
            pipeline.ingest = AsyncMock(
                return_value=IngestionResult(
                    text_extracted=True, chunks_created=2, chunks_processed=2
                )
            )
        return UploadService(
            storage, pipeline, "https://files.example.org/", config or APIConfig()
        )

    def test_missing_file(self):
        with pytest.raises(InputValidationError, match="Missing file"):
            self._service().validate("", 10)

    def test_too_large(self):
        service = self._service(config=APIConfig(max_upload_bytes=1024 * 1024))

        with pytest.raises(
            InputValidationError, match=r"File too large\. Maximum size is 1MB\."
        ):
            service.validate("big.pdf", 1024 * 1024 + 1)

    @pytest.mark.asyncio
    async def test_upload_stores_then_ingests(self):
        storage = MagicMock()
        storage.put = AsyncMock()
        service = self._service(storage=storage)

        result = await service.upload(
            "notes.md", "text/markdown", b"# Notes", '{"team": "core"}'
        )

        key, data, content_type = storage.put.await_args.args
        assert re.fullmatch(r"\d+_notes\.md", key)
        assert data == b"# Notes"
        assert content_type == "text/markdown"
        assert result.key == key
        assert result.file_url == f"https://files.example.org/{key}"
        assert result.message == "File uploaded and vectorized successfully"

        document = service._pipeline.ingest.await_args.args[0]
        assert document.file_url == result.file_url
        assert document.metadata == {"team": "core"}

    @pytest.mark.asyncio
    async def test_default_content_type(self):
        storage = MagicMock()
        storage.put = AsyncMock()
        service = self._service(storage=storage)

        await service.upload("blob", None, b"data")

        assert storage.put.await_args.args[2] == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_nothing_extracted_message(self):
        pipeline = MagicMock()
        pipeline.ingest = AsyncMock(return_value=IngestionResult())

        result = await self._service(pipeline=pipeline).upload(
            "scan.pdf", "application/pdf", b"%PDF"
        )

        assert result.message == (
            "File uploaded but no text content found for vectorization"
        )

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('{"a": 1}', {"a": 1}),
            ("not json", {}),
            ("[1, 2]", {}),
            (None, {}),
            ("", {}),
        ],
    )
    def test_parse_metadata(self, raw, expected):
        assert parse_metadata(raw) == expected

    def test_object_key(self):
        assert object_key("a.txt", now_ms=1700000000000) == "1700000000000_a.txt"


class TestS3BlobStorage:
    def _config(self, **kwargs) -> StorageConfig:
        values = {"bucket": "inobot-files"}
        values.update(kwargs)
        return StorageConfig(**values)

    @pytest.mark.asyncio
    async def test_put(self):
        client = MagicMock()
        storage = S3BlobStorage(self._config(), client)

        await storage.put("1_a.txt", b"hi", "text/plain")

        client.put_object.assert_called_once_with(
            Bucket="inobot-files", Key="1_a.txt", Body=b"hi", ContentType="text/plain"
        )

    @pytest.mark.asyncio
    async def test_unconfigured_bucket(self):
        storage = S3BlobStorage(self._config(bucket=""), MagicMock())

        with pytest.raises(ConfigurationError):
            await storage.put("1_a.txt", b"hi", "text/plain")

    @pytest.mark.asyncio
    async def test_client_error_wrapped(self):
        client = MagicMock()
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        storage = S3BlobStorage(self._config(), client)

        with pytest.raises(UpstreamError):
            await storage.put("1_a.txt", b"hi", "text/plain")
