"""
Test suite for IngestionService.

Tests sequential batching, deterministic chunk ids, metadata, partial
failure reporting and idempotent re-ingestion. Uses mocked gateways and a
real in-memory FAISS index.

System role: Verification of the ingestion path
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ragdesk.application import IngestionService, generate_chunk_id
from ragdesk.boundary.parsing import MarkdownFileParser
from ragdesk.boundary.vdb import FAISSVectorIndex
from ragdesk.core.chunking import MarkdownChunker
from ragdesk.core.exceptions import DimensionMismatchError, ExternalServiceError, IngestionError, ValidationError
from ragdesk.core.providers.provider_registry import ProviderRegistry

TEST_DIMENSION = 4


def _content(sections: int) -> str:
    return "\n".join(f"# Section {i}\nbody {i}" for i in range(sections))


@pytest.fixture
def vector_index() -> FAISSVectorIndex:
    """Provide in-memory FAISS index of the test dimension."""
    return FAISSVectorIndex(dimension=TEST_DIMENSION)


@pytest.fixture
def service(vector_index: FAISSVectorIndex, provider_registry: ProviderRegistry) -> IngestionService:
    """Provide ingestion service with batches of 10."""
    return IngestionService(
        parser=MarkdownFileParser(),
        chunker=MarkdownChunker(500),
        vector_index=vector_index,
        provider_registry=provider_registry,
        batch_size=10,
    )


class TestBatching:
    """Test suite for sequential batching."""

    @pytest.mark.asyncio
    async def test_chunks_are_embedded_in_batches_of_ten(
        self, service: IngestionService, mock_embedding_gateway: MagicMock, vector_index: FAISSVectorIndex
    ) -> None:
        """Test 25 chunks become batches of 10, 10 and 5."""
        # Act
        report = await service.ingest_text(_content(25), source_id="big.md")

        # Assert
        sizes = [len(call.args[0]) for call in mock_embedding_gateway.embed_documents.await_args_list]
        assert sizes == [10, 10, 5]
        assert report.chunk_count == 25
        assert report.batch_count == 3
        assert vector_index.count() == 25

    @pytest.mark.asyncio
    async def test_empty_document_writes_nothing(
        self, service: IngestionService, mock_embedding_gateway: MagicMock
    ) -> None:
        """Test blank content produces an empty report."""
        report = await service.ingest_text("   ", source_id="empty.md")

        assert report.chunk_count == 0
        assert report.batch_count == 0
        mock_embedding_gateway.embed_documents.assert_not_called()

    @pytest.mark.parametrize("batch_size", [0, 11])
    def test_batch_size_bounds(
        self, vector_index: FAISSVectorIndex, provider_registry: ProviderRegistry, batch_size: int
    ) -> None:
        """Test batch size must be within 1..10."""
        with pytest.raises(ValidationError):
            IngestionService(MarkdownFileParser(), MarkdownChunker(), vector_index, provider_registry, batch_size)


class TestChunkIdentity:
    """Test suite for ids and metadata."""

    @pytest.mark.asyncio
    async def test_ids_are_deterministic(self, service: IngestionService) -> None:
        """Test chunk ids are the source/index/text hash."""
        report = await service.ingest_text("# A\none\n# B\ntwo", source_id="doc.md")

        assert report.chunk_ids == [
            generate_chunk_id("doc.md", 0, "# A\none"),
            generate_chunk_id("doc.md", 1, "# B\ntwo"),
        ]
        assert all(len(chunk_id) == 16 for chunk_id in report.chunk_ids)

    @pytest.mark.asyncio
    async def test_metadata_is_stored(self, service: IngestionService, vector_index: FAISSVectorIndex) -> None:
        """Test source, document id, index, heading and timestamp are stored."""
        await service.ingest_text("# Only\nbody", source_id="doc.md", document_id="doc-42")

        results = await vector_index.similarity_search([0.0] * TEST_DIMENSION, k=1)
        metadata = results[0].metadata
        assert metadata["source"] == "doc.md"
        assert metadata["document_id"] == "doc-42"
        assert metadata["chunk_index"] == 0
        assert metadata["heading"] == "# Only"
        assert metadata["timestamp"].endswith("+00:00")

    @pytest.mark.asyncio
    async def test_reingest_is_idempotent(
        self, service: IngestionService, vector_index: FAISSVectorIndex
    ) -> None:
        """Test ingesting the same document twice does not duplicate vectors."""
        await service.ingest_text(_content(12), source_id="doc.md")

        await service.ingest_text(_content(12), source_id="doc.md")

        assert vector_index.count() == 12

    @pytest.mark.asyncio
    async def test_blank_source_rejected(self, service: IngestionService) -> None:
        """Test source_id is required."""
        with pytest.raises(ValidationError):
            await service.ingest_text("text", source_id=" ")

    @pytest.mark.asyncio
    async def test_mismatched_embedding_model_writes_nothing(
        self, service: IngestionService, vector_index: FAISSVectorIndex, mock_embedding_gateway: MagicMock
    ) -> None:
        """Test the embedding model is checked against the collection before the first batch."""
        mock_embedding_gateway.measure_dimension.return_value = 8

        with pytest.raises(DimensionMismatchError):
            await service.ingest_text(_content(3), source_id="doc.md")

        mock_embedding_gateway.embed_documents.assert_not_awaited()
        assert vector_index.count() == 0


class TestPartialFailure:
    """Test suite for failures mid-ingestion."""

    @pytest.mark.asyncio
    async def test_failed_batch_reports_committed_batches(
        self,
        service: IngestionService,
        mock_embedding_gateway: MagicMock,
        vector_index: FAISSVectorIndex,
    ) -> None:
        """Test batch 2 of 3 failing leaves batch 1 committed and says so."""
        # Arrange
        calls = {"n": 0}

        async def embed(texts: list[str]) -> list[list[float]]:
            calls["n"] += 1
            if calls["n"] == 2:
                raise ExternalServiceError("rate limited", service="embedding")
            return [[0.5] * TEST_DIMENSION for _ in texts]

        mock_embedding_gateway.embed_documents.side_effect = embed

        # Act
        with pytest.raises(IngestionError) as exc_info:
            await service.ingest_text(_content(25), source_id="big.md", document_id="doc-9")

        # Assert
        error = exc_info.value
        assert error.batches_committed == 1
        assert error.batch_count == 3
        assert error.document_id == "doc-9"
        assert vector_index.count() == 10
        assert calls["n"] == 2

    @pytest.mark.asyncio
    async def test_index_failure_is_ingestion_error(
        self, provider_registry: ProviderRegistry
    ) -> None:
        """Test a vector store error surfaces as IngestionError."""
        index = MagicMock()
        index.add = AsyncMock(side_effect=ExternalServiceError("disk full", service="vector_store"))
        service = IngestionService(MarkdownFileParser(), MarkdownChunker(), index, provider_registry)

        with pytest.raises(IngestionError) as exc_info:
            await service.ingest_text("# A\nbody", source_id="a.md")
        assert exc_info.value.batches_committed == 0


class TestFilesAndReset:
    """Test suite for file ingestion and reset."""

    @pytest.mark.asyncio
    async def test_ingest_file(self, service: IngestionService, tmp_path) -> None:
        """Test files are parsed then ingested under their file name."""
        path = tmp_path / "manual.md"
        path.write_text("# Manual\nRead me", encoding="utf-8")

        report = await service.ingest_file(path)

        assert report.source_id == "manual.md"
        assert report.chunk_count == 1

    @pytest.mark.asyncio
    async def test_reset_index(self, service: IngestionService, vector_index: FAISSVectorIndex) -> None:
        """Test reset removes all ingested vectors."""
        await service.ingest_text(_content(3), source_id="doc.md")

        removed = await service.reset_index()

        assert removed == 3
        assert vector_index.count() == 0
