"""
Ingestion service.

Parses a file (or takes raw text), chunks it, then embeds and indexes the
chunks in sequential batches. There is no rollback: a failing batch leaves
earlier batches committed. Chunk ids are deterministic and the index
upserts, so re-ingesting the same document repairs a partial ingestion.

Dependencies: ragdesk.boundary, ragdesk.core, ragdesk.observability
System role: Ingestion path of the RAG pipeline
"""

import hashlib
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from ragdesk.configs.pipeline import MAX_EMBEDDING_BATCH
from ragdesk.core.chunking.markdown_chunker import MarkdownChunker
from ragdesk.core.exceptions import IngestionError, RagDeskException, ValidationError
from ragdesk.core.providers.provider_registry import ProviderRegistry
from ragdesk.models.chunk import Chunk, IndexedChunk
from ragdesk.models.document import RawDocument
from ragdesk.models.ingestion import IngestionReport
from ragdesk.observability.correlation import set_correlation_id
from ragdesk.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class DocumentParser(Protocol):
    def parse(self, file_path: str | Path) -> RawDocument: ...


class WritableIndex(Protocol):
    async def add(self, chunks: list[IndexedChunk]) -> list[str]: ...

    async def reset(self) -> int: ...


def generate_chunk_id(source_id: str, index: int, text: str) -> str:
    """
    Deterministic chunk id.

    Returns:
        str: First 16 hex chars of SHA-256 over source, index and text
    """
    return hashlib.sha256(f"{source_id}:{index}:{text}".encode()).hexdigest()[:16]


class IngestionService:
    """Parse, chunk, embed and index documents."""

    def __init__(
        self,
        parser: DocumentParser,
        chunker: MarkdownChunker,
        vector_index: WritableIndex,
        provider_registry: ProviderRegistry,
        batch_size: int = MAX_EMBEDDING_BATCH,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            parser: File parser producing RawDocument
            chunker: Heading-aware chunker
            vector_index: Collection chunks are written to
            provider_registry: Source of the embedding gateway
            batch_size: Chunks per embedding/index call, 1..MAX_EMBEDDING_BATCH
        """
        if not 1 <= batch_size <= MAX_EMBEDDING_BATCH:
            raise ValidationError(
                f"batch_size must be between 1 and {MAX_EMBEDDING_BATCH}",
                field="batch_size",
                details={"batch_size": batch_size},
            )
        self._parser = parser
        self._chunker = chunker
        self._vector_index = vector_index
        self._providers = provider_registry
        self._batch_size = batch_size

    async def ingest_file(self, file_path: str | Path) -> IngestionReport:
        """
        Parse and ingest a file.

        Raises:
            NotFoundError: When the file is missing
            UnsupportedFormatError: When the extension is not supported
            IngestionError: When a batch fails
        """
        logger.info(f"{__name__}:ingest_file - Step 1: Parsing {file_path}")
        document = self._parser.parse(file_path)
        return await self._ingest(document)

    async def ingest_text(
        self,
        content: str,
        source_id: str,
        document_id: str | None = None,
    ) -> IngestionReport:
        """
        Ingest already-parsed text.

        Args:
            content: Markdown or plain text
            source_id: Source name recorded in chunk metadata
            document_id: Document id (derived from source_id when None)

        Raises:
            ValidationError: When source_id is empty
            DimensionMismatchError: When the embedding model does not fit the collection
            IngestionError: When a batch fails
        """
        if not source_id or not source_id.strip():
            raise ValidationError("source_id must not be empty", field="source_id")
        document = RawDocument(
            id=document_id or hashlib.sha256(source_id.encode()).hexdigest()[:16],
            content=content,
            source_id=source_id,
        )
        return await self._ingest(document)

    def _index_chunk(self, chunk: Chunk, document: RawDocument, vector: list[float], timestamp: str) -> IndexedChunk:
        return IndexedChunk(
            id=generate_chunk_id(chunk.source_id, chunk.sequential_index, chunk.text),
            chunk=chunk,
            embedding=vector,
            metadata={
                "source": chunk.source_id,
                "document_id": document.id,
                "chunk_index": chunk.sequential_index,
                "heading": chunk.heading_path,
                "timestamp": timestamp,
            },
        )

    async def _ingest(self, document: RawDocument) -> IngestionReport:
        start = time.perf_counter()
        set_correlation_id()

        chunks = self._chunker.chunk_document(document)
        batches = [chunks[i:i + self._batch_size] for i in range(0, len(chunks), self._batch_size)]
        logger.info(
            f"{__name__}:_ingest - Step 2: document_id={document.id} chunks={len(chunks)} batches={len(batches)}"
        )

        await self._providers.ensure_embedding_verified()
        snapshot = self._providers.current()
        timestamp = datetime.now(timezone.utc).isoformat()
        chunk_ids: list[str] = []

        for number, batch in enumerate(batches):
            try:
                vectors = await snapshot.embedding.embed_documents([c.text for c in batch])
                indexed = [
                    self._index_chunk(chunk, document, vector, timestamp)
                    for chunk, vector in zip(batch, vectors)
                ]
                chunk_ids.extend(await self._vector_index.add(indexed))
            except RagDeskException as e:
                logger.error(
                    f"{__name__}:_ingest - FAILED at batch {number + 1}/{len(batches)}: {e}"
                )
                raise IngestionError(
                    f"Ingestion of {document.source_id} failed at batch {number + 1} of {len(batches)}",
                    document_id=document.id,
                    batches_committed=number,
                    batch_count=len(batches),
                    details={"cause": e.message},
                ) from e
            logger.info(f"{__name__}:_ingest - Step 3: batch {number + 1}/{len(batches)} committed")

        elapsed_ms = (time.perf_counter() - start) * 1000
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:_ingest - SUCCESS: {len(chunk_ids)} chunks in {elapsed_ms:.0f}ms",
            document_id=document.id,
            source_id=document.source_id,
            chunk_ids=chunk_ids,
            batch_count=len(batches),
        )
        return IngestionReport(
            document_id=document.id,
            source_id=document.source_id,
            chunk_count=len(chunk_ids),
            batch_count=len(batches),
            chunk_ids=chunk_ids,
            processing_time_ms=elapsed_ms,
        )

    async def reset_index(self) -> int:
        """
        Remove every vector from the collection.

        Returns:
            int: Number of vectors removed
        """
        removed = await self._vector_index.reset()
        logger.info(f"{__name__}:reset_index - Removed {removed} vectors")
        return removed
