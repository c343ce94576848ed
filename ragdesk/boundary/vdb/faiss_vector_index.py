"""
FAISS vector index.

Local LangChain FAISS collection of fixed dimension. Vectors are computed
by the embedding gateway; this index only stores and searches them.

Dependencies: faiss-cpu, numpy, langchain_community, langchain_core
System role: Vector storage and similarity search for RAG
"""

import logging
from pathlib import Path
from typing import Any

import faiss
import numpy as np
from langchain_community.docstore.in_memory import InMemoryDocstore
from langchain_community.vectorstores import FAISS
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from ragdesk.core.exceptions import DimensionMismatchError, ExternalServiceError
from ragdesk.models.chunk import IndexedChunk, RetrievedChunk

logger = logging.getLogger(__name__)


class PrecomputedEmbeddings(Embeddings):
    """Embeddings slot for a FAISS store fed only with precomputed vectors."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        raise NotImplementedError("Vectors are computed by EmbeddingGateway")

    def embed_query(self, text: str) -> list[float]:
        raise NotImplementedError("Vectors are computed by EmbeddingGateway")


class FAISSVectorIndex:
    """
    FAISS collection keyed by chunk id.

    ``add`` is an upsert: re-adding an id replaces the stored vector. Scores
    are L2 distances, so lower means closer, and results come back in that
    order.
    """

    def __init__(
        self,
        dimension: int,
        index_dir: str | Path | None = None,
        index_name: str = "documents",
    ) -> None:
        """
        Initialize the collection, loading it from disk when persisted.

        Args:
            dimension: Vector dimension of the collection
            index_dir: Directory for save/load (in-memory only when None)
            index_name: File stem of the persisted index
        """
        self._dimension = dimension
        self._index_dir = Path(index_dir) if index_dir else None
        self._index_name = index_name
        self._store = self._load_or_create_index()

    def _new_store(self) -> FAISS:
        return FAISS(
            embedding_function=PrecomputedEmbeddings(),
            index=faiss.IndexFlatL2(self._dimension),
            docstore=InMemoryDocstore(),
            index_to_docstore_id={},
        )

    def _load_or_create_index(self) -> FAISS:
        if self._index_dir is None or not (self._index_dir / f"{self._index_name}.faiss").exists():
            logger.info(f"{__name__}:_load_or_create_index - Creating new index dimension={self._dimension}")
            return self._new_store()

        logger.info(f"{__name__}:_load_or_create_index - Loading index from {self._index_dir}")
        store = FAISS.load_local(
            str(self._index_dir),
            PrecomputedEmbeddings(),
            index_name=self._index_name,
            allow_dangerous_deserialization=True,
        )
        if store.index.d != self._dimension:
            raise DimensionMismatchError(expected=self._dimension, actual=store.index.d)
        return store

    @property
    def dimension(self) -> int:
        return self._dimension

    def count(self) -> int:
        """Number of stored vectors."""
        return self._store.index.ntotal

    def _check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self._dimension:
            raise DimensionMismatchError(expected=self._dimension, actual=len(vector))

    def save(self) -> None:
        """Write the index to ``index_dir``; no-op for in-memory collections."""
        if self._index_dir is None:
            return
        self._index_dir.mkdir(parents=True, exist_ok=True)
        self._store.save_local(str(self._index_dir), index_name=self._index_name)

    def _entries(self, chunk_ids: list[str]) -> list[tuple[str, Document, list[float]]]:
        positions = {doc_id: pos for pos, doc_id in self._store.index_to_docstore_id.items()}
        return [
            (
                chunk_id,
                self._store.docstore.search(chunk_id),
                self._store.index.reconstruct(positions[chunk_id]).tolist(),
            )
            for chunk_id in chunk_ids
        ]

    def _restore(self, entries: list[tuple[str, Document, list[float]]]) -> None:
        present = set(self._store.index_to_docstore_id.values())
        missing = [entry for entry in entries if entry[0] not in present]
        if not missing:
            return
        try:
            start = self._store.index.ntotal
            self._store.index.add(np.array([vector for _, _, vector in missing], dtype=np.float32))
            self._store.docstore.add({chunk_id: doc for chunk_id, doc, _ in missing})
            self._store.index_to_docstore_id.update(
                {start + offset: chunk_id for offset, (chunk_id, _, _) in enumerate(missing)}
            )
            logger.warning(f"{__name__}:_restore - Restored {len(missing)} replaced chunks after failed write")
        except Exception as e:
            logger.error(f"{__name__}:_restore - FAILED, {len(missing)} chunks lost: {type(e).__name__}: {e}")

    async def add(self, chunks: list[IndexedChunk]) -> list[str]:
        """
        Upsert chunks by id.

        Replaced entries are put back when the write fails, so a failed
        upsert leaves the collection as it was.

        Args:
            chunks: Chunks with embeddings and metadata

        Returns:
            list[str]: Stored chunk ids

        Raises:
            DimensionMismatchError: When a vector has the wrong length
            ExternalServiceError: When FAISS rejects the write
        """
        if not chunks:
            return []
        for chunk in chunks:
            self._check_dimension(chunk.embedding)

        # Last occurrence wins for ids repeated within one batch
        unique = {chunk.id: chunk for chunk in chunks}
        ids = list(unique)
        replaced: list[tuple[str, Document, list[float]]] = []
        try:
            stored = set(self._store.index_to_docstore_id.values())
            replaced = self._entries([chunk_id for chunk_id in ids if chunk_id in stored])
            if replaced:
                self._store.delete(ids=[chunk_id for chunk_id, _, _ in replaced])
            self._store.add_embeddings(
                text_embeddings=[(c.text, c.embedding) for c in unique.values()],
                metadatas=[{**c.metadata, "chunk_id": c.id} for c in unique.values()],
                ids=ids,
            )
        except Exception as e:
            logger.error(f"{__name__}:add - FAILED: {type(e).__name__}: {e}")
            self._restore(replaced)
            raise ExternalServiceError(f"Vector index write failed: {e}", service="vector_store") from e

        try:
            self.save()
        except Exception as e:
            logger.error(f"{__name__}:add - save FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(f"Vector index save failed: {e}", service="vector_store") from e

        logger.info(f"{__name__}:add - Upserted {len(ids)} chunks (replaced {len(replaced)})")
        return ids

    @staticmethod
    def _to_retrieved(rank: int, doc: Document, score: float | None) -> RetrievedChunk:
        metadata: dict[str, Any] = dict(doc.metadata or {})
        return RetrievedChunk(
            text=doc.page_content,
            score=score,
            rank=rank,
            chunk_id=metadata.get("chunk_id"),
            metadata=metadata,
        )

    async def similarity_search(self, vector: list[float], k: int) -> list[RetrievedChunk]:
        """Return up to ``k`` nearest chunks in store order, without scores."""
        self._check_dimension(vector)
        try:
            docs = self._store.similarity_search_by_vector(vector, k=k)
        except Exception as e:
            logger.error(f"{__name__}:similarity_search - FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(f"Vector search failed: {e}", service="vector_store") from e
        return [self._to_retrieved(rank, doc, None) for rank, doc in enumerate(docs)]

    async def similarity_search_with_score(self, vector: list[float], k: int) -> list[RetrievedChunk]:
        """Return up to ``k`` nearest chunks in store order with L2 distances."""
        self._check_dimension(vector)
        try:
            pairs = self._store.similarity_search_with_score_by_vector(vector, k=k)
        except Exception as e:
            logger.error(f"{__name__}:similarity_search_with_score - FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(f"Vector search failed: {e}", service="vector_store") from e
        return [self._to_retrieved(rank, doc, float(score)) for rank, (doc, score) in enumerate(pairs)]

    async def reset(self) -> int:
        """
        Delete every stored vector.

        Returns:
            int: Number of vectors removed
        """
        ids = list(self._store.index_to_docstore_id.values())
        try:
            if ids:
                self._store.delete(ids=ids)
            self.save()
        except Exception as e:
            logger.error(f"{__name__}:reset - FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(f"Vector index reset failed: {e}", service="vector_store") from e
        logger.info(f"{__name__}:reset - Removed {len(ids)} vectors")
        return len(ids)
