"""
Retrieval orchestrator.

Embeds the query, searches the vector index and optionally reranks the
candidates. Steps run strictly one after another and any failure aborts the
whole retrieval.

Dependencies: ragdesk.boundary, ragdesk.core.providers
System role: Query path of the RAG pipeline
"""

import logging
from enum import Enum
from typing import Protocol

from ragdesk.boundary.rerank.rerank_client import RerankResult
from ragdesk.core.exceptions import (
    ExternalServiceError,
    ProtocolError,
    RagDeskException,
    ValidationError,
)
from ragdesk.core.providers.provider_registry import ProviderRegistry, ProviderSnapshot
from ragdesk.models.chunk import RetrievedChunk

logger = logging.getLogger(__name__)


class RetrievalMode(str, Enum):
    """Retrieval strategy."""

    PLAIN = "plain"
    SCORED = "scored"
    RERANKED = "reranked"


class VectorSearch(Protocol):
    async def similarity_search(self, vector: list[float], k: int) -> list[RetrievedChunk]: ...

    async def similarity_search_with_score(self, vector: list[float], k: int) -> list[RetrievedChunk]: ...


class Reranker(Protocol):
    @property
    def enabled(self) -> bool: ...

    def check_configured(self) -> None: ...

    async def rerank(self, query: str, documents: list[str]) -> list[RerankResult]: ...


def apply_rerank_order(candidates: list[RetrievedChunk], results: list[RerankResult]) -> list[RetrievedChunk]:
    """
    Reorder candidates by a rerank result.

    Args:
        candidates: Chunks in store order
        results: Rerank ordering over candidate positions

    Returns:
        list[RetrievedChunk]: Candidates in rerank order with rerank scores

    Raises:
        ProtocolError: When the indices are not a permutation of the candidates
    """
    indices = [result.index for result in results]
    if len(indices) != len(candidates) or sorted(indices) != list(range(len(candidates))):
        raise ProtocolError(
            "Rerank result is not a permutation of the candidates",
            service="rerank",
            details={"candidates": len(candidates), "indices": indices},
        )
    return [
        candidates[result.index].model_copy(update={"rank": rank, "score": result.relevance_score})
        for rank, result in enumerate(results)
    ]


class RetrievalOrchestrator:
    """Produce an ordered list of relevant snippets for a query."""

    def __init__(
        self,
        vector_index: VectorSearch,
        provider_registry: ProviderRegistry,
        reranker: Reranker | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            vector_index: Vector collection to search
            provider_registry: Source of the query embedding gateway
            reranker: Rerank client; RERANKED mode is unavailable without it
        """
        self._vector_index = vector_index
        self._providers = provider_registry
        self._reranker = reranker

    @property
    def rerank_available(self) -> bool:
        return self._reranker is not None and self._reranker.enabled

    def check_rerank_ready(self) -> None:
        """
        Check that reranked retrieval can run.

        Raises:
            ValidationError: When reranking is disabled or its settings are blank
        """
        if not self.rerank_available:
            raise ValidationError("Reranked retrieval requested but reranking is disabled", field="mode")
        self._reranker.check_configured()

    def _validate(self, query: str, top_k: int, mode: RetrievalMode) -> None:
        if not query or not query.strip():
            raise ValidationError("Query must not be empty", field="query")
        if top_k < 1:
            raise ValidationError("top_k must be at least 1", field="top_k", details={"top_k": top_k})
        if mode is RetrievalMode.RERANKED:
            self.check_rerank_ready()

    async def retrieve_chunks(
        self,
        query: str,
        top_k: int,
        mode: RetrievalMode = RetrievalMode.RERANKED,
        snapshot: ProviderSnapshot | None = None,
    ) -> list[RetrievedChunk]:
        """
        Retrieve ranked chunks for a query.

        Args:
            query: User question
            top_k: Number of candidates to fetch
            mode: Retrieval strategy
            snapshot: Provider snapshot captured by the caller (current one when None)

        Returns:
            list[RetrievedChunk]: Chunks with rank 0..n-1

        Raises:
            ValidationError: On blank query, top_k < 1, or RERANKED with reranking off
            DimensionMismatchError: When the initial embedding model does not fit the collection
            ExternalServiceError: When embedding, search or rerank fails
            ProtocolError: When the rerank result is not a permutation
        """
        self._validate(query, top_k, mode)
        await self._providers.ensure_embedding_verified()
        snapshot = snapshot or self._providers.current()
        logger.info(
            f"{__name__}:retrieve_chunks - START: mode={mode.value} top_k={top_k} provider_version={snapshot.version}"
        )

        try:
            logger.info(f"{__name__}:retrieve_chunks - Step 1: Embedding query")
            vector = await snapshot.embedding.embed_query(query)

            logger.info(f"{__name__}:retrieve_chunks - Step 2: Searching vector index")
            if mode is RetrievalMode.SCORED:
                candidates = await self._vector_index.similarity_search_with_score(vector, top_k)
            else:
                candidates = await self._vector_index.similarity_search(vector, top_k)
            logger.info(f"{__name__}:retrieve_chunks - Step 2 OK: {len(candidates)} candidates")

            if mode is not RetrievalMode.RERANKED or not candidates:
                return candidates

            logger.info(f"{__name__}:retrieve_chunks - Step 3: Reranking")
            results = await self._reranker.rerank(query, [c.text for c in candidates])
            return apply_rerank_order(candidates, results)
        except RagDeskException:
            raise
        except Exception as e:
            logger.error(f"{__name__}:retrieve_chunks - FAILED: {type(e).__name__}: {e}", exc_info=True)
            raise ExternalServiceError(f"Retrieval failed: {e}", service="retrieval") from e

    async def retrieve(
        self,
        query: str,
        top_k: int,
        mode: RetrievalMode = RetrievalMode.RERANKED,
        snapshot: ProviderSnapshot | None = None,
    ) -> list[str]:
        """Retrieve snippet texts for a query. See ``retrieve_chunks``."""
        chunks = await self.retrieve_chunks(query, top_k, mode=mode, snapshot=snapshot)
        return [chunk.text for chunk in chunks]
