"""
Embedding gateway over an OpenAI-compatible /embeddings endpoint.

Dependencies: langchain_openai
System role: Text-to-vector conversion for ingestion and retrieval
"""

import logging

from langchain_openai import OpenAIEmbeddings

from ragdesk.core.exceptions import ExternalServiceError
from ragdesk.models.provider import ProviderConfig

logger = logging.getLogger(__name__)

DIMENSION_SAMPLE_TEXT = "dimension check"


class EmbeddingGateway:
    """Embed queries and documents with the configured model."""

    def __init__(self, config: ProviderConfig, embeddings: OpenAIEmbeddings | None = None) -> None:
        """
        Initialize gateway for one provider configuration.

        Args:
            config: Model, base URL and API key
            embeddings: Pre-built client (tests)
        """
        self.config = config
        self._embeddings = embeddings or OpenAIEmbeddings(
            model=config.model,
            base_url=config.base_url,
            api_key=config.api_key,
            # Non-OpenAI backends accept raw strings, not tiktoken ids
            check_embedding_ctx_length=False,
        )

    @property
    def model(self) -> str:
        return self.config.model

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a single query text.

        Raises:
            ExternalServiceError: When the embedding call fails
        """
        try:
            return await self._embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f"{__name__}:embed_query - FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(
                f"Embedding query failed: {e}",
                service="embedding",
                details={"model": self.model},
            ) from e

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """
        Embed a batch of texts.

        Args:
            texts: Texts to embed, at most the provider's batch ceiling

        Returns:
            list[list[float]]: One vector per text, in input order

        Raises:
            ExternalServiceError: When the call fails or returns the wrong count
        """
        if not texts:
            return []
        try:
            vectors = await self._embeddings.aembed_documents(texts)
        except Exception as e:
            logger.error(f"{__name__}:embed_documents - FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(
                f"Embedding documents failed: {e}",
                service="embedding",
                details={"model": self.model, "batch_size": len(texts)},
            ) from e

        if len(vectors) != len(texts):
            raise ExternalServiceError(
                "Embedding provider returned a different number of vectors",
                service="embedding",
                details={"expected": len(texts), "actual": len(vectors)},
            )
        return vectors

    async def measure_dimension(self) -> int:
        """Embed a fixed text and return the vector length."""
        vector = await self.embed_query(DIMENSION_SAMPLE_TEXT)
        logger.info(f"{__name__}:measure_dimension - model={self.model} dimension={len(vector)}")
        return len(vector)
