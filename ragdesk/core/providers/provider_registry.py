"""
Versioned provider registry.

Holds the active embedding and chat model gateways as one immutable,
versioned snapshot behind a single reference. Requests capture the snapshot
once and keep using it even if a newer version is published meanwhile.

Dependencies: pydantic, ragdesk.boundary.llm
System role: Hot-swappable model configuration
"""

import asyncio
import logging
from typing import Any, Callable, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ragdesk.boundary.llm.embedding_gateway import EmbeddingGateway
from ragdesk.boundary.llm.llm_gateway import LLMGateway
from ragdesk.core.exceptions import DimensionMismatchError, ValidationError
from ragdesk.models.provider import ProviderConfig

logger = logging.getLogger(__name__)


class SupportsDimension(Protocol):
    @property
    def dimension(self) -> int: ...


def build_provider_config(model: str, base_url: str, api_key: str) -> ProviderConfig:
    """
    Build a ProviderConfig, reporting blank fields as ValidationError.

    Raises:
        ValidationError: When any field is missing or blank
    """
    try:
        return ProviderConfig(model=model, base_url=base_url, api_key=api_key)
    except PydanticValidationError as e:
        fields = [str(err["loc"][0]) for err in e.errors() if err.get("loc")]
        raise ValidationError(
            f"Invalid provider configuration: missing or empty {', '.join(fields)}",
            field=fields[0] if fields else None,
            details={"fields": fields},
        ) from e


class ProviderSnapshot(BaseModel):
    """Immutable provider configuration version."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    version: int = Field(ge=1, description="Monotonic snapshot version")
    embedding: EmbeddingGateway
    llm: LLMGateway
    embedding_config: ProviderConfig
    llm_config: ProviderConfig


class ProviderRegistry:
    """
    Single atomic reference to the current ProviderSnapshot.

    Publishing is serialized; readers never wait. A new embedding model is
    published only after its vector dimension is checked against the
    collection.
    """

    def __init__(
        self,
        vector_index: SupportsDimension,
        embedding_config: ProviderConfig,
        llm_config: ProviderConfig,
        embedding_factory: Callable[[ProviderConfig], EmbeddingGateway] = EmbeddingGateway,
        llm_factory: Callable[[ProviderConfig], LLMGateway] = LLMGateway,
    ) -> None:
        """
        Initialize the registry with version 1.

        Args:
            vector_index: Collection whose dimension embedding models must match
            embedding_config: Initial embedding provider
            llm_config: Initial chat model provider
            embedding_factory: Builds an EmbeddingGateway from a config
            llm_factory: Builds an LLMGateway from a config
        """
        self._vector_index = vector_index
        self._embedding_factory = embedding_factory
        self._llm_factory = llm_factory
        self._publish_lock = asyncio.Lock()
        self._embedding_verified = False
        self._snapshot = ProviderSnapshot(
            version=1,
            embedding=embedding_factory(embedding_config),
            llm=llm_factory(llm_config),
            embedding_config=embedding_config,
            llm_config=llm_config,
        )

    def current(self) -> ProviderSnapshot:
        """Return the active snapshot. Capture once per request."""
        return self._snapshot

    async def _check_dimension(self, gateway: EmbeddingGateway) -> None:
        actual = await gateway.measure_dimension()
        expected = self._vector_index.dimension
        if actual != expected:
            logger.warning(
                f"{__name__}:_check_dimension - Rejected model={gateway.model}: "
                f"dimension {actual} != collection {expected}"
            )
            raise DimensionMismatchError(expected=expected, actual=actual, model=gateway.model)

    async def verify_embedding(self) -> None:
        """
        Check the active embedding model against the collection dimension.

        Raises:
            DimensionMismatchError: When the dimensions differ
            ExternalServiceError: When the dimension request fails
        """
        await self._check_dimension(self._snapshot.embedding)
        self._embedding_verified = True

    async def ensure_embedding_verified(self) -> None:
        """
        Check the initial embedding model once, before its first use.

        Published models are checked when they are published, so this only
        ever checks the model the registry was built with.

        Raises:
            DimensionMismatchError: When the dimensions differ
            ExternalServiceError: When the dimension request fails
        """
        if self._embedding_verified:
            return
        async with self._publish_lock:
            if not self._embedding_verified:
                await self.verify_embedding()
                logger.info(f"{__name__}:ensure_embedding_verified - model={self._snapshot.embedding.model} OK")

    async def publish_embedding(self, config: ProviderConfig) -> ProviderSnapshot:
        """
        Publish a new embedding provider.

        Args:
            config: New embedding provider configuration

        Returns:
            ProviderSnapshot: The newly active snapshot

        Raises:
            DimensionMismatchError: When the model's dimension differs from the
                collection; the current snapshot is left unchanged
            ExternalServiceError: When the dimension request fails
        """
        async with self._publish_lock:
            gateway = self._embedding_factory(config)
            await self._check_dimension(gateway)
            self._embedding_verified = True
            self._snapshot = self._snapshot.model_copy(
                update={
                    "version": self._snapshot.version + 1,
                    "embedding": gateway,
                    "embedding_config": config,
                }
            )
            logger.info(
                f"{__name__}:publish_embedding - version={self._snapshot.version} model={config.model}"
            )
            return self._snapshot

    async def publish_llm(self, config: ProviderConfig) -> ProviderSnapshot:
        """
        Publish a new chat model provider.

        Args:
            config: New chat model configuration

        Returns:
            ProviderSnapshot: The newly active snapshot
        """
        async with self._publish_lock:
            gateway = self._llm_factory(config)
            self._snapshot = self._snapshot.model_copy(
                update={
                    "version": self._snapshot.version + 1,
                    "llm": gateway,
                    "llm_config": config,
                }
            )
            logger.info(f"{__name__}:publish_llm - version={self._snapshot.version} model={config.model}")
            return self._snapshot

    def status(self) -> dict[str, Any]:
        """Model names, base URLs and version of the active snapshot. Never includes keys."""
        snapshot = self._snapshot
        return {
            "version": snapshot.version,
            "embedding": {
                "model": snapshot.embedding_config.model,
                "base_url": snapshot.embedding_config.base_url,
            },
            "llm": {
                "model": snapshot.llm_config.model,
                "base_url": snapshot.llm_config.base_url,
            },
            "dimension": self._vector_index.dimension,
        }
