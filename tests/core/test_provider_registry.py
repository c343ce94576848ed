"""
Test suite for ProviderRegistry.

Tests snapshot versioning, dimension check before publishing an embedding
model, LLM publishing and status output.

System role: Verification of hot-swappable provider configuration
"""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError as PydanticValidationError

from ragdesk.boundary.llm.embedding_gateway import EmbeddingGateway
from ragdesk.core.exceptions import DimensionMismatchError, ExternalServiceError, ValidationError
from ragdesk.core.providers import ProviderRegistry, build_provider_config
from ragdesk.models.provider import ProviderConfig


def _gateway(dimension: int, model: str) -> MagicMock:
    gateway = MagicMock(spec=EmbeddingGateway)
    gateway.model = model
    gateway.measure_dimension.return_value = dimension
    return gateway


@pytest.fixture
def new_embedding_config() -> ProviderConfig:
    """Provide config for a replacement embedding model."""
    return ProviderConfig(model="embed-v2", base_url="http://embed2.local/v1", api_key="sk-2")


class TestSnapshot:
    """Test suite for the initial snapshot."""

    def test_initial_version_is_one(self, provider_registry: ProviderRegistry) -> None:
        """Test the registry starts at version 1."""
        assert provider_registry.current().version == 1

    def test_snapshot_is_immutable(self, provider_registry: ProviderRegistry) -> None:
        """Test snapshot fields cannot be reassigned."""
        snapshot = provider_registry.current()

        with pytest.raises(PydanticValidationError):
            snapshot.version = 99


class TestPublishEmbedding:
    """Test suite for embedding model swaps."""

    @pytest.mark.asyncio
    async def test_matching_dimension_publishes_new_version(
        self,
        mock_vector_index: MagicMock,
        embedding_config: ProviderConfig,
        llm_config: ProviderConfig,
        mock_llm_gateway: MagicMock,
        new_embedding_config: ProviderConfig,
    ) -> None:
        """Test a compatible model becomes current with version + 1."""
        # Arrange
        old, new = _gateway(4, "embed-test"), _gateway(4, "embed-v2")
        gateways = iter([old, new])
        registry = ProviderRegistry(
            mock_vector_index,
            embedding_config,
            llm_config,
            embedding_factory=lambda config: next(gateways),
            llm_factory=lambda config: mock_llm_gateway,
        )
        before = registry.current()

        # Act
        after = await registry.publish_embedding(new_embedding_config)

        # Assert
        assert after.version == 2
        assert registry.current() is after
        assert after.embedding is new
        assert after.embedding_config == new_embedding_config
        assert after.llm is before.llm
        assert before.embedding is old
        assert before.version == 1

    @pytest.mark.asyncio
    async def test_dimension_mismatch_leaves_snapshot_unchanged(
        self,
        mock_vector_index: MagicMock,
        embedding_config: ProviderConfig,
        llm_config: ProviderConfig,
        mock_llm_gateway: MagicMock,
        new_embedding_config: ProviderConfig,
    ) -> None:
        """Test an incompatible model is rejected before the swap."""
        gateways = iter([_gateway(4, "embed-test"), _gateway(1536, "embed-v2")])
        registry = ProviderRegistry(
            mock_vector_index,
            embedding_config,
            llm_config,
            embedding_factory=lambda config: next(gateways),
            llm_factory=lambda config: mock_llm_gateway,
        )
        before = registry.current()

        with pytest.raises(DimensionMismatchError) as exc_info:
            await registry.publish_embedding(new_embedding_config)

        assert registry.current() is before
        assert exc_info.value.details["expected"] == 4
        assert exc_info.value.details["actual"] == 1536

    @pytest.mark.asyncio
    async def test_dimension_failure_leaves_snapshot_unchanged(
        self,
        mock_vector_index: MagicMock,
        embedding_config: ProviderConfig,
        llm_config: ProviderConfig,
        mock_llm_gateway: MagicMock,
        new_embedding_config: ProviderConfig,
    ) -> None:
        """Test an unreachable model is not published."""
        broken = _gateway(4, "embed-v2")
        broken.measure_dimension.side_effect = ExternalServiceError("unreachable", service="embedding")
        gateways = iter([_gateway(4, "embed-test"), broken])
        registry = ProviderRegistry(
            mock_vector_index,
            embedding_config,
            llm_config,
            embedding_factory=lambda config: next(gateways),
            llm_factory=lambda config: mock_llm_gateway,
        )

        with pytest.raises(ExternalServiceError):
            await registry.publish_embedding(new_embedding_config)

        assert registry.current().version == 1

    @pytest.mark.asyncio
    async def test_verify_embedding_checks_active_model(
        self, provider_registry: ProviderRegistry, mock_embedding_gateway: MagicMock
    ) -> None:
        """Test verify_embedding raises on a mismatched active model."""
        mock_embedding_gateway.measure_dimension.return_value = 8

        with pytest.raises(DimensionMismatchError):
            await provider_registry.verify_embedding()

    @pytest.mark.asyncio
    async def test_initial_model_checked_once_before_use(
        self, provider_registry: ProviderRegistry, mock_embedding_gateway: MagicMock
    ) -> None:
        """Test the initial embedding model is checked on first use only."""
        # Act
        await provider_registry.ensure_embedding_verified()
        await provider_registry.ensure_embedding_verified()

        # Assert
        mock_embedding_gateway.measure_dimension.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_initial_mismatch_raised_on_every_use(
        self, provider_registry: ProviderRegistry, mock_embedding_gateway: MagicMock
    ) -> None:
        """Test a mismatched initial model is never marked as verified."""
        mock_embedding_gateway.measure_dimension.return_value = 8

        for _ in range(2):
            with pytest.raises(DimensionMismatchError):
                await provider_registry.ensure_embedding_verified()

        assert mock_embedding_gateway.measure_dimension.await_count == 2

    @pytest.mark.asyncio
    async def test_published_model_needs_no_extra_check(
        self,
        mock_vector_index: MagicMock,
        embedding_config: ProviderConfig,
        llm_config: ProviderConfig,
        mock_llm_gateway: MagicMock,
        new_embedding_config: ProviderConfig,
    ) -> None:
        """Test publishing an embedding model counts as its dimension check."""
        initial, replacement = _gateway(8, "embed-old"), _gateway(4, "embed-new")
        gateways = iter([initial, replacement])
        registry = ProviderRegistry(
            vector_index=mock_vector_index,
            embedding_config=embedding_config,
            llm_config=llm_config,
            embedding_factory=lambda config: next(gateways),
            llm_factory=lambda config: mock_llm_gateway,
        )

        await registry.publish_embedding(new_embedding_config)
        await registry.ensure_embedding_verified()

        initial.measure_dimension.assert_not_awaited()
        replacement.measure_dimension.assert_awaited_once()


class TestPublishLLM:
    """Test suite for chat model swaps."""

    @pytest.mark.asyncio
    async def test_publish_llm_bumps_version(
        self, provider_registry: ProviderRegistry, llm_config: ProviderConfig
    ) -> None:
        """Test publishing a chat model creates a new version."""
        new_config = ProviderConfig(model="chat-v2", base_url="http://llm2.local/v1", api_key="sk-9")

        snapshot = await provider_registry.publish_llm(new_config)

        assert snapshot.version == 2
        assert snapshot.llm_config.model == "chat-v2"

    @pytest.mark.asyncio
    async def test_in_flight_snapshot_is_unaffected(self, provider_registry: ProviderRegistry) -> None:
        """Test a captured snapshot keeps its config after a publish."""
        captured = provider_registry.current()

        await provider_registry.publish_llm(
            ProviderConfig(model="chat-v2", base_url="http://llm2.local/v1", api_key="sk-9")
        )

        assert captured.llm_config.model == "chat-test"
        assert captured.version == 1


class TestStatus:
    """Test suite for status reporting."""

    def test_status_never_contains_keys(self, provider_registry: ProviderRegistry) -> None:
        """Test status exposes model names and URLs but no API keys."""
        status = provider_registry.status()

        assert status["version"] == 1
        assert status["embedding"] == {"model": "embed-test", "base_url": "http://embed.local/v1"}
        assert status["llm"] == {"model": "chat-test", "base_url": "http://llm.local/v1"}
        assert "sk-embed" not in str(status)
        assert "sk-llm" not in str(status)


class TestBuildProviderConfig:
    """Test suite for config validation."""

    @pytest.mark.parametrize(
        "model,base_url,api_key",
        [("", "http://x", "k"), ("m", "  ", "k"), ("m", "http://x", "")],
    )
    def test_blank_fields_raise_validation_error(self, model: str, base_url: str, api_key: str) -> None:
        """Test missing provider fields are rejected."""
        with pytest.raises(ValidationError):
            build_provider_config(model, base_url, api_key)

    def test_api_key_is_secret(self) -> None:
        """Test the key is hidden in repr."""
        config = build_provider_config("m", "http://x", "sk-secret")

        assert "sk-secret" not in repr(config)
        assert config.api_key.get_secret_value() == "sk-secret"
