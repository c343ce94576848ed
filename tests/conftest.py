"""
Shared test fixtures and configuration for entire test suite.

Provides: provider configs, mocked gateways, provider registry, prompt registry
Dependencies: pytest, unittest.mock
System role: Test infrastructure and fixture management
"""

from unittest.mock import MagicMock

import pytest

from ragdesk.boundary.llm.embedding_gateway import EmbeddingGateway
from ragdesk.boundary.llm.llm_gateway import LLMGateway
from ragdesk.core.providers.provider_registry import ProviderRegistry
from ragdesk.models.provider import ProviderConfig
from ragdesk.observability.prompt_registry import PromptRegistry

TEST_DIMENSION = 4


@pytest.fixture
def embedding_config() -> ProviderConfig:
    """Provide embedding provider config."""
    return ProviderConfig(model="embed-test", base_url="http://embed.local/v1", api_key="sk-embed")


@pytest.fixture
def llm_config() -> ProviderConfig:
    """Provide chat model provider config."""
    return ProviderConfig(model="chat-test", base_url="http://llm.local/v1", api_key="sk-llm")


@pytest.fixture
def mock_embedding_gateway() -> MagicMock:
    """
    Create mock EmbeddingGateway.

    Returns:
        MagicMock: Gateway whose async methods return fixed vectors
    """
    gateway = MagicMock(spec=EmbeddingGateway)
    gateway.model = "embed-test"
    gateway.embed_query.return_value = [0.1] * TEST_DIMENSION
    gateway.embed_documents.side_effect = lambda texts: [[float(i)] * TEST_DIMENSION for i in range(len(texts))]
    gateway.measure_dimension.return_value = TEST_DIMENSION
    return gateway


@pytest.fixture
def mock_llm_gateway() -> MagicMock:
    """
    Create mock LLMGateway.

    Returns:
        MagicMock: Gateway whose invoke returns a fixed answer
    """
    gateway = MagicMock(spec=LLMGateway)
    gateway.model = "chat-test"
    gateway.invoke.return_value = "test answer"
    return gateway


@pytest.fixture
def mock_vector_index() -> MagicMock:
    """Create mock vector index of the test dimension."""
    index = MagicMock()
    index.dimension = TEST_DIMENSION
    return index


@pytest.fixture
def provider_registry(
    mock_vector_index: MagicMock,
    embedding_config: ProviderConfig,
    llm_config: ProviderConfig,
    mock_embedding_gateway: MagicMock,
    mock_llm_gateway: MagicMock,
) -> ProviderRegistry:
    """Provider registry wired to the mocked gateways."""
    return ProviderRegistry(
        vector_index=mock_vector_index,
        embedding_config=embedding_config,
        llm_config=llm_config,
        embedding_factory=lambda config: mock_embedding_gateway,
        llm_factory=lambda config: mock_llm_gateway,
    )


@pytest.fixture
def prompt_registry() -> PromptRegistry:
    """Prompt registry without Langfuse mirroring."""
    return PromptRegistry()
