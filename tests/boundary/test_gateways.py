"""
Test suite for the embedding and chat model gateways.

LangChain clients are replaced with mocks or fake runnables; no requests
leave the process.

System role: Verification of model gateway error mapping
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import HumanMessage
from langchain_core.runnables import RunnableLambda

from ragdesk.boundary.llm import EmbeddingGateway, LLMGateway
from ragdesk.core.exceptions import ExternalServiceError
from ragdesk.models.provider import ProviderConfig


@pytest.fixture
def config() -> ProviderConfig:
    """Provide provider config."""
    return ProviderConfig(model="m-1", base_url="http://models.local/v1", api_key="sk-test")


@pytest.fixture
def mock_embeddings() -> MagicMock:
    """Provide mock OpenAIEmbeddings client."""
    embeddings = MagicMock()
    embeddings.aembed_query = AsyncMock(return_value=[0.5, 0.25, 0.125])
    embeddings.aembed_documents = AsyncMock(return_value=[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    return embeddings


class TestEmbeddingGateway:
    """Test suite for EmbeddingGateway."""

    def test_client_configured_for_compatible_backends(self, config: ProviderConfig) -> None:
        """Test OpenAIEmbeddings gets model, URL, key and no token-length check."""
        with patch("ragdesk.boundary.llm.embedding_gateway.OpenAIEmbeddings") as mock_cls:
            EmbeddingGateway(config)

        kwargs = mock_cls.call_args.kwargs
        assert kwargs["model"] == "m-1"
        assert kwargs["base_url"] == "http://models.local/v1"
        assert kwargs["api_key"].get_secret_value() == "sk-test"
        assert kwargs["check_embedding_ctx_length"] is False

    @pytest.mark.asyncio
    async def test_embed_query(self, config: ProviderConfig, mock_embeddings: MagicMock) -> None:
        """Test query embedding is returned as-is."""
        gateway = EmbeddingGateway(config, embeddings=mock_embeddings)

        assert await gateway.embed_query("hello") == [0.5, 0.25, 0.125]

    @pytest.mark.asyncio
    async def test_measure_dimension(self, config: ProviderConfig, mock_embeddings: MagicMock) -> None:
        """Test the dimension request returns the vector length."""
        gateway = EmbeddingGateway(config, embeddings=mock_embeddings)

        assert await gateway.measure_dimension() == 3

    @pytest.mark.asyncio
    async def test_embed_documents_empty_skips_call(
        self, config: ProviderConfig, mock_embeddings: MagicMock
    ) -> None:
        """Test an empty batch makes no request."""
        gateway = EmbeddingGateway(config, embeddings=mock_embeddings)

        assert await gateway.embed_documents([]) == []
        mock_embeddings.aembed_documents.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_error_is_wrapped(self, config: ProviderConfig, mock_embeddings: MagicMock) -> None:
        """Test client errors become ExternalServiceError(service=embedding)."""
        mock_embeddings.aembed_documents.side_effect = ConnectionError("reset")
        gateway = EmbeddingGateway(config, embeddings=mock_embeddings)

        with pytest.raises(ExternalServiceError) as exc_info:
            await gateway.embed_documents(["a", "b"])
        assert exc_info.value.details["service"] == "embedding"

    @pytest.mark.asyncio
    async def test_vector_count_mismatch_is_error(
        self, config: ProviderConfig, mock_embeddings: MagicMock
    ) -> None:
        """Test fewer vectors than texts is rejected."""
        gateway = EmbeddingGateway(config, embeddings=mock_embeddings)

        with pytest.raises(ExternalServiceError):
            await gateway.embed_documents(["a", "b", "c"])


class TestLLMGateway:
    """Test suite for LLMGateway."""

    def test_client_has_timeout_and_bounded_retries(self, config: ProviderConfig) -> None:
        """Test ChatOpenAI receives timeout and retry settings."""
        with patch("ragdesk.boundary.llm.llm_gateway.ChatOpenAI") as mock_cls:
            LLMGateway(config, temperature=0.2, max_tokens=100, timeout=30.0, max_retries=2)

        kwargs = mock_cls.call_args.kwargs
        assert kwargs["model"] == "m-1"
        assert kwargs["timeout"] == 30.0
        assert kwargs["max_retries"] == 2
        assert kwargs["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_invoke_returns_text(self, config: ProviderConfig) -> None:
        """Test the model output is parsed to a string."""
        gateway = LLMGateway(config, model=FakeListChatModel(responses=["the answer"]))

        answer = await gateway.invoke([HumanMessage(content="question")])

        assert answer == "the answer"

    @pytest.mark.asyncio
    async def test_model_error_is_wrapped(self, config: ProviderConfig) -> None:
        """Test model failures become ExternalServiceError(service=llm)."""
        async def failing(messages):
            raise TimeoutError("read timeout")

        gateway = LLMGateway(config, model=RunnableLambda(failing))

        with pytest.raises(ExternalServiceError) as exc_info:
            await gateway.invoke("question")
        assert exc_info.value.details["service"] == "llm"
        assert exc_info.value.user_message.startswith("The service is temporarily unavailable")
