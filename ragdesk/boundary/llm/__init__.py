"""OpenAI-compatible embedding and chat model gateways."""

from ragdesk.boundary.llm.embedding_gateway import EmbeddingGateway
from ragdesk.boundary.llm.llm_gateway import LLMGateway

__all__ = ["EmbeddingGateway", "LLMGateway"]
