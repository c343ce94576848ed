"""
Model provider configuration settings.

Embedding, chat model and rerank endpoints. Embedding and chat models are
reached through OpenAI-compatible APIs configured by model name, base URL
and API key.

Dependencies: pydantic, pydantic_settings
System role: Provider endpoint configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingProviderSettings(BaseSettings):
    """Embedding provider (OpenAI-compatible /embeddings endpoint)."""

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(default="", description="Embedding model name")
    base_url: str = Field(default="", description="OpenAI-compatible base URL")
    api_key: str = Field(default="", description="API key for the embedding endpoint")


class LLMProviderSettings(BaseSettings):
    """Chat model provider (OpenAI-compatible /chat/completions endpoint)."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(default="", description="Chat model name")
    base_url: str = Field(default="", description="OpenAI-compatible base URL")
    api_key: str = Field(default="", description="API key for the chat endpoint")

    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=2000, gt=0, description="Maximum tokens per answer")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout")
    max_retries: int = Field(default=2, ge=0, le=5, description="Transport-level retry count")


class RerankSettings(BaseSettings):
    """Rerank service (DashScope text-rerank HTTP contract)."""

    model_config = SettingsConfigDict(
        env_prefix="RERANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Allow reranked retrieval")
    endpoint: str = Field(
        default="https://dashscope.aliyuncs.com/api/v1/services/rerank/text-rerank/text-rerank",
        description="Rerank HTTP endpoint",
    )
    model: str = Field(default="qwen3-rerank", description="Rerank model name")
    api_key: str = Field(default="", description="Bearer token for the rerank endpoint")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Request timeout")
