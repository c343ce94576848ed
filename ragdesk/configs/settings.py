"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from ragdesk.configs.base import BaseSettings
from ragdesk.configs.observability import ObservabilitySettings
from ragdesk.configs.pipeline import PipelineSettings
from ragdesk.configs.providers import (
    EmbeddingProviderSettings,
    LLMProviderSettings,
    RerankSettings,
)
from ragdesk.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    embedding: EmbeddingProviderSettings = Field(default_factory=EmbeddingProviderSettings)
    llm: LLMProviderSettings = Field(default_factory=LLMProviderSettings)
    rerank: RerankSettings = Field(default_factory=RerankSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once, on first call.

    Returns:
        Settings: Application settings instance

    Usage:
        from ragdesk.configs import get_settings
        settings = get_settings()
    """
    return Settings()
