"""
RAG pipeline configuration settings.

Chunking, ingestion batching, retrieval depth and conversation window.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Hard per-call ceiling enforced by the embedding provider
MAX_EMBEDDING_BATCH = 10


class PipelineSettings(BaseSettings):
    """Settings for ingestion, retrieval and chat history."""

    model_config = SettingsConfigDict(
        env_prefix="RAG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    max_chunk_size: int = Field(default=500, gt=0, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=0, ge=0, description="Overlap between consecutive sub-chunks")

    # Ingestion settings
    ingest_batch_size: int = Field(
        default=MAX_EMBEDDING_BATCH,
        ge=1,
        le=MAX_EMBEDDING_BATCH,
        description="Chunks per embedding/index call",
    )

    # Retrieval and chat settings
    top_k: int = Field(default=4, ge=1, le=100, description="Number of candidates to retrieve")
    max_history_rounds: int = Field(default=10, ge=1, description="Conversation rounds kept per session")

    @model_validator(mode="after")
    def _check_overlap(self) -> "PipelineSettings":
        if self.chunk_overlap >= self.max_chunk_size:
            raise ValueError("chunk_overlap must be smaller than max_chunk_size")
        return self
