"""
Vector store configuration settings.

Manages the local FAISS collection: its fixed vector dimension and
optional on-disk persistence.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """FAISS vector collection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VECTOR_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    index_name: str = Field(default="documents", description="Collection/index name")
    index_dir: str | None = Field(
        default=None,
        description="Directory for persisting the index (in-memory only when unset)",
    )
    embedding_dimension: int = Field(
        default=1024,
        gt=0,
        description="Vector dimension of the collection; embedding models must match it",
    )
