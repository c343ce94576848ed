"""
Chunk domain models.

Chunks as emitted by the chunker, as stored in the vector index, and as
returned by retrieval.

Dependencies: pydantic
System role: Document chunk data structures
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """Bounded unit of document text."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Chunk text content")
    source_id: str = Field(description="Source document identifier")
    sequential_index: int = Field(ge=0, description="0-based emission order")
    heading_path: str = Field(default="", description="Nearest enclosing heading line")


class IndexedChunk(BaseModel):
    """Chunk plus its embedding, ready to be written to the vector index."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Deterministic chunk identifier (content hash)")
    chunk: Chunk
    embedding: list[float] = Field(description="Embedding vector")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Source, timestamp, chunk index")

    @property
    def text(self) -> str:
        return self.chunk.text


class RetrievedChunk(BaseModel):
    """Chunk returned for one query. Discarded after the request completes."""

    text: str = Field(description="Chunk text content")
    score: float | None = Field(default=None, description="Store or rerank relevance score")
    rank: int = Field(ge=0, description="Position in the final ordering")
    chunk_id: str | None = Field(default=None, description="Chunk identifier when known")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Stored chunk metadata")
