"""
Ingestion result model.

Dependencies: pydantic
System role: Ingestion pipeline output structure
"""

from pydantic import BaseModel, Field


class IngestionReport(BaseModel):
    """Outcome of ingesting one document."""

    document_id: str = Field(description="Document identifier")
    source_id: str = Field(description="Source identifier (file name)")
    chunk_count: int = Field(ge=0, description="Number of chunks written")
    batch_count: int = Field(ge=0, description="Number of embedding/index batches")
    chunk_ids: list[str] = Field(default_factory=list, description="Deterministic chunk ids in order")
    processing_time_ms: float = Field(ge=0, description="Wall-clock processing time")
