"""
Raw document model.

Plain text produced by a parser, consumed once by the chunker.

Dependencies: pydantic
System role: Ingestion input structure
"""

from pydantic import BaseModel, ConfigDict, Field


class RawDocument(BaseModel):
    """Parsed document content ready for chunking."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Document identifier")
    content: str = Field(description="Plain-text / Markdown content")
    source_id: str = Field(description="Source identifier, usually the file name")
