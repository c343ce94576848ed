"""
Domain models.

Dependencies: pydantic
System role: Shared data structures across layers
"""

from ragdesk.models.chat import ConversationRole, ConversationTurn
from ragdesk.models.chunk import Chunk, IndexedChunk, RetrievedChunk
from ragdesk.models.document import RawDocument
from ragdesk.models.ingestion import IngestionReport
from ragdesk.models.provider import ProviderConfig

__all__ = [
    "RawDocument",
    "Chunk",
    "IndexedChunk",
    "RetrievedChunk",
    "ConversationRole",
    "ConversationTurn",
    "ProviderConfig",
    "IngestionReport",
]
