"""Application services."""

from ragdesk.application.ingestion_service import IngestionService, generate_chunk_id

__all__ = ["IngestionService", "generate_chunk_id"]
