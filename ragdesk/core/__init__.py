"""
Core business logic module.

Contains chunking, retrieval, conversation state, generation and the
exception hierarchy. External services are reached only through the
boundary layer.
"""

from ragdesk.core.exceptions import (
    DimensionMismatchError,
    ExternalServiceError,
    IngestionError,
    NotFoundError,
    ProtocolError,
    RagDeskException,
    UnsupportedFormatError,
    ValidationError,
)

__all__ = [
    "RagDeskException",
    "ValidationError",
    "DimensionMismatchError",
    "UnsupportedFormatError",
    "NotFoundError",
    "ExternalServiceError",
    "ProtocolError",
    "IngestionError",
]
