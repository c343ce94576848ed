"""
Exception hierarchy for ragdesk.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any

TRY_AGAIN_LATER = "The service is temporarily unavailable, please try again later."


class RagDeskException(Exception):
    """Base exception for all ragdesk errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(RagDeskException):
    """Raised when input validation fails. Nothing has been attempted yet."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DimensionMismatchError(ValidationError):
    """Raised when an embedding model's vectors do not fit the collection."""

    def __init__(self, expected: int, actual: int, model: str | None = None) -> None:
        details: dict[str, Any] = {"expected": expected, "actual": actual}
        if model:
            details["model"] = model
        super().__init__(
            f"Embedding dimension mismatch: collection expects {expected}, got {actual}",
            field="embedding_dimension",
            details=details,
        )


class UnsupportedFormatError(ValidationError):
    """Raised when the parser is given a file type it cannot read."""

    def __init__(self, extension: str, file_path: str | None = None) -> None:
        details: dict[str, Any] = {"extension": extension}
        if file_path:
            details["file_path"] = file_path
        super().__init__(f"Unsupported file format: {extension or '<none>'}", details=details)


class NotFoundError(RagDeskException):
    """Raised when a referenced document, file or prompt is absent."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            message: Error message
            resource: Identifier of the missing resource
            details: Additional context
        """
        details = details or {}
        if resource:
            details["resource"] = resource
        super().__init__(message, details)


class ExternalServiceError(RagDeskException):
    """
    Raised when an embedding, vector, rerank or LLM call fails.

    The message and details are for logs. Callers show ``user_message``,
    which never carries the underlying cause.
    """

    user_message = TRY_AGAIN_LATER

    def __init__(
        self,
        message: str,
        service: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize external service error.

        Args:
            message: Error message (logged, not shown to end users)
            service: Failing collaborator (embedding, vector_store, rerank, llm)
            details: Additional context
        """
        details = details or {}
        if service:
            details["service"] = service
        super().__init__(message, details)


class ProtocolError(ExternalServiceError):
    """Raised when a service answers with a payload that breaks its contract."""

    pass


class IngestionError(ExternalServiceError):
    """
    Raised when a batch fails during ingestion.

    Earlier batches stay committed; ``batches_committed`` says how many.
    """

    def __init__(
        self,
        message: str,
        document_id: str,
        batches_committed: int,
        batch_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update(
            {
                "document_id": document_id,
                "batches_committed": batches_committed,
                "batch_count": batch_count,
            }
        )
        self.document_id = document_id
        self.batches_committed = batches_committed
        self.batch_count = batch_count
        super().__init__(message, service="ingestion", details=details)
