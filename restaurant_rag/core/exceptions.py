"""
Exception hierarchy for the restaurant knowledge base.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class RestaurantRagError(Exception):
    """Base exception for all knowledge base errors."""

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

    @property
    def stage(self) -> str | None:
        """Ingestion stage that failed, when the error was raised during ingest."""
        return self.details.get("stage")

    def at_stage(self, stage: str) -> "RestaurantRagError":
        """Tag the error with the ingestion stage it interrupted and return it."""
        self.details["stage"] = stage
        return self


class ConfigurationError(RestaurantRagError):
    """Raised when provider credentials or store settings are missing."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            setting: Name of the missing or invalid setting
            details: Additional context
        """
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class ValidationError(RestaurantRagError):
    """Raised when input validation fails."""

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


class EmbeddingProviderError(RestaurantRagError):
    """Raised when the embedding provider call fails or answers malformed data."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize embedding provider error.

        Args:
            message: Error message
            status_code: HTTP status returned by the provider, None for transport errors
            details: Additional context
        """
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details)


class StoreError(RestaurantRagError):
    """Raised when chunk store reads or writes fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize store error.

        Args:
            message: Error message
            operation: Operation that failed (save, delete, semantic_search, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class IndexUnavailableError(StoreError):
    """Raised when a search index (or the extension backing it) does not exist yet."""

    def __init__(
        self,
        message: str,
        index: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize index unavailable error.

        Args:
            message: Error message
            index: Name of the missing index
            operation: Search operation that needed it
            details: Additional context
        """
        details = details or {}
        details["index"] = index
        self.index = index
        super().__init__(message, operation, details)


class SearchTimeoutError(StoreError):
    """Raised when a search branch exceeds its deadline."""

    pass
