"""
Exception hierarchy for the conversation memory service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class MemoryServiceException(Exception):
    """Base exception for all conversation memory errors."""

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


class InvalidQueryError(MemoryServiceException):
    """Raised when a query vector, search term or request payload is malformed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid query error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DimensionMismatchError(MemoryServiceException):
    """Raised when an embedding's length differs from the expected dimension."""

    def __init__(
        self,
        expected: int,
        actual: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize dimension mismatch error.

        Args:
            expected: Required vector length
            actual: Length that was supplied
            details: Additional context
        """
        details = details or {}
        details["expected"] = expected
        details["actual"] = actual
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid embedding dimension: expected {expected}, got {actual}",
            details,
        )


class NotFoundError(MemoryServiceException):
    """Raised when an operation targets a missing summary, session, turn or user."""

    def __init__(
        self,
        resource: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            resource: Kind of record (Summary, Session, Turn, User)
            identifier: Id or key that was looked up
            details: Additional context
        """
        details = details or {}
        details["resource"] = resource
        details["identifier"] = str(identifier)
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", details)


class SessionAlreadyExistsError(MemoryServiceException):
    """
    Raised by a record store when a session key is already taken.

    The ingestion path treats this as "session now exists" and carries on;
    it never reaches an end caller.
    """

    def __init__(self, session_key: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["session_key"] = session_key
        self.session_key = session_key
        super().__init__(f"Session already exists: {session_key}", details)


class StoreUnavailableError(MemoryServiceException):
    """Raised when the record store cannot be reached. Retryable by the caller."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize store unavailable error.

        Args:
            message: Error message
            operation: Store operation that failed
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        self.operation = operation
        super().__init__(message, details)
