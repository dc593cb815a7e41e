"""
Application-tier errors.

These represent failures of external systems (the embedding service) or
technical limits of those systems, not business rule violations, so they do
not inherit from ``DomainError``. They still carry an ``ErrorKind`` so the
adapters map them the same way.
"""

from typing import Optional

from library_catalog.domain.errors import ErrorKind

UNAVAILABLE_MESSAGE = "Embedding service unavailable, please try again later"


class EmbeddingServiceError(Exception):
    """Base class for embedding service failures."""

    kind: ErrorKind = ErrorKind.EMBEDDING_SERVICE_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmbeddingServiceUnavailableError(EmbeddingServiceError):
    """The service could not be reached, timed out, or answered garbage."""

    kind = ErrorKind.EMBEDDING_SERVICE_UNAVAILABLE

    def __init__(self, reason: Optional[str] = None) -> None:
        super().__init__(
            f"Embedding service unavailable: {reason}" if reason else UNAVAILABLE_MESSAGE
        )
        self.reason = reason


class EmbeddingTextTooLongError(EmbeddingServiceError):
    """The text to embed is longer than the service accepts."""

    kind = ErrorKind.EMBEDDING_TEXT_TOO_LONG

    def __init__(self, actual_length: int, max_length: int) -> None:
        super().__init__(
            f"Embedding text exceeds maximum length: {actual_length} characters "
            f"(max: {max_length})"
        )
        self.actual_length = actual_length
        self.max_length = max_length
