"""
Domain services package.

Services orchestrate domain logic that doesn't naturally belong to a single
entity. They coordinate between entities and ports to implement use cases.

Following Hexagonal Architecture principles, services depend only on domain
entities, value objects, and port protocols (never on concrete implementations).
"""

from .create_book import MAX_EMBEDDING_TEXT_LENGTH, CreateBookInput, CreateBookUseCase
from .errors import (
    EmbeddingServiceError,
    EmbeddingServiceUnavailableError,
    EmbeddingTextTooLongError,
)

__all__ = [
    "CreateBookInput",
    "CreateBookUseCase",
    "MAX_EMBEDDING_TEXT_LENGTH",
    "EmbeddingServiceError",
    "EmbeddingServiceUnavailableError",
    "EmbeddingTextTooLongError",
]
