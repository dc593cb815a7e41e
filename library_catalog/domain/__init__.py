"""
Domain layer - Core business logic and entities.

This layer contains the business entities, value objects, and defines
the ports (interfaces) that the infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import UNSET, Author, Book, BookType, Category
from .errors import DomainError, ErrorKind
from .value_objects import ISBN, BookFormat, DuplicateCheckResult, EmbeddingResult

__all__ = [
    # Entities
    "Author",
    "Book",
    "BookType",
    "Category",
    "UNSET",
    # Value Objects
    "ISBN",
    "BookFormat",
    "DuplicateCheckResult",
    "EmbeddingResult",
    # Errors
    "DomainError",
    "ErrorKind",
]
