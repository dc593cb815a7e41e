"""
Domain errors for the library catalog.

Every error carries an ``ErrorKind`` discriminant. Adapters (HTTP, CLI) map
errors to their own representation by looking at ``kind`` instead of walking
an isinstance chain.

Domain errors represent business rule violations. Failures of external
systems (the embedding service) live in ``domain.services.errors`` and do NOT
inherit from ``DomainError``.
"""

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    """Closed set of error kinds known to the catalog."""

    # Domain tier
    REQUIRED_FIELD = "required_field"
    FIELD_TOO_LONG = "field_too_long"
    INVALID_IDENTIFIER = "invalid_identifier"
    TOO_MANY_ITEMS = "too_many_items"
    DUPLICATE_ITEM = "duplicate_item"
    INVALID_ISBN = "invalid_isbn"
    INVALID_BOOK_FORMAT = "invalid_book_format"
    INVALID_BOOK_TYPE = "invalid_book_type"
    BOOK_NOT_FOUND = "book_not_found"
    CATEGORY_NOT_FOUND = "category_not_found"
    DUPLICATE_ISBN = "duplicate_isbn"
    DUPLICATE_BOOK = "duplicate_book"

    # Application tier
    EMBEDDING_SERVICE_ERROR = "embedding_service_error"
    EMBEDDING_SERVICE_UNAVAILABLE = "embedding_service_unavailable"
    EMBEDDING_TEXT_TOO_LONG = "embedding_text_too_long"


class DomainError(Exception):
    """Base class for all business rule violations."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RequiredFieldError(DomainError):
    """A required field is missing or blank."""

    kind = ErrorKind.REQUIRED_FIELD

    def __init__(self, field_name: str) -> None:
        super().__init__(f'"{field_name}" is required and cannot be empty')
        self.field_name = field_name


class FieldTooLongError(DomainError):
    """A text field exceeds its maximum length."""

    kind = ErrorKind.FIELD_TOO_LONG

    def __init__(self, field_name: str, max_length: int) -> None:
        super().__init__(
            f'"{field_name}" exceeds maximum length of {max_length} characters'
        )
        self.field_name = field_name
        self.max_length = max_length


class InvalidIdentifierError(DomainError):
    """An identifier is not a canonical UUID v4."""

    kind = ErrorKind.INVALID_IDENTIFIER

    def __init__(self, value: str) -> None:
        super().__init__(f'Invalid UUID format: "{value}"')
        self.value = value


class TooManyItemsError(DomainError):
    kind = ErrorKind.TOO_MANY_ITEMS

    def __init__(self, field_name: str, max_items: int) -> None:
        super().__init__(f'"{field_name}" exceeds maximum of {max_items} items')
        self.field_name = field_name
        self.max_items = max_items


class DuplicateItemError(DomainError):
    kind = ErrorKind.DUPLICATE_ITEM

    def __init__(self, field_name: str, value: str) -> None:
        super().__init__(f'Duplicate value "{value}" in "{field_name}"')
        self.field_name = field_name
        self.value = value


class InvalidISBNError(DomainError):
    kind = ErrorKind.INVALID_ISBN

    def __init__(self, value: str) -> None:
        super().__init__(
            f'Invalid ISBN: "{value}". Must be a valid ISBN-10 or ISBN-13 '
            f"with correct checksum."
        )
        self.value = value


class InvalidBookFormatError(DomainError):
    kind = ErrorKind.INVALID_BOOK_FORMAT

    def __init__(self, value: str, valid_formats: Iterable[str]) -> None:
        self.valid_formats = tuple(valid_formats)
        super().__init__(
            f'Invalid book format: "{value}". '
            f"Valid formats are: {', '.join(self.valid_formats)}"
        )
        self.value = value


class InvalidBookTypeError(DomainError):
    kind = ErrorKind.INVALID_BOOK_TYPE

    def __init__(self, value: str, valid_types: Iterable[str]) -> None:
        self.valid_types = tuple(valid_types)
        super().__init__(
            f'Invalid book type: "{value}". '
            f"Valid types are: {', '.join(self.valid_types)}"
        )
        self.value = value


class BookNotFoundError(DomainError):
    kind = ErrorKind.BOOK_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Book not found: {identifier}")
        self.identifier = identifier


class CategoryNotFoundError(DomainError):
    kind = ErrorKind.CATEGORY_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Category not found: {identifier}")
        self.identifier = identifier


class DuplicateISBNError(DomainError):
    """A book with the same normalized ISBN is already in the catalog."""

    kind = ErrorKind.DUPLICATE_ISBN

    def __init__(self, isbn: str) -> None:
        super().__init__(f'A book with ISBN "{isbn}" already exists')
        self.isbn = isbn


class DuplicateBookError(DomainError):
    """
    Legacy duplicate on (author, title, format).

    Duplicate detection is ISBN-only; this error is kept so API clients that
    know about it keep working. Nothing in the creation pipeline raises it.
    """

    kind = ErrorKind.DUPLICATE_BOOK

    def __init__(self, author: str, title: str, book_format: str) -> None:
        super().__init__(
            f'A book by "{author}" titled "{title}" in format "{book_format}" '
            f"already exists"
        )
        self.author = author
        self.title = title
        self.book_format = book_format
