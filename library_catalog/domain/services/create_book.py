"""
Domain service for creating a book in the catalog.

=============================================================================
Pipeline
=============================================================================

    validate format/ISBN --> resolve type --> duplicate check
        --> resolve categories/authors --> build Book --> embedding text check
        --> embedding service --> atomic save

Every field check, the type lookup and the duplicate check run before the
first write (category/author upserts), so a request rejected by them leaves
no rows behind. Nothing that can be rejected locally ever reaches the
embedding service.

The service depends ONLY on ports. It does not know about SQLite or HTTP.

Retries are not done here. An unavailable embedding service is reported to
the caller as EmbeddingServiceUnavailableError.
=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from library_catalog.domain.entities import (
    AUTHOR_NAME_MAX_LENGTH,
    CATEGORY_NAME_MAX_LENGTH,
    DEFAULT_BOOK_TYPES,
    DESCRIPTION_MAX_LENGTH,
    MAX_AUTHORS,
    MAX_CATEGORIES,
    TITLE_MAX_LENGTH,
    Book,
)
from library_catalog.domain.errors import (
    DuplicateISBNError,
    DuplicateItemError,
    InvalidBookTypeError,
    RequiredFieldError,
    TooManyItemsError,
)
from library_catalog.domain.ports import (
    AuthorRepository,
    BookRepository,
    CategoryRepository,
    EmbeddingService,
    TypeRepository,
)
from library_catalog.domain.utils import check_max_length, generate_id, validate_text
from library_catalog.domain.value_objects import ISBN, BookFormat

from .errors import EmbeddingServiceError, EmbeddingTextTooLongError

logger = logging.getLogger(__name__)

MAX_EMBEDDING_TEXT_LENGTH = 7000
"""
Maximum length of the text sent to the embedding service.

With the current field limits the embedding text of a book with many long
author names can exceed this, so the check is reachable.
"""


@dataclass(frozen=True)
class CreateBookInput:
    """Input for CreateBookUseCase.execute()."""

    title: str
    authors: List[str]
    description: str
    type: str
    format: str
    category_names: List[str]
    isbn: Optional[str] = None
    available: bool = True
    path: Optional[str] = None


class CreateBookUseCase:
    """
    Orchestrates the complete book creation flow.

    Usage:
        use_case = CreateBookUseCase(
            book_repository=book_repo,
            author_repository=author_repo,
            category_repository=category_repo,
            type_repository=type_repo,
            embedding_service=ollama,
        )
        book = use_case.execute(CreateBookInput(...))
    """

    def __init__(
        self,
        book_repository: BookRepository,
        author_repository: AuthorRepository,
        category_repository: CategoryRepository,
        type_repository: TypeRepository,
        embedding_service: EmbeddingService,
    ) -> None:
        """
        Initialize the use case with its ports.

        Args:
            book_repository: Persistence for books and their embeddings
            author_repository: Find-or-create for authors
            category_repository: Find-or-create for categories
            type_repository: Read-only lookup of seeded book types
            embedding_service: Generates the book's embedding vector
        """
        self._book_repository = book_repository
        self._author_repository = author_repository
        self._category_repository = category_repository
        self._type_repository = type_repository
        self._embedding_service = embedding_service

    def execute(self, data: CreateBookInput) -> Book:
        """
        Create and persist a book.

        Args:
            data: Raw book fields

        Returns:
            The persisted Book (the embedding vector is never returned)

        Raises:
            DomainError: Validation failures, InvalidBookTypeError for an
                unknown type, DuplicateISBNError for a taken ISBN
            EmbeddingTextTooLongError: If the embedding text exceeds 7000 chars
            EmbeddingServiceUnavailableError: If the embedding service is down
        """
        logger.debug(
            f"Starting book creation: title={data.title!r}, authors={data.authors}, "
            f"isbn={data.isbn!r}, categories={len(data.category_names or [])}"
        )

        # Step 1: field checks, in the same order Book.create applies them
        isbn = ISBN.create(data.isbn) if data.isbn and data.isbn.strip() else None
        validate_text(data.title, "title", TITLE_MAX_LENGTH)
        self._check_names(data.authors, "authors", MAX_AUTHORS, AUTHOR_NAME_MAX_LENGTH)
        validate_text(data.description, "description", DESCRIPTION_MAX_LENGTH)
        BookFormat.create(data.format)
        self._check_names(
            data.category_names, "categories", MAX_CATEGORIES, CATEGORY_NAME_MAX_LENGTH
        )

        # Step 2: the type must be one of the stored types
        book_type = self._type_repository.find_by_name(data.type or "")
        if book_type is None:
            logger.warning(f"Invalid book type: {data.type!r}")
            raise InvalidBookTypeError(data.type, DEFAULT_BOOK_TYPES)

        # Step 3: ISBN duplicate check, before any write or embedding cost.
        # Books without ISBN are never duplicates.
        if isbn is not None:
            duplicate = self._book_repository.check_duplicate(isbn=isbn.value)
            if duplicate.is_duplicate:
                logger.warning(f"Duplicate ISBN detected: {isbn.value}")
                raise DuplicateISBNError(isbn.value)

        # Step 4: resolve (or create) categories and authors
        categories = self._category_repository.find_or_create_many(data.category_names)
        logger.debug(f"Categories resolved: {[c.name for c in categories]}")

        authors = self._author_repository.find_or_create_many(data.authors)
        logger.debug(f"Authors resolved: {[(a.id, a.name) for a in authors]}")

        # Step 5: build the entity (full validation)
        book = Book.create(
            id=generate_id(),
            title=data.title,
            authors=authors,
            description=data.description,
            type=book_type,
            format=data.format,
            categories=categories,
            isbn=isbn.value if isbn else None,
            available=data.available,
            path=data.path,
        )

        # Step 6: reject oversized text locally, without calling the service
        embedding_text = book.get_text_for_embedding()
        if len(embedding_text) > MAX_EMBEDDING_TEXT_LENGTH:
            logger.error(
                f"Embedding text too long: {len(embedding_text)} chars "
                f"(max {MAX_EMBEDDING_TEXT_LENGTH})"
            )
            raise EmbeddingTextTooLongError(len(embedding_text), MAX_EMBEDDING_TEXT_LENGTH)

        # Step 7: generate the embedding (no retries)
        logger.debug(f"Generating embedding: text_length={len(embedding_text)}")
        try:
            embedding = self._embedding_service.generate_embedding(embedding_text)
        except EmbeddingServiceError as e:
            logger.error(f"Embedding generation failed: {e}")
            raise

        # Step 8: book row + relations + embedding, atomically
        saved = self._book_repository.save(book, embedding.embedding)

        logger.info(
            f"Book created successfully: id={saved.id}, title={saved.title!r}, "
            f"authors={list(saved.author_names)}"
        )
        return saved

    @staticmethod
    def _check_names(
        names: Optional[List[str]], field_name: str, max_items: int, max_length: int
    ) -> None:
        """
        Check raw name lists before any upsert.

        Names are compared the way the repositories key them (trimmed,
        case-insensitive), so two spellings of one name are a duplicate.
        """
        if not names or any(not name or not name.strip() for name in names):
            raise RequiredFieldError(field_name)
        if len(names) > max_items:
            raise TooManyItemsError(field_name, max_items)

        seen = set()
        for name in names:
            trimmed = check_max_length(name.strip(), field_name, max_length)
            key = trimmed.lower()
            if key in seen:
                raise DuplicateItemError(field_name, trimmed)
            seen.add(key)
