"""
Domain entities for the library catalog.

Entities are objects with a unique identity that runs through time and
different representations. They are the core building blocks of the domain.

All entities here are frozen. "Updating" one returns a new instance with a
refreshed ``updated_at``; the original is never modified. Each entity has two
constructors:

- ``create()`` validates every field (user input path)
- ``from_persistence()`` trusts its input (storage read path)

Embedding vectors are NOT part of any entity. They are an infrastructure
concern handled by the persistence adapter.
"""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Optional, Sequence, Tuple

from .errors import RequiredFieldError
from .utils.validation import (
    check_collection,
    check_max_length,
    require_text,
    validate_text,
    validate_uuid,
)
from .value_objects import ISBN, BookFormat

AUTHOR_NAME_MAX_LENGTH = 300
CATEGORY_NAME_MAX_LENGTH = 100
CATEGORY_DESCRIPTION_MAX_LENGTH = 500
BOOK_TYPE_NAME_MAX_LENGTH = 50
TITLE_MAX_LENGTH = 500
DESCRIPTION_MAX_LENGTH = 5000
PATH_MAX_LENGTH = 1000
MAX_AUTHORS = 10
MAX_CATEGORIES = 10

DEFAULT_BOOK_TYPES: Tuple[str, ...] = ("technical", "novel", "biography")
"""Book types seeded into storage at initialization."""


class _Unset:
    """Marker for "argument not supplied" in update operations."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _optional_text(value: Optional[str], field_name: str, max_length: int) -> Optional[str]:
    """Blank or missing becomes None; otherwise trimmed and length-checked."""
    if value is None or not value.strip():
        return None
    return check_max_length(value.strip(), field_name, max_length)


class _Entity:
    """Identity semantics shared by all entities: equal iff same id."""

    id: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, eq=False)
class Author(_Entity):
    """An author, shared between books (N:M)."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Author":
        """
        Create a validated Author.

        Raises:
            RequiredFieldError: If id or name is blank
            InvalidIdentifierError: If id is not a UUID v4
            FieldTooLongError: If name exceeds 300 characters
        """
        author_id = validate_uuid(id)
        author_name = validate_text(name, "name", AUTHOR_NAME_MAX_LENGTH)
        now = _utcnow()
        return cls(
            id=author_id,
            name=author_name,
            created_at=created_at or now,
            updated_at=updated_at or now,
        )

    @classmethod
    def from_persistence(
        cls, id: str, name: str, created_at: datetime, updated_at: datetime
    ) -> "Author":
        return cls(id=id, name=name, created_at=created_at, updated_at=updated_at)

    def update(self, name=UNSET) -> "Author":
        """Return a copy with the given fields changed and updated_at refreshed."""
        new_name = self.name if name is UNSET else validate_text(
            name, "name", AUTHOR_NAME_MAX_LENGTH
        )
        return replace(self, name=new_name, updated_at=_utcnow())


@dataclass(frozen=True, eq=False)
class Category(_Entity):
    """A reusable category. Names are stored lowercase."""

    id: str
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        normalized = require_text(name, "name").lower()
        return check_max_length(normalized, "name", CATEGORY_NAME_MAX_LENGTH)

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Category":
        category_id = validate_uuid(id)
        category_name = cls._validate_name(name)
        category_description = _optional_text(
            description, "description", CATEGORY_DESCRIPTION_MAX_LENGTH
        )
        now = _utcnow()
        return cls(
            id=category_id,
            name=category_name,
            description=category_description,
            created_at=created_at or now,
            updated_at=updated_at or now,
        )

    @classmethod
    def from_persistence(
        cls,
        id: str,
        name: str,
        description: Optional[str],
        created_at: datetime,
        updated_at: datetime,
    ) -> "Category":
        return cls(
            id=id,
            name=name,
            description=description,
            created_at=created_at,
            updated_at=updated_at,
        )

    def update(self, name=UNSET, description=UNSET) -> "Category":
        """
        Return an updated copy.

        An omitted argument keeps the current value; ``description=None``
        clears the description.
        """
        new_name = self.name if name is UNSET else self._validate_name(name)
        new_description = (
            self.description
            if description is UNSET
            else _optional_text(description, "description", CATEGORY_DESCRIPTION_MAX_LENGTH)
        )
        return replace(
            self, name=new_name, description=new_description, updated_at=_utcnow()
        )


@dataclass(frozen=True, eq=False)
class BookType(_Entity):
    """
    High-level classification of a book (technical, novel, ...).

    A seed set (``DEFAULT_BOOK_TYPES``) exists in storage, but the entity
    accepts any name so new types can be added without code changes.
    """

    id: str
    name: str
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        normalized = require_text(name, "name").lower()
        return check_max_length(normalized, "name", BOOK_TYPE_NAME_MAX_LENGTH)

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "BookType":
        type_id = validate_uuid(id)
        type_name = cls._validate_name(name)
        now = _utcnow()
        return cls(
            id=type_id,
            name=type_name,
            created_at=created_at or now,
            updated_at=updated_at or now,
        )

    @classmethod
    def from_persistence(
        cls, id: str, name: str, created_at: datetime, updated_at: datetime
    ) -> "BookType":
        return cls(id=id, name=name, created_at=created_at, updated_at=updated_at)

    def update(self, name=UNSET) -> "BookType":
        new_name = self.name if name is UNSET else self._validate_name(name)
        return replace(self, name=new_name, updated_at=_utcnow())

    def has_name(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.lower() == name.strip().lower()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False)
class Book(_Entity):
    """
    Represents a book in the catalog (aggregate root).

    A book references its authors, type and categories by identity; it does
    not own those rows. Title, authors, description, type, categories and
    format feed the embedding vector and are therefore fixed after creation.
    Only ``available`` and ``path`` change, through ``update()``.
    """

    id: str
    """Unique identifier (UUID v4 string)"""

    isbn: Optional[ISBN]
    """Normalized ISBN, or None for books without one"""

    title: str
    """Book title"""

    authors: Tuple[Author, ...]
    """One to ten distinct authors"""

    description: str
    """Book description/summary"""

    type: BookType
    """Book type (N:1)"""

    format: BookFormat
    """File format"""

    categories: Tuple[Category, ...]
    """One to ten distinct categories (N:M)"""

    available: bool
    """Whether the file is currently available"""

    path: Optional[str]
    """Location of the file, if known"""

    created_at: datetime
    """When this book was added to the catalog"""

    updated_at: datetime
    """When this book was last updated"""

    @classmethod
    def create(
        cls,
        *,
        id: str,
        title: str,
        authors: Sequence[Author],
        description: str,
        type: BookType,
        format: str,
        categories: Sequence[Category],
        isbn: Optional[str] = None,
        available: bool = True,
        path: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Book":
        """
        Create a validated Book from user input.

        Fields are validated in this order and the first failure is raised:
        id, isbn, title, authors, description, type, format, categories, path.

        Args:
            id: UUID v4 string
            title: Non-blank, at most 500 characters after trimming
            authors: 1-10 Author entities with distinct ids
            description: Non-blank, at most 5000 characters after trimming
            type: Resolved BookType entity
            format: Raw format string, validated through BookFormat.create
            categories: 1-10 Category entities with distinct ids
            isbn: Raw ISBN string; None or blank means "no ISBN"
            available: Availability flag
            path: File path; None or blank means "no path"
            created_at: Explicit creation time (defaults to now)
            updated_at: Explicit update time (defaults to now)

        Returns:
            A new frozen Book

        Raises:
            DomainError: The first violated constraint
        """
        book_id = validate_uuid(id)
        book_isbn = ISBN.create(isbn) if isbn and isbn.strip() else None
        book_title = validate_text(title, "title", TITLE_MAX_LENGTH)
        book_authors = check_collection(authors, "authors", MAX_AUTHORS)
        book_description = validate_text(description, "description", DESCRIPTION_MAX_LENGTH)
        if type is None:
            raise RequiredFieldError("type")
        book_format = BookFormat.create(format)
        book_categories = check_collection(categories, "categories", MAX_CATEGORIES)
        book_path = _optional_text(path, "path", PATH_MAX_LENGTH)

        now = _utcnow()
        return cls(
            id=book_id,
            isbn=book_isbn,
            title=book_title,
            authors=book_authors,
            description=book_description,
            type=type,
            format=book_format,
            categories=book_categories,
            available=available,
            path=book_path,
            created_at=created_at or now,
            updated_at=updated_at or now,
        )

    @classmethod
    def from_persistence(
        cls,
        *,
        id: str,
        isbn: Optional[str],
        title: str,
        authors: Sequence[Author],
        description: str,
        type: BookType,
        format: str,
        categories: Sequence[Category],
        available: bool,
        path: Optional[str],
        created_at: datetime,
        updated_at: datetime,
    ) -> "Book":
        """Rebuild a Book from storage without re-validating it."""
        return cls(
            id=id,
            isbn=ISBN.from_trusted_source(isbn) if isbn else None,
            title=title,
            authors=tuple(authors),
            description=description,
            type=type,
            format=BookFormat.from_trusted_source(format),
            categories=tuple(categories),
            available=available,
            path=path,
            created_at=created_at,
            updated_at=updated_at,
        )

    def update(self, available=UNSET, path=UNSET) -> "Book":
        """
        Return a copy with ``available`` and/or ``path`` changed.

        Presence decides what changes, never truthiness:
        - an omitted argument keeps the current value
        - ``path=None`` clears the path
        - any supplied value is validated as on creation

        ``updated_at`` is refreshed even when nothing changes.
        """
        new_available = self.available if available is UNSET else available
        new_path = (
            self.path if path is UNSET else _optional_text(path, "path", PATH_MAX_LENGTH)
        )
        return replace(
            self, available=new_available, path=new_path, updated_at=_utcnow()
        )

    @property
    def author_names(self) -> Tuple[str, ...]:
        return tuple(author.name for author in self.authors)

    @property
    def category_names(self) -> Tuple[str, ...]:
        return tuple(category.name for category in self.categories)

    def get_text_for_embedding(self) -> str:
        """
        Get the text used to generate this book's embedding vector.

        The composition is deterministic for the same book content:
        title, author names, type name, category names, description,
        joined by single spaces.
        """
        parts = [
            self.title,
            *self.author_names,
            self.type.name,
            *self.category_names,
            self.description,
        ]
        return " ".join(parts)
