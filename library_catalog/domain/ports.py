"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.
"""

from typing import List, Optional, Protocol, Sequence

from .entities import UNSET, Author, Book, BookType, Category
from .value_objects import DuplicateCheckResult, EmbeddingResult


class BookRepository(Protocol):
    """
    Port for persisting and retrieving books.

    The embedding vector is handled only here: it is received alongside the
    entity in ``save()`` and never returned as part of a Book.

    Implementations must:
    - Enforce a true uniqueness constraint on the normalized ISBN
    - Translate a storage-level ISBN uniqueness violation into DuplicateISBNError
    - Persist the book row, its relations and its embedding atomically
    """

    def find_by_id(self, book_id: str) -> Optional[Book]:
        """
        Retrieve a book by its id.

        Returns:
            The Book if found, None otherwise
        """
        ...

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        """
        Retrieve a book by its normalized ISBN (no hyphens, uppercase).

        Returns:
            The Book if found, None otherwise
        """
        ...

    def exists_by_isbn(self, isbn: str) -> bool:
        """Check whether a book with the given normalized ISBN exists."""
        ...

    def check_duplicate(self, isbn: Optional[str] = None) -> DuplicateCheckResult:
        """
        Check whether a new book would duplicate an existing one.

        Only ISBN duplicates exist. A book without ISBN is never a duplicate.

        Args:
            isbn: Normalized ISBN of the candidate book, or None

        Returns:
            DuplicateCheckResult with duplicate_type="isbn" on a hit
        """
        ...

    def save(self, book: Book, embedding: Sequence[float]) -> Book:
        """
        Persist a new book together with its embedding vector.

        This is atomic: the book row, its author/category relations and the
        embedding are committed together or not at all.

        Args:
            book: The validated book entity
            embedding: The vector generated for book.get_text_for_embedding()

        Returns:
            The persisted Book (without the embedding)

        Raises:
            DuplicateISBNError: If the ISBN is already taken (including a race
                lost against a concurrent insert)
            RuntimeError: If a storage error occurs
        """
        ...

    def update(self, book_id: str, available=UNSET, path=UNSET) -> Book:
        """
        Update the mutable fields of a book.

        Omitted arguments are left unchanged; ``path=None`` clears the path.

        Returns:
            The updated Book

        Raises:
            BookNotFoundError: If no book has this id
        """
        ...

    def delete(self, book_id: str) -> bool:
        """
        Delete a book.

        Returns:
            True if the book was deleted, False if not found
        """
        ...

    def find_all(self) -> List[Book]:
        """Retrieve all books (without embeddings)."""
        ...

    def count(self) -> int:
        """Get the total number of books in the catalog."""
        ...


class AuthorRepository(Protocol):
    """
    Port for author persistence.

    Authors are matched by name case-insensitively; the stored name keeps the
    casing of its first creation.
    """

    def find_by_id(self, author_id: str) -> Optional[Author]:
        ...

    def find_by_name(self, name: str) -> Optional[Author]:
        ...

    def find_by_names(self, names: Sequence[str]) -> List[Author]:
        """Return the authors found; may be fewer than requested."""
        ...

    def find_or_create(self, name: str) -> Author:
        """
        Return the author with this name, creating it if needed.

        Idempotent: a concurrent creation of the same name resolves to the
        row that won.
        """
        ...

    def find_or_create_many(self, names: Sequence[str]) -> List[Author]:
        """Find or create each name; result is in input order."""
        ...

    def save(self, author: Author) -> Author:
        ...

    def find_all(self) -> List[Author]:
        ...

    def count(self) -> int:
        ...


class CategoryRepository(Protocol):
    """Port for category persistence. Names are matched case-insensitively."""

    def find_by_id(self, category_id: str) -> Optional[Category]:
        ...

    def find_by_name(self, name: str) -> Optional[Category]:
        ...

    def find_by_names(self, names: Sequence[str]) -> List[Category]:
        ...

    def find_or_create(self, name: str) -> Category:
        ...

    def find_or_create_many(self, names: Sequence[str]) -> List[Category]:
        """Find or create each name; result is in input order."""
        ...

    def save(self, category: Category) -> Category:
        ...

    def find_all(self) -> List[Category]:
        ...


class TypeRepository(Protocol):
    """
    Read-only port for book types.

    Types are seeded when storage is initialized; the application never
    creates them, which is why there is no save() or find_or_create().
    """

    def find_by_id(self, type_id: str) -> Optional[BookType]:
        ...

    def find_by_name(self, name: str) -> Optional[BookType]:
        """Case-insensitive lookup by name."""
        ...

    def find_all(self) -> List[BookType]:
        ...

    def count(self) -> int:
        ...


class EmbeddingService(Protocol):
    """
    Port for generating vector embeddings from text.

    The model and transport are implementation details of the adapter.
    """

    def generate_embedding(self, text: str) -> EmbeddingResult:
        """
        Generate an embedding vector for the given text.

        Args:
            text: Text to embed (at most 7000 characters)

        Returns:
            EmbeddingResult with the vector and the model name

        Raises:
            EmbeddingTextTooLongError: If the text exceeds the service limit
            EmbeddingServiceUnavailableError: On connection errors, timeouts
                and malformed responses
            EmbeddingServiceError: For other service failures
        """
        ...

    def is_available(self) -> bool:
        """
        Check if the service is reachable and healthy.

        Never raises; returns False on any failure.
        """
        ...
