"""
SQLite implementation of the BookRepository port.

This adapter persists Book entities together with their embedding vector.
The book row, its author/category links and the embedding BLOB are written
in a single transaction.

The UNIQUE constraint on ``books.isbn`` is the source of truth for ISBN
duplicates. The use case checks first to fail fast, but two concurrent
creates of the same ISBN can both pass that check; the loser hits the
constraint here and gets DuplicateISBNError.
"""

import logging
import sqlite3
from typing import List, Optional, Sequence

from library_catalog.domain.entities import UNSET, Book
from library_catalog.domain.errors import BookNotFoundError, DuplicateISBNError
from library_catalog.domain.ports import BookRepository
from library_catalog.domain.value_objects import DuplicateCheckResult

from .mappers import (
    blob_to_embedding,
    embedding_to_blob,
    from_db_timestamp,
    row_to_author,
    row_to_category,
    row_to_type,
    to_db_timestamp,
)
from .sqlite_database import SqliteDatabase

logger = logging.getLogger(__name__)

_BOOK_COLUMNS = (
    "id, isbn, title, description, type_id, format, available, path, "
    "created_at, updated_at"
)


class SqliteBookRepository(BookRepository):
    """
    Books without ISBN are stored with ``isbn`` NULL. SQLite allows any
    number of NULLs in a UNIQUE column, so they never collide.
    """

    def __init__(self, database: SqliteDatabase) -> None:
        self._db = database

    # ------------------------------------------------------------------
    # Row loading
    # ------------------------------------------------------------------

    def _load_book(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Book:
        """Rebuild a Book from its row plus type, authors and categories."""
        type_row = conn.execute(
            "SELECT * FROM types WHERE id = ?", (row["type_id"],)
        ).fetchone()
        author_rows = conn.execute(
            """
            SELECT a.* FROM authors a
            JOIN book_authors ba ON ba.author_id = a.id
            WHERE ba.book_id = ?
            ORDER BY ba.position
            """,
            (row["id"],),
        ).fetchall()
        category_rows = conn.execute(
            """
            SELECT c.* FROM categories c
            JOIN book_categories bc ON bc.category_id = c.id
            WHERE bc.book_id = ?
            ORDER BY bc.position
            """,
            (row["id"],),
        ).fetchall()

        return Book.from_persistence(
            id=row["id"],
            isbn=row["isbn"],
            title=row["title"],
            authors=[row_to_author(r) for r in author_rows],
            description=row["description"],
            type=row_to_type(type_row),
            format=row["format"],
            categories=[row_to_category(r) for r in category_rows],
            available=bool(row["available"]),
            path=row["path"],
            created_at=from_db_timestamp(row["created_at"]),
            updated_at=from_db_timestamp(row["updated_at"]),
        )

    def _find_one(self, where: str, value: str) -> Optional[Book]:
        with self._db.transaction() as conn:
            row = conn.execute(
                f"SELECT {_BOOK_COLUMNS} FROM books WHERE {where} = ?", (value,)
            ).fetchone()
            if row is None:
                return None
            return self._load_book(conn, row)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_id(self, book_id: str) -> Optional[Book]:
        return self._find_one("id", book_id)

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        return self._find_one("isbn", isbn)

    def exists_by_isbn(self, isbn: str) -> bool:
        with self._db.transaction() as conn:
            row = conn.execute("SELECT 1 FROM books WHERE isbn = ?", (isbn,)).fetchone()
        return row is not None

    def check_duplicate(self, isbn: Optional[str] = None) -> DuplicateCheckResult:
        """Only ISBN duplicates exist; no ISBN means never a duplicate."""
        if not isbn:
            return DuplicateCheckResult(is_duplicate=False)

        if self.exists_by_isbn(isbn):
            return DuplicateCheckResult(
                is_duplicate=True,
                duplicate_type="isbn",
                message=f'A book with ISBN "{isbn}" already exists',
            )
        return DuplicateCheckResult(is_duplicate=False)

    def find_all(self) -> List[Book]:
        """Retrieve all books, oldest first."""
        with self._db.transaction() as conn:
            rows = conn.execute(
                f"SELECT {_BOOK_COLUMNS} FROM books ORDER BY created_at, id"
            ).fetchall()
            return [self._load_book(conn, row) for row in rows]

    def count(self) -> int:
        """Get the total number of books in the catalog."""
        with self._db.transaction() as conn:
            result = conn.execute("SELECT COUNT(*) as cnt FROM books").fetchone()
        return result["cnt"]

    def get_embedding(self, book_id: str) -> Optional[List[float]]:
        """Read back the stored vector (not part of the port)."""
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT embedding FROM books WHERE id = ?", (book_id,)
            ).fetchone()
        return blob_to_embedding(row["embedding"]) if row else None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def save(self, book: Book, embedding: Sequence[float]) -> Book:
        """
        Insert a new book with its relations and embedding, atomically.

        Raises:
            DuplicateISBNError: If the ISBN UNIQUE constraint fires
            RuntimeError: For any other database error
        """
        isbn = book.isbn.value if book.isbn else None
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO books
                    (id, isbn, title, description, type_id, format, available, path,
                     embedding, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        book.id,
                        isbn,
                        book.title,
                        book.description,
                        book.type.id,
                        book.format.value,
                        int(book.available),
                        book.path,
                        embedding_to_blob(embedding),
                        to_db_timestamp(book.created_at),
                        to_db_timestamp(book.updated_at),
                    ),
                )
                conn.executemany(
                    "INSERT INTO book_authors (book_id, author_id, position) VALUES (?, ?, ?)",
                    [(book.id, a.id, i) for i, a in enumerate(book.authors)],
                )
                conn.executemany(
                    "INSERT INTO book_categories (book_id, category_id, position) "
                    "VALUES (?, ?, ?)",
                    [(book.id, c.id, i) for i, c in enumerate(book.categories)],
                )
        except sqlite3.IntegrityError as e:
            if isbn is not None and "books.isbn" in str(e):
                logger.warning(f"ISBN uniqueness violation on insert: {isbn}")
                raise DuplicateISBNError(isbn) from e
            raise RuntimeError(f"Book violates catalog constraints: {e}") from e
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving book: {e}") from e

        logger.debug(f"Book saved: id={book.id}, embedding_dim={len(embedding)}")
        return book

    def update(self, book_id: str, available=UNSET, path=UNSET) -> Book:
        """
        Change ``available`` and/or ``path``; omitted arguments keep their value.

        Raises:
            BookNotFoundError: If no book has this id
            DomainError: If the new path is invalid
        """
        book = self.find_by_id(book_id)
        if book is None:
            raise BookNotFoundError(book_id)

        updated = book.update(available=available, path=path)
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    "UPDATE books SET available = ?, path = ?, updated_at = ? WHERE id = ?",
                    (
                        int(updated.available),
                        updated.path,
                        to_db_timestamp(updated.updated_at),
                        book_id,
                    ),
                )
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while updating book: {e}") from e
        return updated

    def delete(self, book_id: str) -> bool:
        """Delete a book and its relations. Returns True if deleted."""
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
            deleted = cursor.rowcount > 0
        return deleted
