"""
SQLite implementation of the AuthorRepository port.

Authors are looked up by a lowercase key, so "Jane Doe" and "jane doe" are
the same author. The stored display name is the one used on first creation.
"""

import logging
import sqlite3
from typing import List, Optional, Sequence

from library_catalog.domain.entities import Author
from library_catalog.domain.ports import AuthorRepository
from library_catalog.domain.utils import generate_id

from .mappers import row_to_author, to_db_timestamp
from .sqlite_database import SqliteDatabase

logger = logging.getLogger(__name__)


def _name_key(name: str) -> str:
    return name.strip().lower()


class SqliteAuthorRepository(AuthorRepository):
    def __init__(self, database: SqliteDatabase) -> None:
        self._db = database

    def find_by_id(self, author_id: str) -> Optional[Author]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM authors WHERE id = ?", (author_id,)
            ).fetchone()
        return row_to_author(row) if row else None

    def find_by_name(self, name: str) -> Optional[Author]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM authors WHERE normalized_name = ?", (_name_key(name),)
            ).fetchone()
        return row_to_author(row) if row else None

    def find_by_names(self, names: Sequence[str]) -> List[Author]:
        """Return the authors found, in input order; unknown names are skipped."""
        found = []
        for name in names:
            author = self.find_by_name(name)
            if author is not None:
                found.append(author)
        return found

    def find_or_create(self, name: str) -> Author:
        """
        Return the author with this name, creating it if needed.

        The insert is a no-op when the name already exists, so two concurrent
        callers both end up with the row that was written first.

        Raises:
            RequiredFieldError: If name is blank
            FieldTooLongError: If name exceeds 300 characters
        """
        candidate = Author.create(id=generate_id(), name=name)
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO authors (id, name, normalized_name, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(normalized_name) DO NOTHING
                    """,
                    (
                        candidate.id,
                        candidate.name,
                        _name_key(candidate.name),
                        to_db_timestamp(candidate.created_at),
                        to_db_timestamp(candidate.updated_at),
                    ),
                )
                row = conn.execute(
                    "SELECT * FROM authors WHERE normalized_name = ?",
                    (_name_key(candidate.name),),
                ).fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while resolving author: {e}") from e

        author = row_to_author(row)
        if author.id == candidate.id:
            logger.debug(f"Author created: id={author.id}, name={author.name!r}")
        return author

    def find_or_create_many(self, names: Sequence[str]) -> List[Author]:
        return [self.find_or_create(name) for name in names]

    def save(self, author: Author) -> Author:
        """Insert or update an author by id."""
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO authors (id, name, normalized_name, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name=excluded.name,
                        normalized_name=excluded.normalized_name,
                        updated_at=excluded.updated_at
                    """,
                    (
                        author.id,
                        author.name,
                        _name_key(author.name),
                        to_db_timestamp(author.created_at),
                        to_db_timestamp(author.updated_at),
                    ),
                )
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving author: {e}") from e
        return author

    def find_all(self) -> List[Author]:
        with self._db.transaction() as conn:
            rows = conn.execute("SELECT * FROM authors ORDER BY name").fetchall()
        return [row_to_author(row) for row in rows]

    def count(self) -> int:
        with self._db.transaction() as conn:
            result = conn.execute("SELECT COUNT(*) as cnt FROM authors").fetchone()
        return result["cnt"]
