"""
SQLite schema and connection handling shared by the repositories.

All repositories of one catalog point at the same database file. The schema
is created on first use and the default book types are seeded if missing.

Tables:
    types            id, name (unique, lowercase)
    authors          id, name, normalized_name (unique, lowercase lookup key)
    categories       id, name (unique, lowercase), description
    books            id, isbn (unique, NULL allowed), type_id, format,
                     available, path, embedding (float32 BLOB)
    book_authors     book_id, author_id, position
    book_categories  book_id, category_id, position

Relation rows are removed with their book (ON DELETE CASCADE), which needs
``PRAGMA foreign_keys = ON`` on every connection.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Union

from library_catalog.domain.entities import DEFAULT_BOOK_TYPES
from library_catalog.domain.utils import generate_id

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS types (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS authors (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    normalized_name TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    description TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS books (
    id TEXT PRIMARY KEY,
    isbn TEXT UNIQUE,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    type_id TEXT NOT NULL REFERENCES types(id),
    format TEXT NOT NULL,
    available INTEGER NOT NULL DEFAULT 1,
    path TEXT,
    embedding BLOB NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS book_authors (
    book_id TEXT NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    author_id TEXT NOT NULL REFERENCES authors(id),
    position INTEGER NOT NULL,
    PRIMARY KEY (book_id, author_id)
);

CREATE TABLE IF NOT EXISTS book_categories (
    book_id TEXT NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    category_id TEXT NOT NULL REFERENCES categories(id),
    position INTEGER NOT NULL,
    PRIMARY KEY (book_id, category_id)
);

CREATE INDEX IF NOT EXISTS idx_book_authors_author ON book_authors(author_id);
CREATE INDEX IF NOT EXISTS idx_book_categories_category ON book_categories(category_id);
"""


class SqliteDatabase:
    """
    A catalog database file.

    Usage:
        db = SqliteDatabase(Path("data/catalog.db"))
        with db.transaction() as conn:
            conn.execute(...)
    """

    def __init__(self, db_path: Union[Path, str]) -> None:
        """
        Initialize the database, creating the file, schema and seed rows
        if needed.
        """
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @property
    def path(self) -> Path:
        return self._db_path

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection whose work is committed on success and rolled
        back on any exception. The connection is closed afterwards.
        """
        conn = self._get_connection()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Create the tables if they don't exist and seed the book types."""
        now = datetime.now(timezone.utc).isoformat()
        with self.transaction() as conn:
            conn.executescript(_SCHEMA)
            for name in DEFAULT_BOOK_TYPES:
                conn.execute(
                    "INSERT OR IGNORE INTO types (id, name, created_at, updated_at) "
                    "VALUES (?, ?, ?, ?)",
                    (generate_id(), name, now, now),
                )
        logger.debug(f"SQLite schema ready at {self._db_path}")
