"""SQLite implementation of the CategoryRepository port."""

import logging
import sqlite3
from typing import List, Optional, Sequence

from library_catalog.domain.entities import Category
from library_catalog.domain.ports import CategoryRepository
from library_catalog.domain.utils import generate_id

from .mappers import row_to_category, to_db_timestamp
from .sqlite_database import SqliteDatabase

logger = logging.getLogger(__name__)


class SqliteCategoryRepository(CategoryRepository):
    """Categories are stored lowercase, so lookups lowercase the name too."""

    def __init__(self, database: SqliteDatabase) -> None:
        self._db = database

    def find_by_id(self, category_id: str) -> Optional[Category]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM categories WHERE id = ?", (category_id,)
            ).fetchone()
        return row_to_category(row) if row else None

    def find_by_name(self, name: str) -> Optional[Category]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM categories WHERE name = ?", (name.strip().lower(),)
            ).fetchone()
        return row_to_category(row) if row else None

    def find_by_names(self, names: Sequence[str]) -> List[Category]:
        found = []
        for name in names:
            category = self.find_by_name(name)
            if category is not None:
                found.append(category)
        return found

    def find_or_create(self, name: str) -> Category:
        """
        Return the category with this name, creating it if needed.

        Raises:
            RequiredFieldError: If name is blank
            FieldTooLongError: If name exceeds 100 characters
        """
        candidate = Category.create(id=generate_id(), name=name)
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO categories (id, name, description, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(name) DO NOTHING
                    """,
                    (
                        candidate.id,
                        candidate.name,
                        candidate.description,
                        to_db_timestamp(candidate.created_at),
                        to_db_timestamp(candidate.updated_at),
                    ),
                )
                row = conn.execute(
                    "SELECT * FROM categories WHERE name = ?", (candidate.name,)
                ).fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while resolving category: {e}") from e

        category = row_to_category(row)
        if category.id == candidate.id:
            logger.debug(f"Category created: id={category.id}, name={category.name!r}")
        return category

    def find_or_create_many(self, names: Sequence[str]) -> List[Category]:
        return [self.find_or_create(name) for name in names]

    def save(self, category: Category) -> Category:
        """Insert or update a category by id."""
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO categories (id, name, description, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name=excluded.name,
                        description=excluded.description,
                        updated_at=excluded.updated_at
                    """,
                    (
                        category.id,
                        category.name,
                        category.description,
                        to_db_timestamp(category.created_at),
                        to_db_timestamp(category.updated_at),
                    ),
                )
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving category: {e}") from e
        return category

    def find_all(self) -> List[Category]:
        with self._db.transaction() as conn:
            rows = conn.execute("SELECT * FROM categories ORDER BY name").fetchall()
        return [row_to_category(row) for row in rows]
