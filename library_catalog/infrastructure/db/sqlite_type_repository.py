"""SQLite implementation of the read-only TypeRepository port."""

from typing import List, Optional

from library_catalog.domain.entities import BookType
from library_catalog.domain.ports import TypeRepository

from .mappers import row_to_type
from .sqlite_database import SqliteDatabase


class SqliteTypeRepository(TypeRepository):
    def __init__(self, database: SqliteDatabase) -> None:
        self._db = database

    def find_by_id(self, type_id: str) -> Optional[BookType]:
        with self._db.transaction() as conn:
            row = conn.execute("SELECT * FROM types WHERE id = ?", (type_id,)).fetchone()
        return row_to_type(row) if row else None

    def find_by_name(self, name: str) -> Optional[BookType]:
        """Case-insensitive: type names are stored lowercase."""
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM types WHERE name = ?", (name.strip().lower(),)
            ).fetchone()
        return row_to_type(row) if row else None

    def find_all(self) -> List[BookType]:
        with self._db.transaction() as conn:
            rows = conn.execute("SELECT * FROM types ORDER BY name").fetchall()
        return [row_to_type(row) for row in rows]

    def count(self) -> int:
        with self._db.transaction() as conn:
            result = conn.execute("SELECT COUNT(*) as cnt FROM types").fetchone()
        return result["cnt"]
