"""SQLite persistence adapters."""

from .sqlite_author_repository import SqliteAuthorRepository
from .sqlite_book_repository import SqliteBookRepository
from .sqlite_category_repository import SqliteCategoryRepository
from .sqlite_database import SqliteDatabase
from .sqlite_type_repository import SqliteTypeRepository

__all__ = [
    "SqliteDatabase",
    "SqliteAuthorRepository",
    "SqliteBookRepository",
    "SqliteCategoryRepository",
    "SqliteTypeRepository",
]
