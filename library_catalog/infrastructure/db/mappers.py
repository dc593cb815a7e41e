"""
Row <-> entity conversions for the SQLite adapter.

Rows are trusted: entities are rebuilt with ``from_persistence`` and never
re-validated. Timestamps are stored as ISO-8601 text with their UTC offset.
Embeddings are stored as raw float32 bytes.
"""

import sqlite3
from datetime import datetime
from typing import List, Sequence

import numpy as np

from library_catalog.domain.entities import Author, BookType, Category


def to_db_timestamp(value: datetime) -> str:
    return value.isoformat()


def from_db_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def embedding_to_blob(embedding: Sequence[float]) -> bytes:
    """Pack a vector as contiguous float32 bytes."""
    return np.asarray(embedding, dtype=np.float32).tobytes()


def blob_to_embedding(blob: bytes) -> List[float]:
    return np.frombuffer(blob, dtype=np.float32).tolist()


def row_to_author(row: sqlite3.Row) -> Author:
    return Author.from_persistence(
        id=row["id"],
        name=row["name"],
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


def row_to_category(row: sqlite3.Row) -> Category:
    return Category.from_persistence(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )


def row_to_type(row: sqlite3.Row) -> BookType:
    return BookType.from_persistence(
        id=row["id"],
        name=row["name"],
        created_at=from_db_timestamp(row["created_at"]),
        updated_at=from_db_timestamp(row["updated_at"]),
    )
