"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity. They compare by value.

``ISBN`` and ``BookFormat`` have two constructors:
- ``create()`` validates and normalizes user input
- ``from_trusted_source()`` skips validation, for values read back from storage
"""

import re
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from .errors import InvalidBookFormatError, InvalidISBNError

BOOK_FORMATS: Tuple[str, ...] = (
    "epub",
    "pdf",
    "mobi",
    "azw3",
    "djvu",
    "cbz",
    "cbr",
    "txt",
    "other",
)

_ISBN_SEPARATORS = re.compile(r"[-\s]")
_ISBN10_SHAPE = re.compile(r"^[0-9]{9}[0-9X]$")
_ISBN13_SHAPE = re.compile(r"^[0-9]{13}$")


@dataclass(frozen=True)
class ISBN:
    """
    International Standard Book Number (ISBN-10 or ISBN-13).

    The stored value is normalized: no hyphens or spaces, uppercase. For
    ISBN-10 the last character may be 'X' (check digit value 10).
    """

    value: str

    @classmethod
    def create(cls, raw: str) -> "ISBN":
        """
        Build a validated ISBN from user input.

        Args:
            raw: ISBN as typed, hyphens and spaces allowed

        Returns:
            ISBN holding the normalized value

        Raises:
            InvalidISBNError: If the normalized value is neither a valid
                ISBN-10 nor a valid ISBN-13
        """
        normalized = cls.normalize(raw)
        if not cls._has_valid_checksum(normalized):
            raise InvalidISBNError(raw)
        return cls(normalized)

    @classmethod
    def from_trusted_source(cls, value: str) -> "ISBN":
        """Wrap an already-normalized value without validating it."""
        return cls(value)

    @staticmethod
    def normalize(raw: str) -> str:
        return _ISBN_SEPARATORS.sub("", raw).upper()

    @classmethod
    def is_valid(cls, raw: str) -> bool:
        return cls._has_valid_checksum(cls.normalize(raw))

    @staticmethod
    def _has_valid_checksum(normalized: str) -> bool:
        if len(normalized) == 10:
            if not _ISBN10_SHAPE.match(normalized):
                return False
            # (10*d1 + 9*d2 + ... + 1*d10) mod 11 == 0
            total = sum((10 - i) * int(normalized[i]) for i in range(9))
            total += 10 if normalized[9] == "X" else int(normalized[9])
            return total % 11 == 0

        if len(normalized) == 13:
            if not _ISBN13_SHAPE.match(normalized):
                return False
            # (d1 + 3*d2 + d3 + 3*d4 + ... + d13) mod 10 == 0
            total = sum(
                int(digit) * (1 if i % 2 == 0 else 3)
                for i, digit in enumerate(normalized)
            )
            return total % 10 == 0

        return False

    @property
    def isbn_type(self) -> Literal["ISBN-10", "ISBN-13"]:
        return "ISBN-10" if len(self.value) == 10 else "ISBN-13"

    def to_formatted_string(self) -> str:
        """
        Render the ISBN with hyphens.

        Grouping is simplified (fixed group sizes), not registrant-range
        aware: ISBN-13 as 978-X-XXXX-XXXX-X, ISBN-10 as X-XXXX-XXXX-X.
        """
        v = self.value
        if len(v) == 13:
            return f"{v[:3]}-{v[3:4]}-{v[4:8]}-{v[8:12]}-{v[12:]}"
        return f"{v[:1]}-{v[1:5]}-{v[5:9]}-{v[9:]}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BookFormat:
    """Digital file format of a book (closed set, see ``BOOK_FORMATS``)."""

    value: str

    @classmethod
    def create(cls, raw: str) -> "BookFormat":
        """
        Build a validated BookFormat from user input.

        Raises:
            InvalidBookFormatError: If the trimmed, lowercased value is not
                one of ``BOOK_FORMATS``
        """
        normalized = (raw or "").strip().lower()
        if not cls.is_valid(normalized):
            raise InvalidBookFormatError(raw, BOOK_FORMATS)
        return cls(normalized)

    @classmethod
    def from_trusted_source(cls, value: str) -> "BookFormat":
        return cls(value)

    @staticmethod
    def is_valid(value: str) -> bool:
        return value in BOOK_FORMATS

    @staticmethod
    def all_formats() -> Tuple[str, ...]:
        return BOOK_FORMATS

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DuplicateCheckResult:
    """
    Outcome of a duplicate check against the catalog.

    Only ISBN duplicates are detected; ``duplicate_type`` is None when
    ``is_duplicate`` is False.
    """

    is_duplicate: bool
    """Whether a duplicate was found"""

    duplicate_type: Optional[Literal["isbn"]] = None
    """The kind of duplicate found, if any"""

    message: Optional[str] = None
    """Human-readable description of the duplicate"""

    def __post_init__(self) -> None:
        """Validate result consistency."""
        if self.is_duplicate and self.duplicate_type is None:
            raise ValueError("duplicate_type is required when is_duplicate=True")


@dataclass(frozen=True)
class EmbeddingResult:
    """Vector returned by the embedding service for one text."""

    embedding: List[float]
    """The embedding vector"""

    model: str
    """Model that produced the vector"""

    def __post_init__(self) -> None:
        """Validate the vector is usable."""
        if not self.embedding:
            raise ValueError("embedding cannot be empty")

    @property
    def dimension(self) -> int:
        return len(self.embedding)
