"""
Field validators shared by the domain entities.

Each validator either returns the normalized value or raises the matching
``DomainError``. Entities call them in a fixed order so the first violation
found is the one reported.
"""

import re
from typing import Optional, Sequence

from library_catalog.domain.errors import (
    DuplicateItemError,
    FieldTooLongError,
    InvalidIdentifierError,
    RequiredFieldError,
    TooManyItemsError,
)

UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def require_text(value: Optional[str], field_name: str) -> str:
    """Return ``value`` stripped, or raise if it is missing or blank."""
    if value is None or not value.strip():
        raise RequiredFieldError(field_name)
    return value.strip()


def check_max_length(value: str, field_name: str, max_length: int) -> str:
    if len(value) > max_length:
        raise FieldTooLongError(field_name, max_length)
    return value


def validate_text(value: Optional[str], field_name: str, max_length: int) -> str:
    """Required + max length, the combination most fields need."""
    return check_max_length(require_text(value, field_name), field_name, max_length)


def validate_uuid(value: Optional[str]) -> str:
    """
    Validate the textual shape of a UUID v4.

    Args:
        value: Candidate identifier

    Returns:
        The trimmed identifier

    Raises:
        RequiredFieldError: If the identifier is missing or blank
        InvalidIdentifierError: If it is not 8-4-4-4-12 hex with version 4
            and an RFC 4122 variant nibble
    """
    trimmed = require_text(value, "id")
    if not UUID_V4_PATTERN.match(trimmed):
        raise InvalidIdentifierError(value)
    return trimmed


def check_collection(items: Sequence, field_name: str, max_items: int) -> tuple:
    """
    Validate a collection of entities referenced by id.

    Raises RequiredFieldError when empty, TooManyItemsError above the cap and
    DuplicateItemError when the same ``id`` appears twice (reported with the
    item's ``name``).
    """
    if not items:
        raise RequiredFieldError(field_name)

    if len(items) > max_items:
        raise TooManyItemsError(field_name, max_items)

    seen = set()
    for item in items:
        if item.id in seen:
            raise DuplicateItemError(field_name, getattr(item, "name", item.id))
        seen.add(item.id)

    return tuple(items)
