"""
Domain utilities module.

Provides shared utilities for the domain layer that remain
independent of infrastructure concerns.
"""

from .ids import generate_id
from .validation import (
    check_collection,
    check_max_length,
    require_text,
    validate_text,
    validate_uuid,
)

__all__ = [
    "generate_id",
    "check_collection",
    "check_max_length",
    "require_text",
    "validate_text",
    "validate_uuid",
]
