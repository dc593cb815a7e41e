"""
Identifier generation for new catalog entities.

Entities validate their ids against the canonical UUID v4 text shape, so
new ids come from ``uuid.uuid4`` rendered as lowercase strings.
"""

from uuid import uuid4


def generate_id() -> str:
    """
    Generate a new entity identifier.

    Returns:
        A lowercase UUID v4 string, e.g. ``"3f1c1b9e-6d0e-4c1a-9f57-0c2b4e7d8a11"``

    Example:
        >>> from library_catalog.domain.utils.ids import generate_id
        >>> len(generate_id())
        36
    """
    return str(uuid4())
