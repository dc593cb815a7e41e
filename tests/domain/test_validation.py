"""
Tests for the shared field validators.
"""

from types import SimpleNamespace

import pytest

from library_catalog.domain.errors import (
    DuplicateItemError,
    FieldTooLongError,
    InvalidIdentifierError,
    RequiredFieldError,
    TooManyItemsError,
)
from library_catalog.domain.utils import (
    check_collection,
    generate_id,
    require_text,
    validate_text,
    validate_uuid,
)


def test_require_text_strips():
    assert require_text("  hello ", "title") == "hello"


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
def test_require_text_rejects_blank(value):
    with pytest.raises(RequiredFieldError, match='"title" is required'):
        require_text(value, "title")


def test_length_is_checked_after_trimming():
    assert validate_text("  abc  ", "name", 3) == "abc"

    with pytest.raises(FieldTooLongError):
        validate_text("abcd", "name", 3)


def test_generated_ids_are_valid_v4():
    assert validate_uuid(generate_id())


def test_validate_uuid_rejects_wrong_version():
    with pytest.raises(InvalidIdentifierError):
        validate_uuid("6ba7b810-9dad-11d1-80b4-00c04fd430c8")


def _item(name, item_id=None):
    return SimpleNamespace(id=item_id or generate_id(), name=name)


class TestCheckCollection:
    def test_returns_tuple(self):
        items = [_item("a"), _item("b")]

        assert check_collection(items, "authors", 10) == tuple(items)

    def test_empty(self):
        with pytest.raises(RequiredFieldError):
            check_collection([], "authors", 10)

    def test_cap(self):
        with pytest.raises(TooManyItemsError):
            check_collection([_item(str(i)) for i in range(3)], "authors", 2)

    def test_duplicate_id_reported_by_name(self):
        shared = generate_id()

        with pytest.raises(DuplicateItemError) as exc_info:
            check_collection([_item("Jane", shared), _item("jane", shared)], "authors", 10)

        assert exc_info.value.value == "jane"
