"""
Tests for domain value objects.
"""

import pytest

from library_catalog.domain.errors import (
    ErrorKind,
    InvalidBookFormatError,
    InvalidISBNError,
)
from library_catalog.domain.value_objects import (
    BOOK_FORMATS,
    ISBN,
    BookFormat,
    DuplicateCheckResult,
    EmbeddingResult,
)


class TestISBN:
    """Tests for the ISBN value object."""

    @pytest.mark.parametrize(
        "raw",
        ["0306406152", "9780306406157", "080442957X", "080442957x"],
    )
    def test_valid_isbns(self, raw):
        """Correct checksums are accepted, including the X check digit."""
        isbn = ISBN.create(raw)

        assert isbn.value == raw.upper()

    @pytest.mark.parametrize("raw", ["0306406153", "9780306406158"])
    def test_wrong_checksum_is_rejected(self, raw):
        with pytest.raises(InvalidISBNError) as exc_info:
            ISBN.create(raw)

        assert exc_info.value.kind == ErrorKind.INVALID_ISBN
        assert exc_info.value.value == raw

    @pytest.mark.parametrize(
        "raw",
        ["", "12345", "030640615", "03064061522", "X306406152", "97803064061A7"],
    )
    def test_wrong_shape_is_rejected(self, raw):
        """Wrong length, misplaced X and letters never validate."""
        with pytest.raises(InvalidISBNError):
            ISBN.create(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "９７８０３０６４０６１５７",
            "٠٣٠٦٤٠٦١٥٢",
        ],
    )
    def test_non_ascii_digits_are_rejected(self, raw):
        """Full-width or Arabic-Indic digits would bypass the UNIQUE isbn column."""
        with pytest.raises(InvalidISBNError):
            ISBN.create(raw)

        assert ISBN.is_valid(raw) is False

    def test_hyphens_and_spaces_are_stripped(self):
        isbn = ISBN.create("978-0-306 40615-7")

        assert isbn.value == "9780306406157"

    def test_equality_is_by_normalized_value(self):
        assert ISBN.create("978-0-306-40615-7") == ISBN.create("9780306406157")

    def test_is_valid(self):
        assert ISBN.is_valid("0-306-40615-2") is True
        assert ISBN.is_valid("0306406153") is False

    def test_isbn_type(self):
        assert ISBN.create("0306406152").isbn_type == "ISBN-10"
        assert ISBN.create("9780306406157").isbn_type == "ISBN-13"

    def test_to_formatted_string(self):
        assert ISBN.create("9780306406157").to_formatted_string() == "978-0-3064-0615-7"
        assert ISBN.create("0306406152").to_formatted_string() == "0-3064-0615-2"

    def test_from_trusted_source_skips_validation(self):
        """Stored values are not re-checked."""
        isbn = ISBN.from_trusted_source("0306406153")

        assert str(isbn) == "0306406153"

    def test_immutability(self):
        isbn = ISBN.create("0306406152")

        with pytest.raises(Exception):  # FrozenInstanceError
            isbn.value = "9780306406157"


class TestBookFormat:
    """Tests for the BookFormat value object."""

    def test_all_formats_accepted(self):
        for name in BOOK_FORMATS:
            assert BookFormat.create(name).value == name

    def test_normalization_is_idempotent(self):
        """Trim + lowercase, and normalizing twice changes nothing."""
        once = BookFormat.create("  PDF ")
        twice = BookFormat.create(once.value)

        assert once.value == "pdf"
        assert once == twice

    @pytest.mark.parametrize("raw", ["docx", "", "   ", None])
    def test_unknown_format_is_rejected(self, raw):
        with pytest.raises(InvalidBookFormatError) as exc_info:
            BookFormat.create(raw)

        assert exc_info.value.valid_formats == BOOK_FORMATS

    def test_is_valid_expects_normalized_input(self):
        assert BookFormat.is_valid("epub") is True
        assert BookFormat.is_valid("EPUB") is False

    def test_all_formats(self):
        assert BookFormat.all_formats() == BOOK_FORMATS


class TestDuplicateCheckResult:
    def test_not_duplicate(self):
        result = DuplicateCheckResult(is_duplicate=False)

        assert result.duplicate_type is None

    def test_duplicate_requires_type(self):
        with pytest.raises(ValueError, match="duplicate_type is required"):
            DuplicateCheckResult(is_duplicate=True)


class TestEmbeddingResult:
    def test_dimension(self):
        result = EmbeddingResult(embedding=[0.1, 0.2, 0.3], model="nomic-embed-text")

        assert result.dimension == 3

    def test_empty_embedding_rejected(self):
        with pytest.raises(ValueError, match="embedding cannot be empty"):
            EmbeddingResult(embedding=[], model="nomic-embed-text")
