"""
Tests for CreateBookUseCase.

Uses in-memory fakes with spy counters for every port, so the order of
operations (what is written, what is called) can be asserted directly.
"""

from typing import Dict, List, Optional, Sequence

import pytest

from library_catalog.domain.entities import (
    DEFAULT_BOOK_TYPES,
    UNSET,
    Author,
    Book,
    BookType,
    Category,
)
from library_catalog.domain.errors import (
    DuplicateISBNError,
    DuplicateItemError,
    FieldTooLongError,
    InvalidBookFormatError,
    InvalidBookTypeError,
    InvalidISBNError,
    RequiredFieldError,
    TooManyItemsError,
)
from library_catalog.domain.services import (
    MAX_EMBEDDING_TEXT_LENGTH,
    CreateBookInput,
    CreateBookUseCase,
    EmbeddingServiceUnavailableError,
    EmbeddingTextTooLongError,
)
from library_catalog.domain.utils import generate_id
from library_catalog.domain.value_objects import DuplicateCheckResult, EmbeddingResult


# =============================================================================
# Fake implementations for testing
# =============================================================================


class FakeBookRepository:
    """In-memory book repository with spy capabilities."""

    def __init__(self):
        self.books: Dict[str, Book] = {}
        self.embeddings: Dict[str, List[float]] = {}
        self.check_duplicate_calls: List[Optional[str]] = []
        self.save_calls = 0

    def find_by_id(self, book_id: str) -> Optional[Book]:
        return self.books.get(book_id)

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        for book in self.books.values():
            if book.isbn and book.isbn.value == isbn:
                return book
        return None

    def exists_by_isbn(self, isbn: str) -> bool:
        return self.find_by_isbn(isbn) is not None

    def check_duplicate(self, isbn: Optional[str] = None) -> DuplicateCheckResult:
        self.check_duplicate_calls.append(isbn)
        if isbn and self.exists_by_isbn(isbn):
            return DuplicateCheckResult(is_duplicate=True, duplicate_type="isbn")
        return DuplicateCheckResult(is_duplicate=False)

    def save(self, book: Book, embedding: Sequence[float]) -> Book:
        self.save_calls += 1
        self.books[book.id] = book
        self.embeddings[book.id] = list(embedding)
        return book

    def update(self, book_id: str, available=UNSET, path=UNSET) -> Book:
        raise NotImplementedError

    def delete(self, book_id: str) -> bool:
        return self.books.pop(book_id, None) is not None

    def find_all(self) -> List[Book]:
        return list(self.books.values())

    def count(self) -> int:
        return len(self.books)


class FakeAuthorRepository:
    def __init__(self):
        self.by_key: Dict[str, Author] = {}
        self.find_or_create_calls = 0

    def find_or_create(self, name: str) -> Author:
        self.find_or_create_calls += 1
        key = name.strip().lower()
        if key not in self.by_key:
            self.by_key[key] = Author.create(id=generate_id(), name=name)
        return self.by_key[key]

    def find_or_create_many(self, names: Sequence[str]) -> List[Author]:
        return [self.find_or_create(name) for name in names]

    def count(self) -> int:
        return len(self.by_key)


class FakeCategoryRepository:
    def __init__(self):
        self.by_name: Dict[str, Category] = {}
        self.find_or_create_calls = 0

    def find_or_create(self, name: str) -> Category:
        self.find_or_create_calls += 1
        category = Category.create(id=generate_id(), name=name)
        return self.by_name.setdefault(category.name, category)

    def find_or_create_many(self, names: Sequence[str]) -> List[Category]:
        return [self.find_or_create(name) for name in names]


class FakeTypeRepository:
    def __init__(self, names: Sequence[str] = DEFAULT_BOOK_TYPES):
        self._types = {name: BookType.create(id=generate_id(), name=name) for name in names}

    def find_by_name(self, name: str) -> Optional[BookType]:
        return self._types.get(name.strip().lower())

    def find_all(self) -> List[BookType]:
        return list(self._types.values())


class SpyEmbeddingService:
    """Counts calls; can be told to fail."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.calls: List[str] = []
        self._fail_with = fail_with

    def generate_embedding(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        if self._fail_with is not None:
            raise self._fail_with
        return EmbeddingResult(embedding=[0.1, 0.2, 0.3], model="fake-model")

    def is_available(self) -> bool:
        return self._fail_with is None


# =============================================================================
# Test fixtures
# =============================================================================


@pytest.fixture
def books() -> FakeBookRepository:
    return FakeBookRepository()


@pytest.fixture
def authors() -> FakeAuthorRepository:
    return FakeAuthorRepository()


@pytest.fixture
def categories() -> FakeCategoryRepository:
    return FakeCategoryRepository()


@pytest.fixture
def embeddings() -> SpyEmbeddingService:
    return SpyEmbeddingService()


def _use_case(books, authors, categories, embeddings) -> CreateBookUseCase:
    return CreateBookUseCase(
        book_repository=books,
        author_repository=authors,
        category_repository=categories,
        type_repository=FakeTypeRepository(),
        embedding_service=embeddings,
    )


@pytest.fixture
def use_case(books, authors, categories, embeddings) -> CreateBookUseCase:
    return _use_case(books, authors, categories, embeddings)


def _input(**overrides) -> CreateBookInput:
    fields = dict(
        title="Clean Code",
        authors=["Robert C. Martin"],
        description="A handbook of agile software craftsmanship",
        type="technical",
        format="pdf",
        category_names=["programming", "craftsmanship"],
    )
    fields.update(overrides)
    return CreateBookInput(**fields)


# =============================================================================
# Tests: happy path
# =============================================================================


class TestCreateBook:
    def test_creates_and_saves_book(self, use_case, books, embeddings):
        book = use_case.execute(_input(isbn="978-0-306-40615-7", path="/books/cc.pdf"))

        assert books.save_calls == 1
        assert books.find_by_id(book.id) is book
        assert book.isbn.value == "9780306406157"
        assert book.type.name == "technical"
        assert book.format.value == "pdf"
        assert book.category_names == ("programming", "craftsmanship")
        assert book.author_names == ("Robert C. Martin",)
        assert book.available is True
        assert book.path == "/books/cc.pdf"

    def test_embedding_is_generated_from_book_text(self, use_case, books, embeddings):
        book = use_case.execute(_input())

        assert embeddings.calls == [book.get_text_for_embedding()]
        assert books.embeddings[book.id] == [0.1, 0.2, 0.3]

    def test_type_lookup_is_case_insensitive(self, use_case):
        assert use_case.execute(_input(type="  Novel ")).type.name == "novel"

    def test_available_false_is_kept(self, use_case):
        assert use_case.execute(_input(available=False)).available is False

    def test_existing_authors_and_categories_are_reused(self, use_case, authors, categories):
        first = use_case.execute(_input())
        second = use_case.execute(_input(title="Clean Architecture", authors=["robert c. martin"]))

        assert first.authors[0].id == second.authors[0].id
        assert first.categories[0].id == second.categories[0].id
        assert authors.count() == 1
        assert len(categories.by_name) == 2


# =============================================================================
# Tests: duplicate policy
# =============================================================================


class TestDuplicatePolicy:
    def test_duplicate_isbn_rejected_without_embedding_call(
        self, use_case, books, embeddings
    ):
        use_case.execute(_input(isbn="0306406152"))
        embeddings.calls.clear()

        with pytest.raises(DuplicateISBNError) as exc_info:
            use_case.execute(_input(title="Another title", isbn="0-306-40615-2"))

        assert exc_info.value.isbn == "0306406152"
        assert embeddings.calls == []
        assert books.count() == 1

    def test_duplicate_isbn_creates_no_authors_or_categories(
        self, use_case, authors, categories
    ):
        use_case.execute(_input(isbn="0306406152"))

        with pytest.raises(DuplicateISBNError):
            use_case.execute(
                _input(authors=["New Person"], category_names=["new"], isbn="0306406152")
            )

        assert "new person" not in authors.by_key
        assert "new" not in categories.by_name

    def test_books_without_isbn_are_never_duplicates(self, use_case, books):
        use_case.execute(_input())
        use_case.execute(_input())

        assert books.count() == 2
        assert books.check_duplicate_calls == []

    def test_same_title_author_format_is_allowed(self, use_case, books):
        """Only ISBN counts; the old author/title/format rule is gone."""
        use_case.execute(_input(isbn="0306406152"))
        use_case.execute(_input(isbn="9780306406157"))

        assert books.count() == 2


# =============================================================================
# Tests: validation before writes
# =============================================================================


class TestValidation:
    @pytest.mark.parametrize(
        "overrides, error",
        [
            ({"isbn": "0306406153"}, InvalidISBNError),
            ({"isbn": "９７８０３０６４０６１５７"}, InvalidISBNError),
            ({"format": "docx"}, InvalidBookFormatError),
            ({"title": "  "}, RequiredFieldError),
            ({"title": "t" * 501}, FieldTooLongError),
            ({"description": ""}, RequiredFieldError),
            ({"authors": []}, RequiredFieldError),
            ({"authors": ["ok", " "]}, RequiredFieldError),
            ({"authors": [f"a{i}" for i in range(11)]}, TooManyItemsError),
            ({"authors": ["x" * 301]}, FieldTooLongError),
            ({"authors": ["Jane", " jane "]}, DuplicateItemError),
            ({"category_names": ["c" * 101]}, FieldTooLongError),
            ({"category_names": ["Fiction", "FICTION"]}, DuplicateItemError),
            ({"category_names": []}, RequiredFieldError),
            ({"category_names": [f"c{i}" for i in range(11)]}, TooManyItemsError),
        ],
    )
    def test_invalid_input_writes_nothing(
        self, use_case, books, authors, categories, embeddings, overrides, error
    ):
        with pytest.raises(error):
            use_case.execute(_input(**overrides))

        assert authors.find_or_create_calls == 0
        assert categories.find_or_create_calls == 0
        assert embeddings.calls == []
        assert books.save_calls == 0

    def test_unknown_type(self, use_case, authors, embeddings):
        with pytest.raises(InvalidBookTypeError) as exc_info:
            use_case.execute(_input(type="essay"))

        assert exc_info.value.valid_types == DEFAULT_BOOK_TYPES
        assert authors.find_or_create_calls == 0
        assert embeddings.calls == []

    def test_same_author_twice_is_a_duplicate_item(self, use_case, embeddings):
        with pytest.raises(DuplicateItemError) as exc_info:
            use_case.execute(_input(authors=["Jane Doe", "JANE DOE"]))

        assert exc_info.value.field_name == "authors"
        assert embeddings.calls == []

    def test_path_too_long(self, use_case, embeddings, books):
        with pytest.raises(FieldTooLongError) as exc_info:
            use_case.execute(_input(path="p" * 1001))

        assert exc_info.value.field_name == "path"
        assert embeddings.calls == []
        assert books.save_calls == 0


# =============================================================================
# Tests: embedding failures
# =============================================================================


class TestEmbeddingFailures:
    def test_oversized_text_rejected_without_service_call(
        self, use_case, books, embeddings
    ):
        long_authors = [f"{i}" + "a" * 299 for i in range(10)]

        with pytest.raises(EmbeddingTextTooLongError) as exc_info:
            use_case.execute(_input(authors=long_authors, description="d" * 5000))

        assert exc_info.value.max_length == MAX_EMBEDDING_TEXT_LENGTH
        assert exc_info.value.actual_length > MAX_EMBEDDING_TEXT_LENGTH
        assert embeddings.calls == []
        assert books.save_calls == 0

    def test_service_unavailable_persists_nothing(self, books, authors, categories):
        failing = SpyEmbeddingService(fail_with=EmbeddingServiceUnavailableError("down"))
        use_case = _use_case(books, authors, categories, failing)

        with pytest.raises(EmbeddingServiceUnavailableError):
            use_case.execute(_input(isbn="0306406152"))

        assert len(failing.calls) == 1
        assert books.count() == 0

    def test_no_retry_on_failure(self, books, authors, categories):
        failing = SpyEmbeddingService(fail_with=EmbeddingServiceUnavailableError())
        use_case = _use_case(books, authors, categories, failing)

        with pytest.raises(EmbeddingServiceUnavailableError):
            use_case.execute(_input())

        assert len(failing.calls) == 1
