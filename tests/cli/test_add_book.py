"""
Tests for the add-book command line script.

The use case is wired against a tmp_path SQLite database and a fake
embedding service, then driven through main(argv).
"""

import io

import pytest

from library_catalog.domain.services import CreateBookUseCase
from library_catalog.domain.services.errors import EmbeddingServiceUnavailableError
from library_catalog.domain.value_objects import EmbeddingResult
from library_catalog.infrastructure.db import (
    SqliteAuthorRepository,
    SqliteBookRepository,
    SqliteCategoryRepository,
    SqliteDatabase,
    SqliteTypeRepository,
)
from scripts.add_book import main, parse_categories


class FakeEmbeddingService:
    def __init__(self, fail: bool = False):
        self._fail = fail

    def generate_embedding(self, text: str) -> EmbeddingResult:
        if self._fail:
            raise EmbeddingServiceUnavailableError("refused")
        return EmbeddingResult(embedding=[0.1], model="fake-model")

    def is_available(self) -> bool:
        return not self._fail


@pytest.fixture
def database(tmp_path) -> SqliteDatabase:
    return SqliteDatabase(tmp_path / "catalog.db")


def _use_case(database, fail=False) -> CreateBookUseCase:
    return CreateBookUseCase(
        book_repository=SqliteBookRepository(database),
        author_repository=SqliteAuthorRepository(database),
        category_repository=SqliteCategoryRepository(database),
        type_repository=SqliteTypeRepository(database),
        embedding_service=FakeEmbeddingService(fail=fail),
    )


ARGS = [
    "--title", "Clean Code",
    "--author", "Robert C. Martin",
    "--description", "A handbook of agile software craftsmanship",
    "--type", "technical",
    "--format", "pdf",
    "--categories", "programming, craftsmanship",
]


def test_parse_categories():
    assert parse_categories(" a, b,,c ,") == ["a", "b", "c"]


def test_add_book_success(database):
    stdout, stderr = io.StringIO(), io.StringIO()

    code = main(
        ARGS + ["--author", "Second Author", "--isbn", "0306406152", "--unavailable"],
        use_case=_use_case(database),
        stdout=stdout,
        stderr=stderr,
    )

    assert code == 0
    assert stderr.getvalue() == ""
    assert "Book created successfully" in stdout.getvalue()
    assert "0-3064-0615-2" in stdout.getvalue()

    books = SqliteBookRepository(database).find_all()
    assert len(books) == 1
    assert books[0].author_names == ("Robert C. Martin", "Second Author")
    assert books[0].category_names == ("programming", "craftsmanship")
    assert books[0].available is False


def test_duplicate_isbn_exits_with_error(database):
    use_case = _use_case(database)
    assert main(ARGS + ["--isbn", "0306406152"], use_case=use_case, stdout=io.StringIO()) == 0
    stderr = io.StringIO()

    code = main(ARGS + ["--isbn", "0306406152"], use_case=use_case, stdout=io.StringIO(), stderr=stderr)

    assert code == 1
    assert stderr.getvalue() == 'Error: A book with ISBN "0306406152" already exists\n'


def test_embedding_unavailable_exits_with_error(database):
    stderr = io.StringIO()

    code = main(ARGS, use_case=_use_case(database, fail=True), stdout=io.StringIO(), stderr=stderr)

    assert code == 1
    assert stderr.getvalue().startswith("Error: Embedding service unavailable")
    assert SqliteBookRepository(database).count() == 0


def test_missing_required_argument_exits():
    with pytest.raises(SystemExit) as exc_info:
        main(["--title", "Only a title"], stderr=io.StringIO())

    assert exc_info.value.code == 2
