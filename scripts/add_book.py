#!/usr/bin/env python3
"""
Add Book Script.

Creates one book in the catalog from the command line, running the same
pipeline as POST /api/books (validation, duplicate check, embedding, save).

Usage:
    python -m scripts.add_book --title "Clean Code" --author "Robert C. Martin" \
        --description "A handbook of agile software craftsmanship" \
        --type technical --format pdf --categories "programming,craftsmanship" \
        --isbn 978-0-13-235088-4 --path /books/clean-code.pdf
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from library_catalog.config import Settings, load_settings
from library_catalog.domain.entities import Book
from library_catalog.domain.services import CreateBookInput, CreateBookUseCase
from library_catalog.infrastructure.db import (
    SqliteAuthorRepository,
    SqliteBookRepository,
    SqliteCategoryRepository,
    SqliteDatabase,
    SqliteTypeRepository,
)
from library_catalog.infrastructure.external import OllamaEmbeddingService

logger = logging.getLogger(__name__)

BOX_WIDTH = 55
LABEL_WIDTH = 12


def build_use_case(settings: Settings) -> CreateBookUseCase:
    """Wire the use case against the configured database and Ollama server."""
    database = SqliteDatabase(settings.db_path)
    return CreateBookUseCase(
        book_repository=SqliteBookRepository(database),
        author_repository=SqliteAuthorRepository(database),
        category_repository=SqliteCategoryRepository(database),
        type_repository=SqliteTypeRepository(database),
        embedding_service=OllamaEmbeddingService(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout_seconds=settings.ollama_timeout_seconds,
        ),
    )


def parse_categories(raw: str) -> List[str]:
    """Split "a, b,,c" into ["a", "b", "c"]."""
    return [name.strip() for name in raw.split(",") if name.strip()]


def _truncate(text: str, max_length: int) -> str:
    return text if len(text) <= max_length else text[: max_length - 3] + "..."


def _field_line(label: str, value: str) -> str:
    value_width = BOX_WIDTH - 4 - LABEL_WIDTH
    return f"│ {label.ljust(LABEL_WIDTH)}{_truncate(value, value_width).ljust(value_width)} │"


def format_book_created(book: Book) -> str:
    """Render the created book as a small box for the terminal."""
    inner = BOX_WIDTH - 4
    lines = [
        "",
        "Book created successfully",
        "",
        f"┌{'─' * (BOX_WIDTH - 2)}┐",
        f"│ {_truncate(book.title, inner).center(inner)} │",
        f"├{'─' * (BOX_WIDTH - 2)}┤",
        _field_line("Authors", ", ".join(book.author_names)),
        _field_line("Type", book.type.name),
        _field_line("Format", book.format.value),
        _field_line("Categories", ", ".join(book.category_names)),
        _field_line("ISBN", book.isbn.to_formatted_string() if book.isbn else "N/A"),
        _field_line("Path", book.path or "N/A"),
        _field_line("Available", "yes" if book.available else "no"),
        _field_line("ID", book.id),
        f"└{'─' * (BOX_WIDTH - 2)}┘",
        "",
    ]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Add a new book to the catalog")
    parser.add_argument("--title", "-t", required=True, help="Book title")
    parser.add_argument(
        "--author", "-a",
        action="append",
        required=True,
        dest="authors",
        help="Book author (repeat for several authors)"
    )
    parser.add_argument("--description", "-d", required=True, help="Book description")
    parser.add_argument(
        "--type", "-T",
        required=True,
        help="Book type (technical, novel, biography)"
    )
    parser.add_argument(
        "--format", "-f",
        required=True,
        help="Book format (epub, pdf, mobi, azw3, djvu, cbz, cbr, txt, other)"
    )
    parser.add_argument(
        "--categories", "-c",
        required=True,
        help="Categories (comma-separated)"
    )
    parser.add_argument("--isbn", default=None, help="Book ISBN (10 or 13 digits)")
    parser.add_argument("--path", "-p", default=None, help="File path")
    parser.add_argument(
        "--unavailable",
        action="store_true",
        help="Mark the book as not available"
    )
    return parser


def main(
    argv: Optional[List[str]] = None,
    use_case: Optional[CreateBookUseCase] = None,
    stdout: TextIO = sys.stdout,
    stderr: TextIO = sys.stderr,
) -> int:
    """
    Run the add command.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        use_case: Pre-wired use case; built from the environment if None
        stdout: Stream for the success output
        stderr: Stream for the error line

    Returns:
        0 on success, 1 on any error
    """
    args = build_parser().parse_args(argv)

    try:
        if use_case is None:
            use_case = build_use_case(load_settings())

        book = use_case.execute(
            CreateBookInput(
                title=args.title,
                authors=args.authors,
                description=args.description,
                type=args.type,
                format=args.format,
                category_names=parse_categories(args.categories),
                isbn=args.isbn,
                available=not args.unavailable,
                path=args.path,
            )
        )
    except Exception as e:
        message = getattr(e, "message", None) or str(e)
        logger.error(f"Failed to add book: {message}")
        stderr.write(f"Error: {message}\n")
        return 1

    stdout.write(format_book_created(book) + "\n")
    logger.info(f"Book added successfully: id={book.id}, title={book.title!r}")
    return 0


if __name__ == "__main__":
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    sys.exit(main())
