"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of repositories and services
for use with FastAPI's Depends() system.

Note: We use module-level singletons instead of @lru_cache with Depends()
parameters, which is an antipattern that can cause unexpected behavior.
"""

from typing import Optional

from library_catalog.config import Settings, load_settings
from library_catalog.domain.ports import (
    AuthorRepository,
    BookRepository,
    CategoryRepository,
    EmbeddingService,
    TypeRepository,
)
from library_catalog.domain.services import CreateBookUseCase
from library_catalog.infrastructure.db import (
    SqliteAuthorRepository,
    SqliteBookRepository,
    SqliteCategoryRepository,
    SqliteDatabase,
    SqliteTypeRepository,
)
from library_catalog.infrastructure.external import OllamaEmbeddingService

# Module-level singletons (initialized lazily)
_settings: Optional[Settings] = None
_database: Optional[SqliteDatabase] = None
_book_repository: Optional[BookRepository] = None
_author_repository: Optional[AuthorRepository] = None
_category_repository: Optional[CategoryRepository] = None
_type_repository: Optional[TypeRepository] = None
_embedding_service: Optional[EmbeddingService] = None
_create_book_use_case: Optional[CreateBookUseCase] = None


def get_settings() -> Settings:
    """Provide the settings read from the environment."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_database() -> SqliteDatabase:
    global _database
    if _database is None:
        _database = SqliteDatabase(get_settings().db_path)
    return _database


def get_book_repository() -> BookRepository:
    """Provide a singleton instance of the book repository."""
    global _book_repository
    if _book_repository is None:
        _book_repository = SqliteBookRepository(get_database())
    return _book_repository


def get_author_repository() -> AuthorRepository:
    global _author_repository
    if _author_repository is None:
        _author_repository = SqliteAuthorRepository(get_database())
    return _author_repository


def get_category_repository() -> CategoryRepository:
    global _category_repository
    if _category_repository is None:
        _category_repository = SqliteCategoryRepository(get_database())
    return _category_repository


def get_type_repository() -> TypeRepository:
    global _type_repository
    if _type_repository is None:
        _type_repository = SqliteTypeRepository(get_database())
    return _type_repository


def get_embedding_service() -> EmbeddingService:
    """Provide a singleton instance of the Ollama embedding client."""
    global _embedding_service
    if _embedding_service is None:
        settings = get_settings()
        _embedding_service = OllamaEmbeddingService(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout_seconds=settings.ollama_timeout_seconds,
        )
    return _embedding_service


def get_create_book_use_case() -> CreateBookUseCase:
    """Provide the CreateBook use case with all dependencies wired."""
    global _create_book_use_case
    if _create_book_use_case is None:
        _create_book_use_case = CreateBookUseCase(
            book_repository=get_book_repository(),
            author_repository=get_author_repository(),
            category_repository=get_category_repository(),
            type_repository=get_type_repository(),
            embedding_service=get_embedding_service(),
        )
    return _create_book_use_case


def reset_dependencies() -> None:
    """
    Reset all singletons. Useful for testing.

    This allows tests to inject mock dependencies by resetting
    the module state between test cases.
    """
    global _settings, _database, _book_repository, _author_repository
    global _category_repository, _type_repository, _embedding_service
    global _create_book_use_case

    _settings = None
    _database = None
    _book_repository = None
    _author_repository = None
    _category_repository = None
    _type_repository = None
    _embedding_service = None
    _create_book_use_case = None
