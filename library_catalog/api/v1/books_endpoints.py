"""
API endpoints for the book catalog.

This module defines the FastAPI routes for creating, listing, reading and
updating books. It handles HTTP concerns and delegates to the domain.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from library_catalog.api.v1 import schemas as api
from library_catalog.api.v1.converters import (
    api_request_to_domain,
    api_update_to_kwargs,
    domain_book_to_api,
)
from library_catalog.api.v1.dependencies import (
    get_book_repository,
    get_create_book_use_case,
    get_embedding_service,
)
from library_catalog.api.v1.errors import map_error_to_http
from library_catalog.domain.errors import BookNotFoundError
from library_catalog.domain.ports import BookRepository, EmbeddingService
from library_catalog.domain.services import CreateBookUseCase

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_response(error: Exception) -> JSONResponse:
    """Turn a raised error into the JSON error response, logging 5xx loudly."""
    mapped = map_error_to_http(error)
    if mapped.status_code >= 500:
        logger.error(f"Unexpected error handling request: {error}", exc_info=error)
    else:
        logger.debug(f"Request rejected ({mapped.status_code}): {mapped.body['error']}")
    return JSONResponse(status_code=mapped.status_code, content=mapped.body)


def _not_found(book_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": f"Book with id '{book_id}' not found"},
    )


@router.post(
    "/books",
    response_model=api.BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": api.ErrorResponse},
        409: {"model": api.ErrorResponse},
        503: {"model": api.ErrorResponse},
    },
)
def create_book(
    request: api.CreateBookRequest,
    use_case: CreateBookUseCase = Depends(get_create_book_use_case),
):
    """
    Create a book in the catalog.

    Returns:
        201 with the created book (never the embedding)
        400 on validation errors, 409 on duplicate ISBN,
        503 if the embedding service is unavailable
    """
    logger.debug(f"Received create book request: title={request.title!r}")
    try:
        book = use_case.execute(api_request_to_domain(request))
    except Exception as e:
        return _error_response(e)

    logger.info(f"Book created via API: id={book.id}, title={book.title!r}")
    return domain_book_to_api(book)


@router.get("/books", response_model=list[api.BookResponse])
def list_books(
    book_repo: BookRepository = Depends(get_book_repository),
) -> list[api.BookResponse]:
    """List every book in the catalog."""
    return [domain_book_to_api(book) for book in book_repo.find_all()]


@router.get("/books/{book_id}", response_model=api.BookResponse)
def get_book_by_id(
    book_id: str,
    book_repo: BookRepository = Depends(get_book_repository),
):
    """
    Get a book by its unique identifier.

    Returns:
        404 if the book does not exist
    """
    book = book_repo.find_by_id(book_id)
    if book is None:
        return _not_found(book_id)

    return domain_book_to_api(book)


@router.patch("/books/{book_id}", response_model=api.BookResponse)
def update_book(
    book_id: str,
    request: api.UpdateBookRequest,
    book_repo: BookRepository = Depends(get_book_repository),
):
    """
    Update ``available`` and/or ``path``.

    Only fields present in the body change; ``"path": null`` clears the path.
    """
    try:
        book = book_repo.update(book_id, **api_update_to_kwargs(request))
    except BookNotFoundError:
        return _not_found(book_id)
    except Exception as e:
        return _error_response(e)

    return domain_book_to_api(book)


@router.get("/health", response_model=api.HealthResponse)
def health_check(
    book_repo: BookRepository = Depends(get_book_repository),
    embedding_service: EmbeddingService = Depends(get_embedding_service),
) -> api.HealthResponse:
    """
    Check system health.

    An unreachable embedding service reports "degraded"; reads still work.
    """
    embedding_ok = embedding_service.is_available()
    return api.HealthResponse(
        status="ok" if embedding_ok else "degraded",
        components={"database": True, "embedding_service": embedding_ok},
        books=book_repo.count(),
    )
