"""
Converters between domain entities and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from library_catalog.api.v1 import schemas as api
from library_catalog.domain import entities as domain
from library_catalog.domain.services import CreateBookInput


def api_request_to_domain(request: api.CreateBookRequest) -> CreateBookInput:
    """
    Convert an API create request to the use case input.

    Args:
        request: Validated API request

    Returns:
        CreateBookInput for CreateBookUseCase.execute()
    """
    return CreateBookInput(
        title=request.title,
        authors=list(request.authors),
        description=request.description,
        type=request.type,
        format=request.format,
        category_names=list(request.categories),
        isbn=request.isbn,
        available=request.available,
        path=request.path,
    )


def domain_book_to_api(book: domain.Book) -> api.BookResponse:
    """
    Convert a domain Book entity to an API BookResponse model.

    Args:
        book: Domain Book entity

    Returns:
        API BookResponse model
    """
    return api.BookResponse(
        id=book.id,
        title=book.title,
        authors=[api.NamedRef(id=a.id, name=a.name) for a in book.authors],
        description=book.description,
        type=book.type.name,
        format=book.format.value,
        categories=[api.NamedRef(id=c.id, name=c.name) for c in book.categories],
        isbn=book.isbn.value if book.isbn else None,
        available=book.available,
        path=book.path,
        created_at=book.created_at,
        updated_at=book.updated_at,
    )


def api_update_to_kwargs(request: api.UpdateBookRequest) -> dict:
    """
    Keep only the fields present in the request body.

    The result feeds ``BookRepository.update(book_id, **kwargs)``, whose
    omitted arguments mean "unchanged".
    """
    return {name: getattr(request, name) for name in request.model_fields_set}
