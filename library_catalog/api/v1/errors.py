"""
Maps domain and application errors to HTTP responses.

The mapping is a pure function of ``error.kind``, so the whole status table
can be tested without a server:

- 400 Bad Request: schema validation, every domain error except duplicates,
  and the local embedding-text length pre-check
- 409 Conflict: duplicate ISBN / duplicate book
- 503 Service Unavailable: embedding service failures
- 500 Internal Server Error: anything without a known ``kind``
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from library_catalog.domain.errors import ErrorKind
from library_catalog.domain.services.errors import UNAVAILABLE_MESSAGE

VALIDATION_FAILED_MESSAGE = "Validation failed"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.REQUIRED_FIELD: 400,
    ErrorKind.FIELD_TOO_LONG: 400,
    ErrorKind.INVALID_IDENTIFIER: 400,
    ErrorKind.TOO_MANY_ITEMS: 400,
    ErrorKind.DUPLICATE_ITEM: 400,
    ErrorKind.INVALID_ISBN: 400,
    ErrorKind.INVALID_BOOK_FORMAT: 400,
    ErrorKind.INVALID_BOOK_TYPE: 400,
    ErrorKind.BOOK_NOT_FOUND: 400,
    ErrorKind.CATEGORY_NOT_FOUND: 400,
    ErrorKind.DUPLICATE_ISBN: 409,
    ErrorKind.DUPLICATE_BOOK: 409,
    ErrorKind.EMBEDDING_TEXT_TOO_LONG: 400,
    ErrorKind.EMBEDDING_SERVICE_UNAVAILABLE: 503,
    ErrorKind.EMBEDDING_SERVICE_ERROR: 503,
}

# Field-level validation kinds also list their message under "details".
_FIELD_VALIDATION_KINDS = frozenset(
    {
        ErrorKind.REQUIRED_FIELD,
        ErrorKind.FIELD_TOO_LONG,
        ErrorKind.TOO_MANY_ITEMS,
        ErrorKind.DUPLICATE_ITEM,
    }
)


@dataclass(frozen=True)
class HttpErrorResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


def map_error_to_http(error: BaseException) -> HttpErrorResponse:
    """
    Map a raised error to its HTTP status and body ``{error, details?}``.

    Args:
        error: Any exception that reached the HTTP boundary

    Returns:
        HttpErrorResponse with the status code and JSON body
    """
    kind = getattr(error, "kind", None)
    if not isinstance(kind, ErrorKind):
        return HttpErrorResponse(500, {"error": UNEXPECTED_ERROR_MESSAGE})

    status_code = STATUS_BY_KIND[kind]
    if status_code == 503:
        return HttpErrorResponse(503, {"error": UNAVAILABLE_MESSAGE})

    message = getattr(error, "message", None) or str(error)
    body: Dict[str, Any] = {"error": message}
    if kind in _FIELD_VALIDATION_KINDS:
        body["details"] = [message]
    return HttpErrorResponse(status_code, body)


def map_validation_errors(errors: Sequence[Dict[str, Any]]) -> HttpErrorResponse:
    """
    Map request-schema violations (pydantic error dicts) to a 400 response.

    Every violation is listed as ``"<field path>: <message>"``.
    """
    details: List[str] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        path = ".".join(loc)
        message = err.get("msg", "invalid value")
        details.append(f"{path}: {message}" if path else message)
    return HttpErrorResponse(400, {"error": VALIDATION_FAILED_MESSAGE, "details": details})
