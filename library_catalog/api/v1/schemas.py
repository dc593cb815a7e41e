"""
Request and response models for the books API.

Field constraints mirror the entity rules so most bad requests are rejected
here, with every violation listed at once. The domain still validates
everything again and reports the first violation it finds.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: str | None) -> str | None:
    return value if value else None


class CreateBookRequest(BaseModel):
    """
    Request body for POST /books.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=500, description="Book title")
    authors: list[str] = Field(
        min_length=1, max_length=10, description="Author names (1-10)"
    )
    description: str = Field(min_length=1, max_length=5000, description="Book description")
    type: str = Field(
        min_length=1, max_length=50, description="Book type (technical, novel, biography)"
    )
    format: str = Field(
        min_length=1, description="File format (epub, pdf, mobi, azw3, djvu, cbz, cbr, txt, other)"
    )
    categories: list[str] = Field(
        min_length=1, max_length=10, description="Category names (1-10)"
    )
    isbn: str | None = Field(default=None, description="ISBN-10 or ISBN-13, hyphens allowed")
    available: bool = Field(default=True, description="Whether the file is available")
    path: str | None = Field(default=None, max_length=1000, description="File location")

    @field_validator("authors")
    @classmethod
    def _check_author_names(cls, names: list[str]) -> list[str]:
        for name in names:
            if not name:
                raise ValueError("author name cannot be empty")
            if len(name) > 300:
                raise ValueError("author name exceeds maximum length of 300 characters")
        return names

    @field_validator("categories")
    @classmethod
    def _check_category_names(cls, names: list[str]) -> list[str]:
        for name in names:
            if not name:
                raise ValueError("category name cannot be empty")
            if len(name) > 100:
                raise ValueError("category name exceeds maximum length of 100 characters")
        return names

    @field_validator("isbn", "path")
    @classmethod
    def _empty_means_absent(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class UpdateBookRequest(BaseModel):
    """
    Request body for PATCH /books/{id}.

    Presence matters: a field left out of the body is unchanged, while
    ``"path": null`` clears the path. See ``model_fields_set``.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    available: bool | None = Field(default=None, description="New availability flag")
    path: str | None = Field(default=None, max_length=1000, description="New file location")

    @field_validator("available")
    @classmethod
    def _available_not_null(cls, value: bool | None) -> bool | None:
        if value is None:
            raise ValueError("available cannot be null")
        return value


class NamedRef(BaseModel):
    """An author or category as embedded in a book response."""
    id: str
    name: str


class BookResponse(BaseModel):
    """
    API representation of a Book entity.

    The embedding vector is never part of it.
    """
    id: str = Field(description="Unique identifier (UUID v4)")
    title: str
    authors: list[NamedRef]
    description: str
    type: str = Field(description="Book type name")
    format: str
    categories: list[NamedRef]
    isbn: str | None = Field(default=None, description="Normalized ISBN")
    available: bool
    path: str | None = None
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class ErrorResponse(BaseModel):
    error: str
    details: list[str] | None = None


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    components: dict[str, bool]
    books: int = Field(ge=0, description="Number of books in the catalog")
