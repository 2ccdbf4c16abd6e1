"""Pydantic schemas for API request validation.

Payloads use camelCase keys (``coverText``, ``idAuthor``); snake_case names
are accepted as well.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Book schemas
class BookPayload(_Payload):
    """Schema for creating or replacing a book."""

    title: str = Field(..., min_length=1, max_length=255)
    cover_text: str = Field(..., min_length=1, max_length=255)
    comment: str | None = None
    id_author: int | None = None


# Author schemas
class AuthorPayload(_Payload):
    """Schema for creating or replacing an author."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)


class Violation(BaseModel):
    """A single field-level constraint violation."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Body of a 400 response."""

    detail: str = "Validation failed"
    errors: list[Violation]
