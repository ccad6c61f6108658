"""Common Pydantic v2 schemas shared across the API.

Provides the camelCase base model, the success envelope, pagination and the
error body. Every JSON payload uses camelCase keys; request bodies also
accept the snake_case field names.
"""

import math
import uuid
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SuccessResponse(BaseModel, Generic[T]):
    """``{"success": true, "data": ...}`` envelope for every successful response."""

    success: Literal[True] = True
    data: T


class MessageData(CamelModel):
    message: str


class PaginationMeta(CamelModel):
    """Pagination metadata included in paginated responses."""

    page: int = Field(description="Current page number")
    limit: int = Field(description="Items per page")
    total: int = Field(description="Total number of items")
    pages: int = Field(description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class ErrorBody(BaseModel):
    message: str = Field(description="Human-readable error message")
    code: str = Field(description="Machine-readable error code")
    details: list[dict[str, Any]] | None = Field(default=None, description="Field-level validation errors")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    success: Literal[False] = False
    error: ErrorBody


class Coordinates(CamelModel):
    """GeoJSON point, ``coordinates`` is ``[longitude, latitude]``."""

    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(min_length=2, max_length=2)


class Location(CamelModel):
    """Postal location shared by citizens and issues."""

    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    coordinates: Coordinates | None = None


class CitizenSummary(CamelModel):
    """Minimal citizen projection embedded in other resources."""

    id: uuid.UUID
    name: str
    email: str
