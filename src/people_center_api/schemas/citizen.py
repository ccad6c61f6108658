"""Pydantic v2 schemas for citizen profiles."""

import uuid
from datetime import datetime

from pydantic import Field

from people_center_api.models.citizen import Gender, Interest
from people_center_api.schemas.common import CamelModel, Location, PaginationMeta

# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CitizenResponse(CamelModel):
    """Public-safe citizen projection; never carries the password hash."""

    id: uuid.UUID
    name: str
    first_name: str | None = None
    last_name: str | None = None
    email: str
    phone_number: str | None = None
    gender: str = ""
    role: str
    location: Location | None = None
    interests: list[str] = Field(default_factory=list)
    created_at: datetime


class PaginatedCitizenResponse(CamelModel):
    citizens: list[CitizenResponse]
    pagination: PaginationMeta


# ---------------------------------------------------------------------------
# Write schemas (self only)
# ---------------------------------------------------------------------------


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; only provided fields are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    email: str | None = None
    phone_number: str | None = Field(default=None, max_length=30)
    gender: Gender | None = None


class PasswordChangeRequest(CamelModel):
    current_password: str | None = None
    new_password: str | None = None


class InterestsUpdateRequest(CamelModel):
    interests: list[Interest] = Field(default_factory=list)


class RoleUpdateRequest(CamelModel):
    role: str
