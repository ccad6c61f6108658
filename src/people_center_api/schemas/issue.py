"""Pydantic v2 schemas for civic issues and their status history."""

import uuid
from datetime import datetime

from pydantic import Field

from people_center_api.models.civic_issue import IssueCategory
from people_center_api.schemas.common import CamelModel, CitizenSummary, Location, PaginationMeta

# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class StatusEntryResponse(CamelModel):
    status: str
    comment: str
    updated_by: CitizenSummary | None = None
    updated_at: datetime


class IssueResponse(CamelModel):
    """Issue with its full audit trail, oldest entry first."""

    id: uuid.UUID
    title: str
    description: str
    category: str
    status: str
    location: Location
    image_url: str | None = None
    submitted_by: CitizenSummary
    status_history: list[StatusEntryResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class PaginatedIssueResponse(CamelModel):
    issues: list[IssueResponse]
    pagination: PaginationMeta


# ---------------------------------------------------------------------------
# Write schemas
# ---------------------------------------------------------------------------


class IssueLocation(Location):
    address: str = Field(min_length=1)


class IssueCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    category: IssueCategory
    location: IssueLocation


class IssueStatusUpdateRequest(CamelModel):
    """Admin status change; ``status`` is checked by the service."""

    status: str | None = None
    comment: str | None = None


class IssueCommentRequest(CamelModel):
    comment: str | None = None
