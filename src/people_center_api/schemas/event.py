"""Pydantic v2 schemas for community events."""

import uuid
from datetime import datetime

from pydantic import Field

from people_center_api.models.event import EventStatus, EventType
from people_center_api.schemas.common import CamelModel, CitizenSummary


class EventLocation(CamelModel):
    venue: str = Field(min_length=1)
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class EventResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: str
    event_type: str = Field(alias="type")
    date: datetime
    time: str
    location: EventLocation
    capacity: int | None = None
    registered_count: int = 0
    is_full: bool = False
    status: str
    created_by: CitizenSummary
    created_at: datetime


class EventDetailResponse(EventResponse):
    """Event detail with the registered citizens, earliest registration first."""

    registered_citizens: list[CitizenSummary] = Field(default_factory=list)


class RegistrationResponse(CamelModel):
    event_id: uuid.UUID
    registered_count: int
    capacity: int | None = None


# ---------------------------------------------------------------------------
# Write schemas (admin)
# ---------------------------------------------------------------------------


class EventCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    event_type: EventType = Field(alias="type")
    date: datetime
    time: str = Field(min_length=1, max_length=50)
    location: EventLocation
    capacity: int | None = Field(default=None, ge=1)
    status: EventStatus = EventStatus.UPCOMING
