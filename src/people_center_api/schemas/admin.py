"""Pydantic v2 schemas for the admin dashboard."""

import uuid
from datetime import datetime

from people_center_api.schemas.common import CamelModel


class DashboardResponse(CamelModel):
    total_citizens: int
    total_issues: int
    issues_by_status: dict[str, int]
    upcoming_events: int
    active_surveys: int


class ActivityItem(CamelModel):
    """One entry of the recent-activity feed."""

    type: str
    id: uuid.UUID
    title: str
    status: str | None = None
    timestamp: datetime
