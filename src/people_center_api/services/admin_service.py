"""Admin dashboard service: counts, activity feed and citizen management."""

import uuid
from datetime import UTC, datetime, time
from typing import Any

from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.errors import PermissionDenied, ValidationFailed
from people_center_api.models.base import as_utc, utcnow
from people_center_api.models.citizen import Citizen, CitizenRole
from people_center_api.models.civic_issue import CivicIssue, IssueStatus
from people_center_api.models.event import Event
from people_center_api.models.survey import Survey, SurveyStatus
from people_center_api.services.citizen_service import get_citizen

RECENT_PER_TYPE = 2
RECENT_MAX_ITEMS = 8


async def get_dashboard_stats(session: AsyncSession) -> dict[str, Any]:
    """Totals for the admin dashboard.

    ``issues_by_status`` always carries every status, zero when unused.
    Upcoming events are those dated from the start of today (UTC).
    """
    total_citizens = (await session.execute(select(func.count(Citizen.id)))).scalar_one()
    total_issues = (await session.execute(select(func.count(CivicIssue.id)))).scalar_one()

    by_status = {status.value: 0 for status in IssueStatus}
    rows = await session.execute(select(CivicIssue.status, func.count(CivicIssue.id)).group_by(CivicIssue.status))
    for status, count in rows.all():
        by_status[status] = count

    start_of_today = datetime.combine(utcnow().date(), time.min, tzinfo=UTC)
    upcoming_events = (
        await session.execute(select(func.count(Event.id)).where(Event.date >= start_of_today))
    ).scalar_one()
    active_surveys = (
        await session.execute(select(func.count(Survey.id)).where(Survey.status == SurveyStatus.ACTIVE.value))
    ).scalar_one()

    return {
        "total_citizens": total_citizens,
        "total_issues": total_issues,
        "issues_by_status": by_status,
        "upcoming_events": upcoming_events,
        "active_surveys": active_surveys,
    }


async def get_recent_activity(session: AsyncSession) -> list[dict[str, Any]]:
    """The newest few citizens, issues, events and surveys merged newest first."""
    citizens = await session.execute(select(Citizen).order_by(Citizen.created_at.desc()).limit(RECENT_PER_TYPE))
    issues = await session.execute(select(CivicIssue).order_by(CivicIssue.updated_at.desc()).limit(RECENT_PER_TYPE))
    events = await session.execute(select(Event).order_by(Event.created_at.desc()).limit(RECENT_PER_TYPE))
    surveys = await session.execute(select(Survey).order_by(Survey.created_at.desc()).limit(RECENT_PER_TYPE))

    activity: list[dict[str, Any]] = []
    activity.extend(
        {"type": "citizen", "id": c.id, "title": c.name, "status": c.role, "timestamp": as_utc(c.created_at)}
        for c in citizens.scalars()
    )
    activity.extend(
        {"type": "issue", "id": i.id, "title": i.title, "status": i.status, "timestamp": as_utc(i.updated_at)}
        for i in issues.scalars()
    )
    activity.extend(
        {"type": "event", "id": e.id, "title": e.title, "status": e.status, "timestamp": as_utc(e.created_at)}
        for e in events.scalars()
    )
    activity.extend(
        {"type": "survey", "id": s.id, "title": s.title, "status": s.status, "timestamp": as_utc(s.created_at)}
        for s in surveys.scalars()
    )
    activity.sort(key=lambda item: item["timestamp"], reverse=True)
    return activity[:RECENT_MAX_ITEMS]


async def list_citizens(
    session: AsyncSession,
    *,
    search: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Citizen], int]:
    """List citizens newest first, optionally matching name or email.

    Returns:
        Tuple of (citizens, total count).
    """
    query = select(Citizen)
    count_query = select(func.count(Citizen.id))
    if search and search.strip():
        term = search.strip().lower()
        condition = or_(
            func.lower(Citizen.name).contains(term, autoescape=True),
            Citizen.email.contains(term, autoescape=True),
        )
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = (await session.execute(count_query)).scalar_one()
    offset = (page - 1) * limit
    result = await session.execute(query.order_by(Citizen.created_at.desc()).offset(offset).limit(limit))
    return list(result.scalars().all()), total


async def update_citizen_role(session: AsyncSession, citizen_id: uuid.UUID, role: str, admin: Citizen) -> Citizen:
    """Change a citizen's role.

    Raises:
        ValidationFailed: ``INVALID_ROLE``.
        PermissionDenied: ``FORBIDDEN`` when an admin targets themselves.
        NotFound: If the citizen does not exist.
    """
    if role not in {r.value for r in CitizenRole}:
        raise ValidationFailed("Invalid role. Must be 'citizen' or 'admin'", code="INVALID_ROLE")
    if citizen_id == admin.id:
        raise PermissionDenied("You cannot change your own role")

    citizen = await get_citizen(session, citizen_id)
    citizen.role = role
    await session.commit()
    await session.refresh(citizen)
    logger.info(f"Admin {admin.id} set role of citizen {citizen.id} to {role}")
    return citizen
