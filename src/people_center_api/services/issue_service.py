"""Civic issue service.

Issues carry an append-only status history. Each appended entry takes the
next ``sequence`` number for its issue; the unique (issue, sequence)
constraint rejects a concurrent writer that picked the same number, and the
append is retried against the fresh state.
"""

import uuid

from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.errors import Conflict, NotFound, ValidationFailed
from people_center_api.models.citizen import Citizen
from people_center_api.models.civic_issue import CivicIssue, IssueStatus, IssueStatusEntry
from people_center_api.schemas.issue import IssueCreateRequest

_APPEND_ATTEMPTS = 3

_VALID_STATUSES: frozenset[str] = frozenset(s.value for s in IssueStatus)


async def get_issue(session: AsyncSession, issue_id: uuid.UUID) -> CivicIssue:
    """Load an issue with its submitter and full history.

    Raises:
        NotFound: If the issue does not exist.
    """
    result = await session.execute(
        select(CivicIssue).where(CivicIssue.id == issue_id).execution_options(populate_existing=True)
    )
    issue = result.scalar_one_or_none()
    if issue is None:
        raise NotFound("Issue not found")
    return issue


async def create_issue(
    session: AsyncSession,
    citizen: Citizen,
    request: IssueCreateRequest,
    image_url: str | None = None,
) -> CivicIssue:
    """Create an issue in ``open`` status with its first history entry."""
    issue = CivicIssue(
        title=request.title.strip(),
        description=request.description.strip(),
        category=request.category.value,
        status=IssueStatus.OPEN.value,
        location=request.location.model_dump(by_alias=True, exclude_none=True),
        image_url=image_url,
        submitted_by_id=citizen.id,
    )
    issue.status_history.append(
        IssueStatusEntry(sequence=1, status=IssueStatus.OPEN.value, comment="Issue created", updated_by_id=citizen.id)
    )
    session.add(issue)
    await session.commit()
    logger.info(f"Citizen {citizen.id} created issue {issue.id}")
    return await get_issue(session, issue.id)


async def list_issues(
    session: AsyncSession,
    *,
    status: str | None = None,
    category: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[CivicIssue], int]:
    """List issues newest first with optional filters.

    Args:
        session: The database session.
        status: Exact status filter.
        category: Exact category filter.
        search: Case-insensitive substring over title and description.
        page: Page number (1-based).
        limit: Items per page.

    Returns:
        Tuple of (issues, total count).
    """
    query = select(CivicIssue)
    count_query = select(func.count(CivicIssue.id))

    filters = []
    if status:
        filters.append(CivicIssue.status == status)
    if category:
        filters.append(CivicIssue.category == category)
    if search and search.strip():
        term = search.strip().lower()
        filters.append(
            or_(
                func.lower(CivicIssue.title).contains(term, autoescape=True),
                func.lower(CivicIssue.description).contains(term, autoescape=True),
            )
        )
    for condition in filters:
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = (await session.execute(count_query)).scalar_one()

    offset = (page - 1) * limit
    result = await session.execute(query.order_by(CivicIssue.created_at.desc()).offset(offset).limit(limit))
    return list(result.scalars().all()), total


async def _append_entry(
    session: AsyncSession,
    issue_id: uuid.UUID,
    comment: str,
    updated_by: Citizen,
    new_status: str | None = None,
) -> CivicIssue:
    """Append one history entry, optionally moving the issue to ``new_status``."""
    updated_by_id = updated_by.id
    for attempt in range(1, _APPEND_ATTEMPTS + 1):
        issue = await get_issue(session, issue_id)
        last = await session.execute(
            select(func.coalesce(func.max(IssueStatusEntry.sequence), 0)).where(IssueStatusEntry.issue_id == issue_id)
        )
        if new_status is not None:
            issue.status = new_status
        session.add(
            IssueStatusEntry(
                issue_id=issue_id,
                sequence=last.scalar_one() + 1,
                status=issue.status,
                comment=comment,
                updated_by_id=updated_by_id,
            )
        )
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            logger.warning(f"History sequence collision on issue {issue_id} (attempt {attempt})")
            continue
        return await get_issue(session, issue_id)

    raise Conflict("Issue was updated concurrently, please retry", code="CONCURRENT_UPDATE")


async def update_issue_status(
    session: AsyncSession,
    issue_id: uuid.UUID,
    status: str | None,
    comment: str | None,
    admin: Citizen,
) -> CivicIssue:
    """Move an issue to a new status and record the transition.

    Any status may follow any other; entering ``resolved`` needs a comment.

    Raises:
        ValidationFailed: ``INVALID_STATUS`` or ``COMMENT_REQUIRED``.
        NotFound: If the issue does not exist.
    """
    if status not in _VALID_STATUSES:
        raise ValidationFailed(
            f"Invalid status. Must be one of: {', '.join(s.value for s in IssueStatus)}", code="INVALID_STATUS"
        )
    comment = (comment or "").strip()
    if status == IssueStatus.RESOLVED and not comment:
        raise ValidationFailed("A comment is required when resolving an issue", code="COMMENT_REQUIRED")

    admin_id = admin.id
    issue = await _append_entry(session, issue_id, comment or f"Status changed to {status}", admin, new_status=status)
    logger.info(f"Admin {admin_id} moved issue {issue_id} to {status}")
    return issue


async def add_issue_comment(session: AsyncSession, issue_id: uuid.UUID, comment: str | None, admin: Citizen) -> CivicIssue:
    """Record a comment against the issue's current status.

    Raises:
        ValidationFailed: ``MISSING_COMMENT`` for an empty comment.
        NotFound: If the issue does not exist.
    """
    comment = (comment or "").strip()
    if not comment:
        raise ValidationFailed("Comment text is required", code="MISSING_COMMENT")
    return await _append_entry(session, issue_id, comment, admin)
