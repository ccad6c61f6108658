"""Governance service: council roster and decision workflow.

Council members are soft-deleted through ``is_active``. Decisions move
forward through manual status changes, or settle to Approved/Rejected
when a vote tally is recorded.
"""

import uuid
from typing import Any

from loguru import logger
from sqlalchemy import and_, case, func, literal, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.errors import NotFound, StateError
from people_center_api.lib.governance import INITIAL_STATUSES, VoteTally, check_manual_transition, tally_votes
from people_center_api.models.base import utcnow
from people_center_api.models.governance import CouncilMember, DecisionStatus, GovernanceDecision
from people_center_api.schemas.governance import (
    CouncilMemberCreateRequest,
    CouncilMemberUpdateRequest,
    DecisionCreateRequest,
    DecisionUpdateRequest,
)

_UPDATABLE_MEMBER_FIELDS: frozenset[str] = frozenset({"name", "role", "term", "photo", "bio", "email", "is_active"})

# Status, votes and dates are handled separately from the plain field copy.
_UPDATABLE_DECISION_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "stage", "proposed_by", "category", "priority", "notes"}
)

_PENDING_STATUSES: tuple[str, ...] = (
    DecisionStatus.PROPOSED.value,
    DecisionStatus.IN_DELIBERATION.value,
    DecisionStatus.VOTING.value,
)


# ---------------------------------------------------------------------------
# Council
# ---------------------------------------------------------------------------


async def list_council(session: AsyncSession, *, include_inactive: bool = False) -> list[CouncilMember]:
    """List council members ordered by role then name.

    Args:
        session: Database session.
        include_inactive: Also return deactivated members (listed last).
    """
    query = select(CouncilMember)
    if include_inactive:
        query = query.order_by(CouncilMember.is_active.desc(), CouncilMember.role, CouncilMember.name)
    else:
        query = query.where(CouncilMember.is_active.is_(True)).order_by(CouncilMember.role, CouncilMember.name)
    result = await session.execute(query)
    return list(result.scalars().all())


async def get_member(session: AsyncSession, member_id: uuid.UUID) -> CouncilMember:
    member = await session.get(CouncilMember, member_id)
    if member is None:
        raise NotFound("Council member not found")
    return member


async def create_member(session: AsyncSession, request: CouncilMemberCreateRequest) -> CouncilMember:
    member = CouncilMember(
        name=request.name.strip(),
        role=request.role.value,
        term=request.term,
        photo=request.photo,
        bio=request.bio,
        email=request.email.strip().lower(),
        is_active=True,
    )
    session.add(member)
    await session.commit()
    await session.refresh(member)
    logger.info(f"Created council member {member.id} ({member.role})")
    return member


async def update_member(
    session: AsyncSession, member_id: uuid.UUID, request: CouncilMemberUpdateRequest
) -> CouncilMember:
    member = await get_member(session, member_id)
    for field_name, value in request.model_dump(exclude_unset=True).items():
        if field_name in _UPDATABLE_MEMBER_FIELDS and value is not None:
            setattr(member, field_name, value.value if field_name == "role" else value)
    await session.commit()
    await session.refresh(member)
    logger.info(f"Updated council member {member.id}")
    return member


async def deactivate_member(session: AsyncSession, member_id: uuid.UUID) -> CouncilMember:
    """Soft-delete a council member by clearing ``is_active``."""
    member = await get_member(session, member_id)
    member.is_active = False
    await session.commit()
    await session.refresh(member)
    logger.info(f"Deactivated council member {member.id}")
    return member


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


async def list_decisions(
    session: AsyncSession, *, status: str | None = None, limit: int | None = None
) -> list[GovernanceDecision]:
    """Decisions newest first, optionally filtered by status."""
    query = select(GovernanceDecision).order_by(GovernanceDecision.created_at.desc())
    if status:
        query = query.where(GovernanceDecision.status == status)
    if limit is not None:
        query = query.limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())


async def get_decision(session: AsyncSession, decision_id: uuid.UUID) -> GovernanceDecision:
    result = await session.execute(
        select(GovernanceDecision)
        .where(GovernanceDecision.id == decision_id)
        .execution_options(populate_existing=True)
    )
    decision = result.scalar_one_or_none()
    if decision is None:
        raise NotFound("Decision not found")
    return decision


async def create_decision(
    session: AsyncSession, request: DecisionCreateRequest, threshold: int
) -> GovernanceDecision:
    """Create a decision; a vote pair in the request settles its status immediately.

    Without votes that settle it, a decision can only start in one of the
    pending statuses.

    Raises:
        StateError: ``INVALID_TRANSITION`` for a settled status with no votes.
    """
    now = utcnow()
    tally = tally_votes(request.votes_for, request.votes_against, threshold) if request.has_votes else None
    if (tally is None or tally.status is None) and request.status not in INITIAL_STATUSES:
        raise StateError(
            f"A decision cannot be created as {request.status.value} without votes", code="INVALID_TRANSITION"
        )

    decision = GovernanceDecision(
        title=request.title.strip(),
        description=request.description.strip(),
        status=request.status.value,
        stage=request.stage.value,
        proposed_by=request.proposed_by.strip(),
        category=request.category.value,
        priority=request.priority.value,
        notes=request.notes,
        votes_for=0,
        votes_against=0,
        total_votes=0,
        consensus_rate=0,
    )
    if tally is not None:
        decision.votes_for = tally.votes_for
        decision.votes_against = tally.votes_against
        decision.total_votes = tally.total_votes
        decision.consensus_rate = tally.consensus_rate
        if tally.status is not None:
            decision.status = tally.status.value
            decision.decision_date = now

    session.add(decision)
    await session.commit()
    logger.info(f"Created governance decision {decision.id} ({decision.status})")
    return await get_decision(session, decision.id)


def _vote_update_values(tally: VoteTally, now: Any) -> dict[str, Any]:
    """Column values for an atomic tally UPDATE.

    ``decision_date`` moves only when the settled status differs from the
    stored one or no date is set. An Implemented decision keeps its status
    and date; only the counts change.
    """
    values: dict[str, Any] = {
        "votes_for": tally.votes_for,
        "votes_against": tally.votes_against,
        "total_votes": tally.total_votes,
        "consensus_rate": tally.consensus_rate,
    }
    if tally.status is not None:
        is_implemented = GovernanceDecision.status == DecisionStatus.IMPLEMENTED.value
        values["status"] = case((is_implemented, GovernanceDecision.status), else_=literal(tally.status.value))
        values["decision_date"] = case(
            (
                and_(
                    ~is_implemented,
                    or_(
                        GovernanceDecision.status != tally.status.value,
                        GovernanceDecision.decision_date.is_(None),
                    ),
                ),
                literal(now, type_=GovernanceDecision.decision_date.type),
            ),
            else_=GovernanceDecision.decision_date,
        )
    return values


async def update_decision(
    session: AsyncSession,
    decision_id: uuid.UUID,
    request: DecisionUpdateRequest,
    threshold: int,
) -> GovernanceDecision:
    """Apply an admin update to a decision.

    A vote pair recomputes totals and consensus and, once votes exist,
    settles the status; that derived status overrides any manual status in
    the same request. Otherwise a manual status must follow the forward
    path. Nothing is written when validation fails.

    Raises:
        NotFound: If the decision does not exist.
        StateError: ``INVALID_TRANSITION`` for a disallowed manual status change.
    """
    decision = await get_decision(session, decision_id)
    now = utcnow()
    tally = tally_votes(request.votes_for, request.votes_against, threshold) if request.has_votes else None
    if tally is not None and (decision.votes_for, decision.votes_against) == (tally.votes_for, tally.votes_against):
        # Same counts as stored: nothing to recompute.
        tally = None

    manual_status = request.status.value if request.status is not None else None
    if manual_status is not None and (tally is None or tally.status is None):
        if not check_manual_transition(decision.status, manual_status):
            raise StateError(
                f"Cannot move a decision from {decision.status} to {manual_status}", code="INVALID_TRANSITION"
            )
        if manual_status != decision.status:
            decision.status = manual_status
            if manual_status == DecisionStatus.IMPLEMENTED and decision.implementation_date is None:
                decision.implementation_date = now

    for field_name, value in request.model_dump(exclude_unset=True).items():
        if field_name in _UPDATABLE_DECISION_FIELDS and value is not None:
            setattr(decision, field_name, getattr(value, "value", value))

    if tally is not None:
        # Autoflushes the field changes above into the same transaction.
        await session.execute(
            update(GovernanceDecision)
            .where(GovernanceDecision.id == decision_id)
            .values(**_vote_update_values(tally, now), updated_at=now)
            .execution_options(synchronize_session=False)
        )
    await session.commit()
    logger.info(f"Updated governance decision {decision_id}")
    return await get_decision(session, decision_id)


async def get_metrics(session: AsyncSession) -> dict[str, Any]:
    """Headline numbers for the public governance page."""
    total = (await session.execute(select(func.count(GovernanceDecision.id)))).scalar_one()
    approved = (
        await session.execute(
            select(func.count(GovernanceDecision.id)).where(GovernanceDecision.status == DecisionStatus.APPROVED.value)
        )
    ).scalar_one()
    pending = (
        await session.execute(
            select(func.count(GovernanceDecision.id)).where(GovernanceDecision.status.in_(_PENDING_STATUSES))
        )
    ).scalar_one()
    active_members = (
        await session.execute(select(func.count(CouncilMember.id)).where(CouncilMember.is_active.is_(True)))
    ).scalar_one()
    avg_rate = (
        await session.execute(
            select(func.avg(GovernanceDecision.consensus_rate)).where(GovernanceDecision.consensus_rate > 0)
        )
    ).scalar_one()

    return {
        "total_decisions": total,
        "approved_decisions": approved,
        "pending_decisions": pending,
        "active_members": active_members,
        "avg_consensus_rate": f"{int(float(avg_rate) + 0.5) if avg_rate is not None else 0}%",
        "last_updated": utcnow(),
    }
