"""Governance API endpoints.

Council, decisions and metrics are public; everything under /admin is
restricted to admins.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.config import Settings, get_settings
from people_center_api.core.dependencies import get_async_session, require_admin
from people_center_api.models.citizen import Citizen
from people_center_api.models.governance import DecisionStatus
from people_center_api.schemas.common import SuccessResponse
from people_center_api.schemas.governance import (
    CouncilMemberCreateRequest,
    CouncilMemberResponse,
    CouncilMemberUpdateRequest,
    DecisionCreateRequest,
    DecisionResponse,
    DecisionUpdateRequest,
    GovernanceMetricsResponse,
)
from people_center_api.services import governance_service

governance_router = APIRouter(prefix="/governance", tags=["governance"])


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@governance_router.get("/council")
async def list_council_members(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[list[CouncilMemberResponse]]:
    """Active council members ordered by role and name."""
    members = await governance_service.list_council(session)
    return SuccessResponse(data=[CouncilMemberResponse.model_validate(m) for m in members])


@governance_router.get("/decisions")
async def list_governance_decisions(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    status_filter: Annotated[DecisionStatus | None, Query(alias="status")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> SuccessResponse[list[DecisionResponse]]:
    decisions = await governance_service.list_decisions(
        session, status=status_filter.value if status_filter else None, limit=limit
    )
    return SuccessResponse(data=[DecisionResponse.model_validate(d) for d in decisions])


@governance_router.get("/metrics")
async def get_governance_metrics(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[GovernanceMetricsResponse]:
    metrics = await governance_service.get_metrics(session)
    return SuccessResponse(data=GovernanceMetricsResponse.model_validate(metrics))


# ---------------------------------------------------------------------------
# Admin council endpoints
# ---------------------------------------------------------------------------


@governance_router.get("/admin/council")
async def list_all_council_members(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[list[CouncilMemberResponse]]:
    """Every council member, active ones first."""
    members = await governance_service.list_council(session, include_inactive=True)
    return SuccessResponse(data=[CouncilMemberResponse.model_validate(m) for m in members])


@governance_router.post("/admin/council", status_code=status.HTTP_201_CREATED)
async def create_council_member(
    body: CouncilMemberCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[CouncilMemberResponse]:
    member = await governance_service.create_member(session, body)
    return SuccessResponse(data=CouncilMemberResponse.model_validate(member))


@governance_router.put("/admin/council/{member_id}")
async def update_council_member(
    member_id: uuid.UUID,
    body: CouncilMemberUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[CouncilMemberResponse]:
    member = await governance_service.update_member(session, member_id, body)
    return SuccessResponse(data=CouncilMemberResponse.model_validate(member))


@governance_router.delete("/admin/council/{member_id}")
async def deactivate_council_member(
    member_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[CouncilMemberResponse]:
    """Deactivate a council member; the record is kept."""
    member = await governance_service.deactivate_member(session, member_id)
    return SuccessResponse(data=CouncilMemberResponse.model_validate(member))


# ---------------------------------------------------------------------------
# Admin decision endpoints
# ---------------------------------------------------------------------------


@governance_router.get("/admin/decisions")
async def list_all_decisions(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[list[DecisionResponse]]:
    decisions = await governance_service.list_decisions(session)
    return SuccessResponse(data=[DecisionResponse.model_validate(d) for d in decisions])


@governance_router.post("/admin/decisions", status_code=status.HTTP_201_CREATED)
async def create_governance_decision(
    body: DecisionCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[DecisionResponse]:
    decision = await governance_service.create_decision(session, body, settings.consensus_threshold)
    return SuccessResponse(data=DecisionResponse.model_validate(decision))


@governance_router.put("/admin/decisions/{decision_id}")
async def update_governance_decision(
    decision_id: uuid.UUID,
    body: DecisionUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[DecisionResponse]:
    """Update a decision; ``votesFor``/``votesAgainst`` settle its status."""
    decision = await governance_service.update_decision(session, decision_id, body, settings.consensus_threshold)
    return SuccessResponse(data=DecisionResponse.model_validate(decision))
