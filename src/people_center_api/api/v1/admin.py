"""Admin dashboard API endpoints (admin only)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.dependencies import get_async_session, require_admin
from people_center_api.models.citizen import Citizen
from people_center_api.schemas.admin import ActivityItem, DashboardResponse
from people_center_api.schemas.citizen import CitizenResponse, PaginatedCitizenResponse, RoleUpdateRequest
from people_center_api.schemas.common import PaginationMeta, SuccessResponse
from people_center_api.services import admin_service

admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/dashboard")
async def get_dashboard(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[DashboardResponse]:
    stats = await admin_service.get_dashboard_stats(session)
    return SuccessResponse(data=DashboardResponse.model_validate(stats))


@admin_router.get("/recent-activity")
async def get_recent_activity(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[list[ActivityItem]]:
    activity = await admin_service.get_recent_activity(session)
    return SuccessResponse(data=[ActivityItem.model_validate(a) for a in activity])


@admin_router.get("/citizens")
async def list_citizens(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
    search: Annotated[str | None, Query(max_length=200)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> SuccessResponse[PaginatedCitizenResponse]:
    citizens, total = await admin_service.list_citizens(session, search=search, page=page, limit=limit)
    return SuccessResponse(
        data=PaginatedCitizenResponse(
            citizens=[CitizenResponse.model_validate(c) for c in citizens],
            pagination=PaginationMeta.build(page=page, limit=limit, total=total),
        )
    )


@admin_router.put("/citizens/{citizen_id}/role")
async def update_citizen_role(
    citizen_id: uuid.UUID,
    body: RoleUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[CitizenResponse]:
    """Promote or demote a citizen; admins cannot change their own role."""
    citizen = await admin_service.update_citizen_role(session, citizen_id, body.role, admin)
    return SuccessResponse(data=CitizenResponse.model_validate(citizen))
