"""Citizen profile API endpoints.

Reads are public; every PUT is limited to the citizen's own profile.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.config import Settings, get_settings
from people_center_api.core.dependencies import ensure_self, get_async_session, get_current_citizen
from people_center_api.models.citizen import Citizen
from people_center_api.schemas.citizen import (
    CitizenResponse,
    InterestsUpdateRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
)
from people_center_api.schemas.common import Location, MessageData, SuccessResponse
from people_center_api.schemas.issue import IssueResponse
from people_center_api.services import citizen_service

citizens_router = APIRouter(prefix="/citizens", tags=["citizens"])


@citizens_router.get("/{citizen_id}")
async def get_citizen_profile(
    citizen_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[CitizenResponse]:
    citizen = await citizen_service.get_citizen(session, citizen_id)
    return SuccessResponse(data=CitizenResponse.model_validate(citizen))


@citizens_router.get("/{citizen_id}/issues")
async def get_citizen_issues(
    citizen_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[list[IssueResponse]]:
    """Issues submitted by the citizen, newest first."""
    issues = await citizen_service.list_citizen_issues(session, citizen_id)
    return SuccessResponse(data=[IssueResponse.model_validate(i) for i in issues])


@citizens_router.put("/{citizen_id}")
async def update_citizen_profile(
    citizen_id: uuid.UUID,
    body: ProfileUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> SuccessResponse[CitizenResponse]:
    ensure_self(current_citizen, citizen_id)
    citizen = await citizen_service.update_profile(session, current_citizen, body)
    return SuccessResponse(data=CitizenResponse.model_validate(citizen))


@citizens_router.put("/{citizen_id}/password")
async def change_citizen_password(
    citizen_id: uuid.UUID,
    body: PasswordChangeRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessResponse[MessageData]:
    ensure_self(current_citizen, citizen_id)
    await citizen_service.change_password(
        session, current_citizen, body.current_password, body.new_password, settings
    )
    return SuccessResponse(data=MessageData(message="Password updated successfully"))


@citizens_router.put("/{citizen_id}/interests")
async def update_citizen_interests(
    citizen_id: uuid.UUID,
    body: InterestsUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> SuccessResponse[CitizenResponse]:
    ensure_self(current_citizen, citizen_id)
    citizen = await citizen_service.update_interests(session, current_citizen, body.interests)
    return SuccessResponse(data=CitizenResponse.model_validate(citizen))


@citizens_router.put("/{citizen_id}/location")
async def update_citizen_location(
    citizen_id: uuid.UUID,
    body: Location,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> SuccessResponse[CitizenResponse]:
    ensure_self(current_citizen, citizen_id)
    citizen = await citizen_service.update_location(session, current_citizen, body)
    return SuccessResponse(data=CitizenResponse.model_validate(citizen))
