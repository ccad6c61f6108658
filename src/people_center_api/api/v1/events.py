"""Community event API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.dependencies import get_async_session, get_current_citizen, require_admin
from people_center_api.models.citizen import Citizen
from people_center_api.schemas.common import CitizenSummary, SuccessResponse
from people_center_api.schemas.event import EventCreateRequest, EventDetailResponse, EventResponse, RegistrationResponse
from people_center_api.services import event_service

events_router = APIRouter(prefix="/events", tags=["events"])


@events_router.get("")
async def list_events(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[list[EventResponse]]:
    """Upcoming events, earliest first."""
    events = await event_service.list_upcoming_events(session)
    return SuccessResponse(data=[EventResponse.model_validate(e) for e in events])


@events_router.get("/{event_id}")
async def get_event_detail(
    event_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[EventDetailResponse]:
    event = await event_service.get_event(session, event_id)
    citizens = await event_service.list_registered_citizens(session, event_id)
    detail = EventDetailResponse.model_validate(event)
    detail.registered_citizens = [CitizenSummary.model_validate(c) for c in citizens]
    return SuccessResponse(data=detail)


@events_router.post("", status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    body: EventCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[EventResponse]:
    event = await event_service.create_event(session, body, admin)
    return SuccessResponse(data=EventResponse.model_validate(event))


@events_router.post("/{event_id}/register")
async def register_for_event_endpoint(
    event_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> SuccessResponse[RegistrationResponse]:
    """Claim a seat at the event for the caller."""
    event = await event_service.register_for_event(session, event_id, current_citizen)
    return SuccessResponse(
        data=RegistrationResponse(event_id=event.id, registered_count=event.registered_count, capacity=event.capacity)
    )


@events_router.delete("/{event_id}/register")
async def unregister_from_event_endpoint(
    event_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> SuccessResponse[RegistrationResponse]:
    event = await event_service.unregister_from_event(session, event_id, current_citizen)
    return SuccessResponse(
        data=RegistrationResponse(event_id=event.id, registered_count=event.registered_count, capacity=event.capacity)
    )
