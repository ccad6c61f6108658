"""Community event service.

Registration never reads then writes the seat count. A single conditional
UPDATE claims a seat only while the event is in the future and below
capacity, and the (event, citizen) primary key on ``event_registrations``
rejects a second seat for the same citizen. Both happen in one transaction,
so concurrent bursts cannot overfill an event.
"""

import uuid
from datetime import datetime

from loguru import logger
from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.errors import AppError, Conflict, NotFound, StateError, ValidationFailed
from people_center_api.models.base import as_utc, utcnow
from people_center_api.models.citizen import Citizen
from people_center_api.models.event import Event, EventRegistration, EventStatus
from people_center_api.schemas.event import EventCreateRequest


async def get_event(session: AsyncSession, event_id: uuid.UUID) -> Event:
    """Fetch an event by id.

    Raises:
        NotFound: If the event does not exist.
    """
    result = await session.execute(
        select(Event).where(Event.id == event_id).execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()
    if event is None:
        raise NotFound("Event not found")
    return event


async def list_registered_citizens(session: AsyncSession, event_id: uuid.UUID) -> list[Citizen]:
    """Citizens registered for an event, earliest registration first."""
    result = await session.execute(
        select(Citizen)
        .join(EventRegistration, EventRegistration.citizen_id == Citizen.id)
        .where(EventRegistration.event_id == event_id)
        .order_by(EventRegistration.registered_at)
    )
    return list(result.scalars().all())


async def create_event(session: AsyncSession, request: EventCreateRequest, admin: Citizen) -> Event:
    """Create an event.

    Raises:
        ValidationFailed: ``EVENT_DATE_PAST`` unless the date is in the future.
    """
    event_date = as_utc(request.date)
    if event_date <= utcnow():
        raise ValidationFailed("Event date must be in the future", code="EVENT_DATE_PAST")

    event = Event(
        title=request.title.strip(),
        description=request.description.strip(),
        event_type=request.event_type.value,
        date=event_date,
        time=request.time.strip(),
        location=request.location.model_dump(by_alias=True, exclude_none=True),
        capacity=request.capacity,
        registered_count=0,
        status=request.status.value,
        created_by_id=admin.id,
    )
    session.add(event)
    await session.commit()
    logger.info(f"Admin {admin.id} created event {event.id}")
    return await get_event(session, event.id)


async def list_upcoming_events(session: AsyncSession) -> list[Event]:
    """Upcoming events whose date has not passed, earliest first."""
    result = await session.execute(
        select(Event)
        .where(Event.status == EventStatus.UPCOMING.value, Event.date >= utcnow())
        .order_by(Event.date.asc())
    )
    return list(result.scalars().all())


async def _is_registered(session: AsyncSession, event_id: uuid.UUID, citizen_id: uuid.UUID) -> bool:
    result = await session.execute(
        select(EventRegistration.event_id).where(
            EventRegistration.event_id == event_id,
            EventRegistration.citizen_id == citizen_id,
        )
    )
    return result.first() is not None


async def _registration_failure(
    session: AsyncSession, event_id: uuid.UUID, citizen_id: uuid.UUID, now: datetime
) -> AppError:
    """Work out why a seat could not be claimed, in NOT_FOUND, EVENT_PAST, ALREADY_REGISTERED, EVENT_FULL order."""
    event = await get_event(session, event_id)
    if as_utc(event.date) < now:
        return StateError("Cannot register for past events", code="EVENT_PAST")
    if await _is_registered(session, event_id, citizen_id):
        return Conflict("You are already registered for this event", code="ALREADY_REGISTERED")
    return StateError("Event is at full capacity", code="EVENT_FULL")


async def register_for_event(session: AsyncSession, event_id: uuid.UUID, citizen: Citizen) -> Event:
    """Claim a seat at an event for a citizen.

    Raises:
        NotFound: If the event does not exist.
        StateError: ``EVENT_PAST`` or ``EVENT_FULL``.
        Conflict: ``ALREADY_REGISTERED``.
    """
    citizen_id = citizen.id
    now = utcnow()
    claimed = await session.execute(
        update(Event)
        .where(
            Event.id == event_id,
            Event.date >= now,
            or_(Event.capacity.is_(None), Event.registered_count < Event.capacity),
        )
        .values(registered_count=Event.registered_count + 1)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount == 0:
        await session.rollback()
        raise await _registration_failure(session, event_id, citizen_id, now)

    session.add(EventRegistration(event_id=event_id, citizen_id=citizen_id))
    try:
        await session.commit()
    except IntegrityError as exc:
        # The seat claimed above is released by the rollback.
        await session.rollback()
        raise Conflict("You are already registered for this event", code="ALREADY_REGISTERED") from exc

    logger.info(f"Citizen {citizen_id} registered for event {event_id}")
    return await get_event(session, event_id)


async def unregister_from_event(session: AsyncSession, event_id: uuid.UUID, citizen: Citizen) -> Event:
    """Release a citizen's seat at an event.

    Raises:
        NotFound: If the event does not exist.
        StateError: ``NOT_REGISTERED`` if the citizen holds no seat.
    """
    citizen_id = citizen.id
    await get_event(session, event_id)
    removed = await session.execute(
        delete(EventRegistration).where(
            EventRegistration.event_id == event_id,
            EventRegistration.citizen_id == citizen_id,
        )
    )
    if removed.rowcount == 0:
        await session.rollback()
        raise StateError("You are not registered for this event", code="NOT_REGISTERED")

    await session.execute(
        update(Event)
        .where(Event.id == event_id, Event.registered_count > 0)
        .values(registered_count=Event.registered_count - 1)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    logger.info(f"Citizen {citizen_id} unregistered from event {event_id}")
    return await get_event(session, event_id)
