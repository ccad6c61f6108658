"""Citizen profile service.

Every mutation here is self-only; the route layer checks ownership with
``ensure_self`` before calling in.
"""

import uuid

from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from people_center_api.core.config import Settings
from people_center_api.core.errors import AuthenticationFailed, Conflict, NotFound, ValidationFailed
from people_center_api.core.security import verify_password
from people_center_api.lib.accounts import is_valid_email, normalize_email
from people_center_api.models.citizen import Citizen
from people_center_api.models.civic_issue import CivicIssue
from people_center_api.models.event import Event, EventRegistration
from people_center_api.schemas.citizen import ProfileUpdateRequest
from people_center_api.schemas.common import Location
from people_center_api.services.auth_service import MIN_PASSWORD_LENGTH, hash_password_async

_UPDATABLE_PROFILE_FIELDS: frozenset[str] = frozenset(
    {"name", "first_name", "last_name", "email", "phone_number", "gender"}
)


async def get_citizen(session: AsyncSession, citizen_id: uuid.UUID) -> Citizen:
    """Fetch a citizen by id.

    Raises:
        NotFound: If no such citizen exists.
    """
    citizen = await session.get(Citizen, citizen_id)
    if citizen is None:
        raise NotFound("Citizen not found")
    return citizen


async def list_citizen_issues(session: AsyncSession, citizen_id: uuid.UUID) -> list[CivicIssue]:
    """Issues submitted by a citizen, newest first."""
    await get_citizen(session, citizen_id)
    result = await session.execute(
        select(CivicIssue).where(CivicIssue.submitted_by_id == citizen_id).order_by(CivicIssue.created_at.desc())
    )
    return list(result.scalars().all())


async def update_profile(session: AsyncSession, citizen: Citizen, request: ProfileUpdateRequest) -> Citizen:
    """Apply a partial profile update.

    Raises:
        ValidationFailed: ``INVALID_EMAIL_FORMAT`` for a bad new email.
        Conflict: ``EMAIL_IN_USE`` if another citizen has the email.
    """
    updates = request.model_dump(exclude_unset=True)
    if updates.get("email") is not None:
        if not is_valid_email(updates["email"]):
            raise ValidationFailed("Please provide a valid email address", code="INVALID_EMAIL_FORMAT")
        email = normalize_email(updates["email"])
        taken = await session.execute(select(Citizen.id).where(Citizen.email == email, Citizen.id != citizen.id))
        if taken.scalar_one_or_none() is not None:
            raise Conflict("Email is already in use", code="EMAIL_IN_USE")
        updates["email"] = email
    if updates.get("gender") is not None:
        updates["gender"] = updates["gender"].value

    for field, value in updates.items():
        if field in _UPDATABLE_PROFILE_FIELDS and value is not None:
            setattr(citizen, field, value.strip() if isinstance(value, str) and field == "name" else value)

    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise Conflict("Email is already in use", code="EMAIL_IN_USE") from exc
    await session.refresh(citizen)
    logger.info(f"Updated profile for citizen {citizen.id}")
    return citizen


async def change_password(
    session: AsyncSession,
    citizen: Citizen,
    current_password: str | None,
    new_password: str | None,
    settings: Settings,
) -> None:
    """Replace a citizen's password after verifying the current one.

    Raises:
        ValidationFailed: ``MISSING_FIELDS`` or ``INVALID_PASSWORD`` (too short).
        AuthenticationFailed: ``INVALID_PASSWORD`` if the current password is wrong.
    """
    if not current_password or not new_password:
        raise ValidationFailed("Please provide current and new password", code="MISSING_FIELDS")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", code="INVALID_PASSWORD"
        )
    if not await run_in_threadpool(verify_password, current_password, citizen.hashed_password):
        raise AuthenticationFailed("Current password is incorrect", code="INVALID_PASSWORD")

    citizen.hashed_password = await hash_password_async(new_password, settings)
    await session.commit()
    logger.info(f"Password changed for citizen {citizen.id}")


async def update_interests(session: AsyncSession, citizen: Citizen, interests: list[str]) -> Citizen:
    # Order kept, duplicates dropped.
    citizen.interests = list(dict.fromkeys(str(i) for i in interests))
    await session.commit()
    await session.refresh(citizen)
    return citizen


async def update_location(session: AsyncSession, citizen: Citizen, location: Location) -> Citizen:
    citizen.location = location.model_dump(by_alias=True, exclude_none=True)
    await session.commit()
    await session.refresh(citizen)
    return citizen


# ---------------------------------------------------------------------------
# Maintenance (CLI)
# ---------------------------------------------------------------------------


async def list_all_citizens(session: AsyncSession) -> list[Citizen]:
    result = await session.execute(select(Citizen).order_by(Citizen.created_at))
    return list(result.scalars().all())


async def find_citizens_with_invalid_email(session: AsyncSession) -> list[Citizen]:
    """Citizens whose stored email fails the format or domain-typo check."""
    return [c for c in await list_all_citizens(session) if not is_valid_email(c.email)]


async def remove_citizen(session: AsyncSession, citizen: Citizen) -> bool:
    """Hard-delete a citizen record.

    Returns:
        False if the citizen still owns issues, events or surveys and was kept.
    """
    citizen_id = citizen.id
    registered = await session.execute(
        select(EventRegistration.event_id).where(EventRegistration.citizen_id == citizen_id)
    )
    event_ids = list(registered.scalars().all())
    if event_ids:
        # Give the seats back before the registrations cascade away.
        await session.execute(
            update(Event)
            .where(Event.id.in_(event_ids), Event.registered_count > 0)
            .values(registered_count=Event.registered_count - 1)
            .execution_options(synchronize_session=False)
        )
        await session.execute(delete(EventRegistration).where(EventRegistration.citizen_id == citizen_id))
    await session.delete(citizen)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning(f"Citizen {citizen_id} is still referenced, not removed")
        return False
    logger.info(f"Removed citizen {citizen_id}")
    return True
