"""Citizen registration, login and token issuance.

Password hashing is CPU bound, so it runs in the threadpool to keep the event
loop free under concurrent registrations and logins.
"""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from people_center_api.core.config import Settings
from people_center_api.core.errors import AuthenticationFailed, Conflict, ValidationFailed
from people_center_api.core.security import create_access_token, hash_password, verify_password
from people_center_api.lib.accounts import is_valid_email, normalize_email
from people_center_api.models.citizen import Citizen, CitizenRole
from people_center_api.schemas.auth import RegisterRequest

MIN_PASSWORD_LENGTH = 8

# Unknown emails are verified against this hash so both login failures cost one bcrypt check.
_dummy_hash: str | None = None


def _resolve_name(request: RegisterRequest) -> str | None:
    if request.name and request.name.strip():
        return request.name.strip()
    first = (request.first_name or "").strip()
    last = (request.last_name or "").strip()
    if first and last:
        return f"{first} {last}"
    return None


async def hash_password_async(password: str, settings: Settings) -> str:
    return await run_in_threadpool(hash_password, password, settings.bcrypt_rounds)


async def get_citizen_by_email(session: AsyncSession, email: str) -> Citizen | None:
    result = await session.execute(select(Citizen).where(Citizen.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def register_citizen(session: AsyncSession, request: RegisterRequest, settings: Settings) -> Citizen:
    """Create a citizen account.

    Checks run in a fixed order: missing email or password, email format,
    missing name, password length, then email uniqueness.

    Args:
        session: The database session.
        request: Registration data.
        settings: Application settings (bcrypt cost).

    Returns:
        The created Citizen.

    Raises:
        ValidationFailed: For missing or malformed fields.
        Conflict: ``DUPLICATE_EMAIL`` if the email is already registered.
    """
    if not request.email or not request.password:
        raise ValidationFailed("Please provide email and password", code="MISSING_FIELDS")
    if not is_valid_email(request.email):
        raise ValidationFailed("Please provide a valid email address", code="INVALID_EMAIL_FORMAT")
    name = _resolve_name(request)
    if name is None:
        raise ValidationFailed("Please provide your name", code="MISSING_NAME")
    if len(request.password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", code="INVALID_PASSWORD"
        )

    email = normalize_email(request.email)
    if await get_citizen_by_email(session, email) is not None:
        raise Conflict("A citizen with this email already exists", code="DUPLICATE_EMAIL")

    citizen = Citizen(
        name=name,
        first_name=request.first_name,
        last_name=request.last_name,
        email=email,
        hashed_password=await hash_password_async(request.password, settings),
        phone_number=request.phone_number,
        gender=request.gender.value if request.gender else "",
        role=CitizenRole.CITIZEN.value,
        location=request.location.model_dump(by_alias=True, exclude_none=True) if request.location else None,
        interests=[i.value for i in request.interests or []],
    )
    session.add(citizen)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise Conflict("A citizen with this email already exists", code="DUPLICATE_EMAIL") from exc
    await session.refresh(citizen)
    logger.info(f"Registered citizen {citizen.id}")
    return citizen


async def authenticate_citizen(session: AsyncSession, email: str | None, password: str | None) -> Citizen:
    """Authenticate a citizen by email and password.

    Unknown emails and wrong passwords fail identically.

    Raises:
        ValidationFailed: ``MISSING_FIELDS`` when either field is absent.
        AuthenticationFailed: ``INVALID_CREDENTIALS``.
    """
    if not email or not password:
        raise ValidationFailed("Please provide email and password", code="MISSING_FIELDS")

    global _dummy_hash  # noqa: PLW0603
    citizen = await get_citizen_by_email(session, email)
    if citizen is not None:
        hashed = citizen.hashed_password
    else:
        if _dummy_hash is None:
            _dummy_hash = await run_in_threadpool(hash_password, "unused-login-placeholder")
        hashed = _dummy_hash
    password_ok = await run_in_threadpool(verify_password, password, hashed)
    if citizen is None or not password_ok:
        logger.info("Failed login attempt")
        raise AuthenticationFailed("Invalid email or password", code="INVALID_CREDENTIALS")
    return citizen


def issue_token(citizen: Citizen, settings: Settings) -> str:
    """Sign an access token carrying the citizen's id, email and role."""
    return create_access_token(
        subject=str(citizen.id),
        email=citizen.email,
        role=citizen.role,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_access_token_expire_minutes,
    )
