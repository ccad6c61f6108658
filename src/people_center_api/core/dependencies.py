"""FastAPI dependency injection for database sessions, auth, and access control.

Provides get_async_session, get_current_citizen, require_admin and the
ownership check used by self-only citizen endpoints.
"""

import uuid
from collections.abc import AsyncGenerator
from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.config import Settings, get_settings
from people_center_api.core.database import get_session_factory
from people_center_api.core.errors import AuthenticationFailed, PermissionDenied
from people_center_api.core.security import ACCESS_TOKEN_TYPE, decode_token
from people_center_api.models.citizen import Citizen

bearer_scheme = HTTPBearer(auto_error=False)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


async def get_current_citizen(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Citizen:
    """Decode the bearer token and return the authenticated citizen.

    Raises:
        AuthenticationFailed: ``NO_TOKEN`` without a bearer header,
            ``TOKEN_EXPIRED`` for an expired token, ``INVALID_TOKEN`` for
            anything else (bad signature, wrong type, unknown citizen).
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Not authorized, no token provided", code="NO_TOKEN")

    try:
        payload = decode_token(credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm)
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationFailed("Token expired, please log in again", code="TOKEN_EXPIRED") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationFailed("Not authorized, invalid token", code="INVALID_TOKEN") from exc

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationFailed("Not authorized, invalid token", code="INVALID_TOKEN")
    try:
        citizen_id = uuid.UUID(str(payload.get("sub")))
    except ValueError as exc:
        raise AuthenticationFailed("Not authorized, invalid token", code="INVALID_TOKEN") from exc

    citizen = await session.get(Citizen, citizen_id)
    if citizen is None:
        raise AuthenticationFailed("Not authorized, citizen not found", code="INVALID_TOKEN")
    return citizen


async def require_admin(
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> Citizen:
    """Dependency that only lets admins through."""
    if not current_citizen.is_admin:
        raise PermissionDenied("Access denied. Admin privileges required.", code="ADMIN_ONLY")
    return current_citizen


def ensure_self(current_citizen: Citizen, citizen_id: uuid.UUID) -> None:
    """Reject the request unless the caller is the citizen being modified.

    Raises:
        PermissionDenied: With code ``FORBIDDEN``.
    """
    if current_citizen.id != citizen_id:
        raise PermissionDenied("Not authorized to modify this profile")

