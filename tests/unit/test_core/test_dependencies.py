"""Unit tests for authentication dependencies."""

import uuid

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.config import Settings
from people_center_api.core.dependencies import ensure_self, get_current_citizen, require_admin
from people_center_api.core.errors import AuthenticationFailed, PermissionDenied
from people_center_api.core.security import create_access_token
from people_center_api.models.citizen import Citizen


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _token(settings: Settings, subject: str, expires_minutes: int = 30) -> str:
    return create_access_token(
        subject, "someone@example.com", "citizen", settings.jwt_secret_key, expires_minutes=expires_minutes
    )


class TestGetCurrentCitizen:
    async def test_valid_token_returns_citizen(
        self, citizen: Citizen, async_session: AsyncSession, settings: Settings
    ) -> None:
        result = await get_current_citizen(_bearer(_token(settings, str(citizen.id))), async_session, settings)
        assert result.id == citizen.id

    async def test_missing_credentials(self, async_session: AsyncSession, settings: Settings) -> None:
        with pytest.raises(AuthenticationFailed) as exc_info:
            await get_current_citizen(None, async_session, settings)
        assert exc_info.value.code == "NO_TOKEN"

    async def test_expired_token(self, citizen: Citizen, async_session: AsyncSession, settings: Settings) -> None:
        token = _token(settings, str(citizen.id), expires_minutes=-5)
        with pytest.raises(AuthenticationFailed) as exc_info:
            await get_current_citizen(_bearer(token), async_session, settings)
        assert exc_info.value.code == "TOKEN_EXPIRED"

    async def test_garbage_token(self, async_session: AsyncSession, settings: Settings) -> None:
        with pytest.raises(AuthenticationFailed) as exc_info:
            await get_current_citizen(_bearer("not-a-jwt"), async_session, settings)
        assert exc_info.value.code == "INVALID_TOKEN"

    async def test_non_uuid_subject(self, async_session: AsyncSession, settings: Settings) -> None:
        with pytest.raises(AuthenticationFailed) as exc_info:
            await get_current_citizen(_bearer(_token(settings, "42")), async_session, settings)
        assert exc_info.value.code == "INVALID_TOKEN"

    async def test_unknown_citizen(self, async_session: AsyncSession, settings: Settings) -> None:
        with pytest.raises(AuthenticationFailed) as exc_info:
            await get_current_citizen(_bearer(_token(settings, str(uuid.uuid4()))), async_session, settings)
        assert exc_info.value.code == "INVALID_TOKEN"


class TestRequireAdmin:
    async def test_admin_passes(self, admin: Citizen) -> None:
        assert await require_admin(admin) is admin

    async def test_citizen_rejected(self, citizen: Citizen) -> None:
        with pytest.raises(PermissionDenied) as exc_info:
            await require_admin(citizen)
        assert exc_info.value.code == "ADMIN_ONLY"


class TestEnsureSelf:
    async def test_same_citizen(self, citizen: Citizen) -> None:
        ensure_self(citizen, citizen.id)

    async def test_other_citizen(self, citizen: Citizen) -> None:
        with pytest.raises(PermissionDenied) as exc_info:
            ensure_self(citizen, uuid.uuid4())
        assert exc_info.value.code == "FORBIDDEN"
