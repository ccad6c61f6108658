"""Unit tests for registration and login."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.config import Settings
from people_center_api.core.errors import AuthenticationFailed, Conflict, ValidationFailed
from people_center_api.core.security import decode_token, verify_password
from people_center_api.models.citizen import Citizen
from people_center_api.schemas.auth import RegisterRequest
from people_center_api.services import auth_service


def _request(**overrides: object) -> RegisterRequest:
    values: dict[str, object] = {"email": "new@example.com", "password": "longenough", "name": "New Citizen"}
    values.update(overrides)
    return RegisterRequest.model_validate(values)


class TestRegisterCitizen:
    async def test_creates_citizen(self, async_session: AsyncSession, settings: Settings) -> None:
        citizen = await auth_service.register_citizen(
            async_session,
            _request(email="  New.Person@Example.com ", interests=["education", "housing"]),
            settings,
        )
        assert citizen.email == "new.person@example.com"
        assert citizen.role == "citizen"
        assert citizen.interests == ["education", "housing"]
        assert citizen.hashed_password != "longenough"
        assert verify_password("longenough", citizen.hashed_password)

    async def test_name_from_first_and_last(self, async_session: AsyncSession, settings: Settings) -> None:
        citizen = await auth_service.register_citizen(
            async_session, _request(name=None, first_name="Sita", last_name="Rai"), settings
        )
        assert citizen.name == "Sita Rai"

    @pytest.mark.parametrize(
        ("overrides", "code"),
        [
            ({"email": None}, "MISSING_FIELDS"),
            ({"password": ""}, "MISSING_FIELDS"),
            ({"email": "not-an-email"}, "INVALID_EMAIL_FORMAT"),
            ({"email": "someone@gmial.com"}, "INVALID_EMAIL_FORMAT"),
            ({"name": None}, "MISSING_NAME"),
            ({"name": None, "first_name": "Only"}, "MISSING_NAME"),
            ({"password": "short"}, "INVALID_PASSWORD"),
        ],
    )
    async def test_validation_errors(
        self, async_session: AsyncSession, settings: Settings, overrides: dict, code: str
    ) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            await auth_service.register_citizen(async_session, _request(**overrides), settings)
        assert exc_info.value.code == code

    async def test_checks_run_in_order(self, async_session: AsyncSession, settings: Settings) -> None:
        # Bad email wins over missing name and short password.
        with pytest.raises(ValidationFailed) as exc_info:
            await auth_service.register_citizen(
                async_session, _request(email="bad", name=None, password="x"), settings
            )
        assert exc_info.value.code == "INVALID_EMAIL_FORMAT"

    async def test_duplicate_email(self, async_session: AsyncSession, settings: Settings, citizen: Citizen) -> None:
        with pytest.raises(Conflict) as exc_info:
            await auth_service.register_citizen(async_session, _request(email="CITIZEN@example.com"), settings)
        assert exc_info.value.code == "DUPLICATE_EMAIL"
        assert exc_info.value.status_code == 409


class TestAuthenticateCitizen:
    async def test_valid_credentials(self, async_session: AsyncSession, citizen: Citizen) -> None:
        result = await auth_service.authenticate_citizen(async_session, "Citizen@Example.com", "password123")
        assert result.id == citizen.id

    async def test_wrong_password(self, async_session: AsyncSession, citizen: Citizen) -> None:
        with pytest.raises(AuthenticationFailed) as exc_info:
            await auth_service.authenticate_citizen(async_session, citizen.email, "wrong-password")
        assert exc_info.value.code == "INVALID_CREDENTIALS"

    async def test_unknown_email_fails_identically(self, async_session: AsyncSession, citizen: Citizen) -> None:
        with pytest.raises(AuthenticationFailed) as unknown:
            await auth_service.authenticate_citizen(async_session, "nobody@example.com", "password123")
        with pytest.raises(AuthenticationFailed) as wrong:
            await auth_service.authenticate_citizen(async_session, citizen.email, "wrong-password")
        assert unknown.value.code == wrong.value.code
        assert unknown.value.message == wrong.value.message
        assert unknown.value.status_code == wrong.value.status_code == 401

    @pytest.mark.parametrize(("email", "password"), [(None, "password123"), ("a@example.com", None), ("", "")])
    async def test_missing_fields(self, async_session: AsyncSession, email: str | None, password: str | None) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            await auth_service.authenticate_citizen(async_session, email, password)
        assert exc_info.value.code == "MISSING_FIELDS"


class TestIssueToken:
    async def test_token_claims(self, citizen: Citizen, settings: Settings) -> None:
        payload = decode_token(auth_service.issue_token(citizen, settings), settings.jwt_secret_key)
        assert payload["sub"] == str(citizen.id)
        assert payload["email"] == citizen.email
        assert payload["role"] == "citizen"
