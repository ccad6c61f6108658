"""Shared test fixtures for async database, sessions, HTTP client, and auth tokens."""

import uuid
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from people_center_api.core.config import Settings, get_settings
from people_center_api.core.database import enable_sqlite_pragmas
from people_center_api.core.dependencies import get_async_session
from people_center_api.core.security import create_access_token, hash_password
from people_center_api.models import Base
from people_center_api.models.citizen import Citizen, CitizenRole

TEST_PASSWORD = "password123"
# Cheapest bcrypt cost so hashing stays fast in tests.
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key-that-is-at-least-32-characters-long",
        jwt_algorithm="HS256",
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        upload_dir=str(tmp_path / "uploads"),
        environment="test",
    )  # type: ignore[call-arg]


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine with all tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)
    enable_sqlite_pragmas(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Per-test async session."""
    async with session_factory() as session:
        yield session


async def _insert_citizen(
    session: AsyncSession,
    *,
    email: str,
    name: str = "Test Citizen",
    role: str = CitizenRole.CITIZEN.value,
    password: str = TEST_PASSWORD,
) -> Citizen:
    """Insert a citizen directly, bypassing registration checks."""
    citizen = Citizen(
        id=uuid.uuid4(),
        name=name,
        email=email,
        hashed_password=hash_password(password, rounds=TEST_BCRYPT_ROUNDS),
        role=role,
        interests=[],
    )
    session.add(citizen)
    await session.commit()
    await session.refresh(citizen)
    return citizen


@pytest.fixture
async def citizen(async_session: AsyncSession) -> Citizen:
    return await _insert_citizen(async_session, email="citizen@example.com", name="Ada Citizen")


@pytest.fixture
async def other_citizen(async_session: AsyncSession) -> Citizen:
    return await _insert_citizen(async_session, email="other@example.com", name="Ben Other")


@pytest.fixture
async def admin(async_session: AsyncSession) -> Citizen:
    return await _insert_citizen(async_session, email="admin@example.com", name="Alex Admin", role=CitizenRole.ADMIN.value)


def _token_for(citizen: Citizen, settings: Settings, expires_minutes: int = 30) -> str:
    return create_access_token(
        subject=str(citizen.id),
        email=citizen.email,
        role=citizen.role,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_minutes=expires_minutes,
    )


@pytest.fixture
def citizen_headers(citizen: Citizen, settings: Settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {_token_for(citizen, settings)}"}


@pytest.fixture
def other_headers(other_citizen: Citizen, settings: Settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {_token_for(other_citizen, settings)}"}


@pytest.fixture
def admin_headers(admin: Citizen, settings: Settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {_token_for(admin, settings)}"}


@pytest.fixture
def app(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> FastAPI:
    """The real application wired to the in-memory database."""
    from people_center_api import main

    monkeypatch.setattr(main, "get_settings", lambda: settings)
    application = main.create_app()

    async def _session_override() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_async_session] = _session_override
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as client:
        yield client


@pytest.fixture
def citizen_factory(async_session: AsyncSession):  # noqa: ANN201
    """Async factory inserting extra citizens: ``await citizen_factory(email=...)``."""

    async def _factory(**kwargs: str) -> Citizen:
        return await _insert_citizen(async_session, **kwargs)

    return _factory


@pytest.fixture
def auth_headers(settings: Settings):  # noqa: ANN201
    """Build an ``Authorization`` header for any citizen."""

    def _headers(citizen: Citizen, expires_minutes: int = 30) -> dict[str, str]:
        return {"Authorization": f"Bearer {_token_for(citizen, settings, expires_minutes)}"}

    return _headers
