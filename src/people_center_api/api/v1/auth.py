"""Authentication API endpoints.

POST /auth/register, POST /auth/login, GET /auth/me, GET /health, GET /info.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api import __version__
from people_center_api.core.config import Settings, get_settings
from people_center_api.core.dependencies import get_async_session, get_current_citizen
from people_center_api.models.citizen import Citizen
from people_center_api.schemas.auth import AuthData, InfoData, LoginRequest, RegisterRequest
from people_center_api.schemas.citizen import CitizenResponse
from people_center_api.schemas.common import SuccessResponse
from people_center_api.services import auth_service

router = APIRouter(tags=["auth"])


@router.get("/health", status_code=200)
async def health_check() -> dict:
    """Health check endpoint (no authentication required)."""
    return {"success": True, "status": "healthy"}


@router.get("/info", status_code=200)
async def info(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessResponse[InfoData]:
    """Return application name, version and environment."""
    return SuccessResponse(
        data=InfoData(name="Politikos People Center API", version=__version__, environment=settings.environment)
    )


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessResponse[AuthData]:
    """Register a citizen and return a token for the new account."""
    citizen = await auth_service.register_citizen(session, body, settings)
    return SuccessResponse(
        data=AuthData(citizen=CitizenResponse.model_validate(citizen), token=auth_service.issue_token(citizen, settings))
    )


@router.post("/auth/login")
async def login(
    body: LoginRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessResponse[AuthData]:
    """Authenticate with email and password."""
    citizen = await auth_service.authenticate_citizen(session, body.email, body.password)
    return SuccessResponse(
        data=AuthData(citizen=CitizenResponse.model_validate(citizen), token=auth_service.issue_token(citizen, settings))
    )


@router.get("/auth/me")
async def get_me(
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> SuccessResponse[CitizenResponse]:
    """Return the authenticated citizen's profile."""
    return SuccessResponse(data=CitizenResponse.model_validate(current_citizen))
