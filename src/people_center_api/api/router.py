"""Root API router under ``api_prefix`` and middleware registration."""

from fastapi import APIRouter, FastAPI

from people_center_api.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware, setup_cors
from people_center_api.core.config import Settings
from people_center_api.schemas.common import ErrorResponse

# Documented on every route; the handlers in main.create_app produce this body.
_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Validation or state error"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
    403: {"model": ErrorResponse, "description": "Not allowed for this citizen"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Conflicts with existing state"},
}


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from people_center_api.api.v1.admin import admin_router
    from people_center_api.api.v1.auth import router as auth_router
    from people_center_api.api.v1.citizens import citizens_router
    from people_center_api.api.v1.events import events_router
    from people_center_api.api.v1.governance import governance_router
    from people_center_api.api.v1.issues import issues_router
    from people_center_api.api.v1.surveys import surveys_router

    root_router = APIRouter(prefix=settings.api_prefix, responses=_ERROR_RESPONSES)
    root_router.include_router(auth_router)
    root_router.include_router(citizens_router)
    root_router.include_router(issues_router)
    root_router.include_router(events_router)
    root_router.include_router(surveys_router)
    root_router.include_router(governance_router)
    root_router.include_router(admin_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app."""
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.rate_limit_per_minute,
        trusted_proxy_headers=settings.trusted_proxy_header_list,
        path_prefix=settings.api_prefix,
    )
