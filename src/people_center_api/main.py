"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers that
produce the ``{"success": false, "error": {...}}`` envelope, the uploads
static mount, and OpenAPI metadata.
"""

import traceback
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from people_center_api import __version__
from people_center_api.core.config import Settings, get_settings
from people_center_api.core.database import dispose_engine, init_engine
from people_center_api.core.errors import AppError
from people_center_api.core.logging import setup_logging

_HTTP_ERROR_CODES: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "INVALID_TOKEN",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def error_response(status_code: int, message: str, code: str, **extra: Any) -> JSONResponse:
    """Build the standard error envelope."""
    error: dict[str, Any] = {"message": message, "code": code}
    error.update(extra)
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    logger.info(f"People Center API {__version__} started ({settings.environment})")

    yield

    await dispose_engine()


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Translate every failure into the error envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")),
                "message": err.get("msg", "Invalid value"),
            }
            for err in errors
        ]
        if errors and all(err.get("loc", ("",))[0] == "path" for err in errors):
            return error_response(status.HTTP_400_BAD_REQUEST, "Invalid ID format", "INVALID_ID", details=details)
        message = details[0]["message"] if len(details) == 1 else "Validation failed"
        return error_response(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR", details=details)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = f"Route {request.url.path} not found"
        return error_response(exc.status_code, message, code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        if settings.is_development:
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                str(exc) or "Something went wrong",
                "SERVER_ERROR",
                type=type(exc).__name__,
                stack=traceback.format_exception(exc),
            )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong", "SERVER_ERROR")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Politikos People Center API",
        description="Civic engagement platform: issues, events, surveys and governance",
        version=__version__,
        lifespan=lifespan,
    )

    register_exception_handlers(app, settings)

    # Register middleware and routers
    from people_center_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    @app.get("/health", tags=["health"])
    async def root_health() -> dict:
        return {"success": True, "status": "healthy"}

    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    return app
