"""Civic issue API endpoints.

POST /issues accepts either a JSON body or a multipart form whose
``location`` field is a JSON string and whose optional ``image`` field is
the photo to attach.
"""

import json
import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from people_center_api.core.config import Settings, get_settings
from people_center_api.core.dependencies import get_async_session, get_current_citizen, require_admin
from people_center_api.core.errors import AppError, ValidationFailed
from people_center_api.lib.uploads import (
    LocalFileStorage,
    get_allowed_extensions_display,
    validate_image_content_type,
    validate_image_extension,
)
from people_center_api.models.citizen import Citizen
from people_center_api.models.civic_issue import IssueCategory, IssueStatus
from people_center_api.schemas.common import PaginationMeta, SuccessResponse
from people_center_api.schemas.issue import (
    IssueCommentRequest,
    IssueCreateRequest,
    IssueResponse,
    IssueStatusUpdateRequest,
    PaginatedIssueResponse,
)
from people_center_api.services import issue_service

issues_router = APIRouter(prefix="/issues", tags=["issues"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_storage(settings: Annotated[Settings, Depends(get_settings)]) -> LocalFileStorage:
    return LocalFileStorage(settings.upload_dir, prefix="issues")


def _validate_create_payload(payload: dict[str, Any]) -> IssueCreateRequest:
    try:
        return IssueCreateRequest.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


async def _read_image(image: UploadFile, settings: Settings) -> bytes:
    if not validate_image_content_type(image.content_type) or not validate_image_extension(image.filename):
        raise ValidationFailed(
            f"Only image files are allowed ({get_allowed_extensions_display()})", code="INVALID_FILE_TYPE"
        )
    content = await image.read()
    if len(content) > settings.max_upload_bytes:
        raise AppError(
            f"Image exceeds maximum size of {settings.max_upload_size_mb} MB",
            code="FILE_TOO_LARGE",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    return content


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@issues_router.get("")
async def list_all_issues(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    status_filter: Annotated[IssueStatus | None, Query(alias="status")] = None,
    category: Annotated[IssueCategory | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> SuccessResponse[PaginatedIssueResponse]:
    """List issues newest first with optional filters."""
    issues, total = await issue_service.list_issues(
        session,
        status=status_filter.value if status_filter else None,
        category=category.value if category else None,
        search=search,
        page=page,
        limit=limit,
    )
    return SuccessResponse(
        data=PaginatedIssueResponse(
            issues=[IssueResponse.model_validate(i) for i in issues],
            pagination=PaginationMeta.build(page=page, limit=limit, total=total),
        )
    )


@issues_router.get("/{issue_id}")
async def get_issue_detail(
    issue_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[IssueResponse]:
    issue = await issue_service.get_issue(session, issue_id)
    return SuccessResponse(data=IssueResponse.model_validate(issue))


# ---------------------------------------------------------------------------
# Citizen endpoints
# ---------------------------------------------------------------------------


@issues_router.post("", status_code=status.HTTP_201_CREATED)
async def create_issue_endpoint(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
    storage: Annotated[LocalFileStorage, Depends(_get_storage)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessResponse[IssueResponse]:
    """Report a civic issue, optionally with a photo."""
    image: UploadFile | None = None
    if request.headers.get("content-type", "").startswith("multipart/form-data"):
        form = await request.form()
        payload: dict[str, Any] = {k: v for k, v in form.items() if isinstance(v, str)}
        if isinstance(payload.get("location"), str):
            try:
                payload["location"] = json.loads(payload["location"])
            except json.JSONDecodeError as exc:
                raise ValidationFailed("Location must be valid JSON", code="INVALID_LOCATION") from exc
        uploaded = form.get("image")
        if isinstance(uploaded, UploadFile) and uploaded.filename:
            image = uploaded
    else:
        try:
            payload = await request.json()
        except json.JSONDecodeError as exc:
            raise ValidationFailed("Request body must be valid JSON") from exc
        if not isinstance(payload, dict):
            raise ValidationFailed("Request body must be a JSON object")

    body = _validate_create_payload(payload)

    image_url = None
    stored_path = None
    if image is not None:
        content = await _read_image(image, settings)
        stored_path = await storage.save(content, image.filename or "image")
        image_url = f"/uploads/{stored_path}"

    try:
        issue = await issue_service.create_issue(session, current_citizen, body, image_url=image_url)
    except Exception:
        if stored_path is not None:
            await storage.delete(stored_path)
            logger.warning(f"Removed orphaned upload {stored_path}")
        raise
    return SuccessResponse(data=IssueResponse.model_validate(issue))


# ---------------------------------------------------------------------------
# Admin endpoints
# ---------------------------------------------------------------------------


@issues_router.put("/{issue_id}/status")
async def update_issue_status_endpoint(
    issue_id: uuid.UUID,
    body: IssueStatusUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[IssueResponse]:
    """Change an issue's status; resolving requires a comment."""
    issue = await issue_service.update_issue_status(session, issue_id, body.status, body.comment, admin)
    return SuccessResponse(data=IssueResponse.model_validate(issue))


@issues_router.post("/{issue_id}/comments")
async def add_issue_comment_endpoint(
    issue_id: uuid.UUID,
    body: IssueCommentRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[IssueResponse]:
    issue = await issue_service.add_issue_comment(session, issue_id, body.comment, admin)
    return SuccessResponse(data=IssueResponse.model_validate(issue))
