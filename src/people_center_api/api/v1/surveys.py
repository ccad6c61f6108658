"""Survey API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.dependencies import get_async_session, get_current_citizen, require_admin
from people_center_api.models.citizen import Citizen
from people_center_api.schemas.common import SuccessResponse
from people_center_api.schemas.survey import (
    SubmissionRequest,
    SubmissionResponse,
    SurveyCreateRequest,
    SurveyDetailResponse,
    SurveyResultsResponse,
)
from people_center_api.services import survey_service

surveys_router = APIRouter(prefix="/surveys", tags=["surveys"])


@surveys_router.get("")
async def list_surveys(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[list[SurveyDetailResponse]]:
    """Active surveys, newest first."""
    surveys = await survey_service.list_active_surveys(session)
    return SuccessResponse(data=[SurveyDetailResponse.model_validate(s) for s in surveys])


@surveys_router.get("/{survey_id}")
async def get_survey_detail(
    survey_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> SuccessResponse[SurveyDetailResponse]:
    survey = await survey_service.get_survey(session, survey_id)
    return SuccessResponse(data=SurveyDetailResponse.model_validate(survey))


@surveys_router.post("", status_code=status.HTTP_201_CREATED)
async def create_survey_endpoint(
    body: SurveyCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[SurveyDetailResponse]:
    survey = await survey_service.create_survey(session, body, admin)
    return SuccessResponse(data=SurveyDetailResponse.model_validate(survey))


@surveys_router.post("/{survey_id}/responses", status_code=status.HTTP_201_CREATED)
async def submit_survey_response(
    survey_id: uuid.UUID,
    body: SubmissionRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_citizen: Annotated[Citizen, Depends(get_current_citizen)],
) -> SuccessResponse[SubmissionResponse]:
    """Submit the caller's answers; one response per citizen per survey."""
    response = await survey_service.submit_response(session, survey_id, current_citizen, body.answers)
    return SuccessResponse(data=SubmissionResponse.model_validate(response))


@surveys_router.put("/{survey_id}/close")
async def close_survey_endpoint(
    survey_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[SurveyDetailResponse]:
    survey = await survey_service.close_survey(session, survey_id)
    return SuccessResponse(data=SurveyDetailResponse.model_validate(survey))


@surveys_router.get("/{survey_id}/results")
async def get_survey_results_endpoint(
    survey_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _admin: Annotated[Citizen, Depends(require_admin)],
) -> SuccessResponse[SurveyResultsResponse]:
    """Per-question aggregates over every response."""
    results = await survey_service.get_survey_results(session, survey_id)
    return SuccessResponse(data=SurveyResultsResponse.model_validate(results))
