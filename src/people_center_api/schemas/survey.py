"""Pydantic v2 schemas for surveys, submissions and aggregated results."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from people_center_api.models.survey import QuestionType
from people_center_api.schemas.common import CamelModel, CitizenSummary

# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class QuestionResponse(CamelModel):
    id: uuid.UUID
    question_text: str
    question_type: str
    options: list[str] = Field(default_factory=list)
    required: bool


class SurveyDetailResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: str
    status: str
    questions: list[QuestionResponse]
    created_by: CitizenSummary
    closed_at: datetime | None = None
    created_at: datetime


class SubmissionResponse(CamelModel):
    id: uuid.UUID
    survey_id: uuid.UUID
    respondent_id: uuid.UUID
    answers: list[dict[str, Any]]
    submitted_at: datetime


class SurveyBrief(CamelModel):
    id: uuid.UUID
    title: str
    description: str


class QuestionResult(CamelModel):
    question_id: str
    question_text: str
    question_type: str
    total_responses: int
    answers: list[Any]
    summary: dict[str, Any]


class SurveyResultsResponse(CamelModel):
    survey: SurveyBrief
    total_responses: int
    results: list[QuestionResult]


# ---------------------------------------------------------------------------
# Write schemas
# ---------------------------------------------------------------------------


class QuestionCreateRequest(CamelModel):
    question_text: str = Field(min_length=1)
    question_type: QuestionType
    options: list[str] = Field(default_factory=list)
    required: bool = True

    @model_validator(mode="after")
    def check_options(self) -> "QuestionCreateRequest":
        # Blank and repeated options are dropped before counting.
        self.options = list(dict.fromkeys(o.strip() for o in self.options if o.strip()))
        if self.question_type == QuestionType.MULTIPLE_CHOICE and len(self.options) < 2:
            msg = "Multiple-choice questions need at least two distinct options"
            raise ValueError(msg)
        return self


class SurveyCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    questions: list[QuestionCreateRequest] = Field(min_length=1)


class AnswerItem(CamelModel):
    question_id: str
    answer: Any = None


class SubmissionRequest(CamelModel):
    answers: list[AnswerItem] = Field(default_factory=list)
