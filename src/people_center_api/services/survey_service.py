"""Survey service: creation, submissions and result aggregation.

Each citizen answers a survey at most once; the unique (survey, respondent)
constraint backs the explicit duplicate check against concurrent submits.
"""

import uuid
from typing import Any

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.errors import Conflict, NotFound, StateError
from people_center_api.lib.surveys import collect_answers, summarize_question
from people_center_api.models.base import utcnow
from people_center_api.models.citizen import Citizen
from people_center_api.models.survey import Survey, SurveyQuestion, SurveyResponse, SurveyStatus
from people_center_api.schemas.survey import AnswerItem, SurveyCreateRequest


def _is_blank(answer: Any) -> bool:
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    if isinstance(answer, (list, dict)):
        return len(answer) == 0
    return False


def _normalize_question_id(value: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return str(value).strip()


async def get_survey(session: AsyncSession, survey_id: uuid.UUID) -> Survey:
    """Fetch a survey with its questions.

    Raises:
        NotFound: If the survey does not exist.
    """
    result = await session.execute(
        select(Survey).where(Survey.id == survey_id).execution_options(populate_existing=True)
    )
    survey = result.scalar_one_or_none()
    if survey is None:
        raise NotFound("Survey not found")
    return survey


async def create_survey(session: AsyncSession, request: SurveyCreateRequest, admin: Citizen) -> Survey:
    survey = Survey(
        title=request.title.strip(),
        description=request.description.strip(),
        status=SurveyStatus.ACTIVE.value,
        created_by_id=admin.id,
    )
    for position, question in enumerate(request.questions):
        survey.questions.append(
            SurveyQuestion(
                position=position,
                question_text=question.question_text.strip(),
                question_type=question.question_type.value,
                options=question.options,
                required=question.required,
            )
        )
    session.add(survey)
    await session.commit()
    logger.info(f"Admin {admin.id} created survey {survey.id} with {len(request.questions)} questions")
    return await get_survey(session, survey.id)


async def list_active_surveys(session: AsyncSession) -> list[Survey]:
    """Active surveys, newest first."""
    result = await session.execute(
        select(Survey).where(Survey.status == SurveyStatus.ACTIVE.value).order_by(Survey.created_at.desc())
    )
    return list(result.scalars().all())


async def submit_response(
    session: AsyncSession,
    survey_id: uuid.UUID,
    citizen: Citizen,
    answers: list[AnswerItem],
) -> SurveyResponse:
    """Record a citizen's answers to a survey.

    Checks run in order: survey exists, survey is active, every required
    question has a non-empty answer, no prior response by this citizen.

    Raises:
        NotFound: If the survey does not exist.
        StateError: ``SURVEY_CLOSED`` or ``MISSING_REQUIRED_ANSWERS``.
        Conflict: ``DUPLICATE_RESPONSE``.
    """
    survey = await get_survey(session, survey_id)
    if survey.status == SurveyStatus.CLOSED:
        raise StateError("This survey is closed", code="SURVEY_CLOSED")

    questions = {str(q.id): q for q in survey.questions}
    answered = {
        _normalize_question_id(item.question_id): item.answer for item in answers if not _is_blank(item.answer)
    }
    missing = [qid for qid, q in questions.items() if q.required and qid not in answered]
    if missing:
        raise StateError("Please answer all required questions", code="MISSING_REQUIRED_ANSWERS")

    existing = await session.execute(
        select(SurveyResponse.id).where(
            SurveyResponse.survey_id == survey_id,
            SurveyResponse.respondent_id == citizen.id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise Conflict("You have already responded to this survey", code="DUPLICATE_RESPONSE")

    response = SurveyResponse(
        survey_id=survey_id,
        respondent_id=citizen.id,
        # Answers to questions the survey does not have are dropped.
        answers=[{"questionId": qid, "answer": answer} for qid, answer in answered.items() if qid in questions],
    )
    session.add(response)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise Conflict("You have already responded to this survey", code="DUPLICATE_RESPONSE") from exc
    await session.refresh(response)
    logger.info(f"Citizen {citizen.id} responded to survey {survey_id}")
    return response


async def close_survey(session: AsyncSession, survey_id: uuid.UUID) -> Survey:
    """Close a survey for good.

    Raises:
        NotFound: If the survey does not exist.
        StateError: ``ALREADY_CLOSED``.
    """
    closed = await session.execute(
        update(Survey)
        .where(Survey.id == survey_id, Survey.status == SurveyStatus.ACTIVE.value)
        .values(status=SurveyStatus.CLOSED.value, closed_at=utcnow(), updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if closed.rowcount == 0:
        await session.rollback()
        await get_survey(session, survey_id)
        raise StateError("Survey is already closed", code="ALREADY_CLOSED")
    await session.commit()
    logger.info(f"Closed survey {survey_id}")
    return await get_survey(session, survey_id)


async def get_survey_results(session: AsyncSession, survey_id: uuid.UUID) -> dict[str, Any]:
    """Aggregate every response to a survey, question by question.

    Returns:
        ``{"survey", "total_responses", "results"}`` ready for
        ``SurveyResultsResponse``.
    """
    survey = await get_survey(session, survey_id)
    result = await session.execute(select(SurveyResponse.answers).where(SurveyResponse.survey_id == survey_id))
    answer_sets = [answers or [] for answers in result.scalars().all()]

    results = []
    for question in survey.questions:
        question_id = str(question.id)
        answers = collect_answers(answer_sets, question_id)
        results.append(
            {
                "question_id": question_id,
                "question_text": question.question_text,
                "question_type": question.question_type,
                "total_responses": len(answers),
                "answers": answers,
                "summary": summarize_question(question.question_type, answers, question.options or []),
            }
        )

    return {
        "survey": {"id": survey.id, "title": survey.title, "description": survey.description},
        "total_responses": len(answer_sets),
        "results": results,
    }
