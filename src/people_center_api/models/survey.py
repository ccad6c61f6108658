"""Survey, question and response models."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from people_center_api.models.base import Base, JSONType, TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from people_center_api.models.citizen import Citizen


class SurveyStatus(enum.StrEnum):
    """Survey status. ``closed`` is terminal."""

    ACTIVE = "active"
    CLOSED = "closed"


class QuestionType(enum.StrEnum):
    MULTIPLE_CHOICE = "multiple-choice"
    TEXT = "text"
    RATING = "rating"
    YES_NO = "yes-no"


class Survey(Base, UUIDMixin, TimestampMixin):
    """A questionnaire published by an admin."""

    __tablename__ = "surveys"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SurveyStatus.ACTIVE.value)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("citizens.id"), nullable=False)

    created_by: Mapped["Citizen"] = relationship(lazy="selectin")
    questions: Mapped[list["SurveyQuestion"]] = relationship(
        back_populates="survey",
        lazy="selectin",
        order_by="SurveyQuestion.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_surveys_status_created", "status", "created_at"),)


class SurveyQuestion(Base, UUIDMixin):
    """One question of a survey, kept in ``position`` order."""

    __tablename__ = "survey_questions"

    survey_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String(20), nullable=False)
    options: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    survey: Mapped[Survey] = relationship(back_populates="questions")


class SurveyResponse(Base, UUIDMixin):
    """One citizen's answers to one survey.

    Attributes:
        answers: List of ``{"questionId": str, "answer": str | int | float | list}``.
    """

    __tablename__ = "survey_responses"

    survey_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False)
    respondent_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("citizens.id"), nullable=False)
    answers: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    respondent: Mapped["Citizen"] = relationship(lazy="selectin")

    __table_args__ = (UniqueConstraint("survey_id", "respondent_id", name="uq_survey_response_respondent"),)
