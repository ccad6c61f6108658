"""Civic issue model with an append-only status history."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from people_center_api.models.base import Base, JSONType, TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from people_center_api.models.citizen import Citizen


class IssueStatus(enum.StrEnum):
    """Issue lifecycle status."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class IssueCategory(enum.StrEnum):
    INFRASTRUCTURE = "infrastructure"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    ENVIRONMENT = "environment"
    PUBLIC_SAFETY = "public-safety"
    TRANSPORTATION = "transportation"
    HOUSING = "housing"
    OTHER = "other"


class CivicIssue(Base, UUIDMixin, TimestampMixin):
    """A civic problem reported by a citizen.

    Attributes:
        status: Current ``IssueStatus``; changed by admins only.
        location: Nested document; ``address`` is required.
        image_url: Public path of the uploaded image, if any.
        status_history: Audit trail, one entry per transition or comment.
    """

    __tablename__ = "civic_issues"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=IssueStatus.OPEN.value)
    location: Mapped[dict] = mapped_column(JSONType, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    submitted_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("citizens.id"), nullable=False)

    submitted_by: Mapped["Citizen"] = relationship(lazy="selectin")
    status_history: Mapped[list["IssueStatusEntry"]] = relationship(
        back_populates="issue",
        lazy="selectin",
        order_by="IssueStatusEntry.sequence",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_civic_issues_status_created", "status", "created_at"),
        Index("ix_civic_issues_category", "category"),
        Index("ix_civic_issues_submitted_by", "submitted_by_id"),
    )


class IssueStatusEntry(Base, UUIDMixin):
    """One immutable audit record on an issue.

    ``sequence`` is unique per issue, so two concurrent appends cannot
    both claim the same slot.
    """

    __tablename__ = "issue_status_entries"

    issue_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("civic_issues.id", ondelete="CASCADE"), nullable=False
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    updated_by_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("citizens.id"), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    issue: Mapped[CivicIssue] = relationship(back_populates="status_history")
    updated_by: Mapped["Citizen"] = relationship(lazy="selectin")

    __table_args__ = (UniqueConstraint("issue_id", "sequence", name="uq_issue_status_entry_sequence"),)
