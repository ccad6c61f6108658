"""Governance council roster and decision models."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from people_center_api.models.base import Base, TimestampMixin, UUIDMixin, utcnow


class CouncilRole(enum.StrEnum):
    """The six council seats."""

    WOMEN_REPRESENTATIVE = "Women Representative"
    YOUTH_MEMBER = "Youth Member"
    LOCAL_BUSINESS_LEADER = "Local Business Leader"
    NGO_ACADEMIC_REPRESENTATIVE = "NGO/Academic Representative"
    CIVIC_VOLUNTEER_LEAD = "Civic Volunteer Lead"
    PPC_COORDINATOR = "PPC Coordinator"


class DecisionStatus(enum.StrEnum):
    PROPOSED = "Proposed"
    IN_DELIBERATION = "In Deliberation"
    VOTING = "Voting"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    IMPLEMENTED = "Implemented"


class DecisionStage(enum.StrEnum):
    DELIBERATION = "Deliberation"
    CONSENSUS = "Consensus"
    DOCUMENTATION = "Documentation"
    IMPLEMENTATION = "Implementation"


class DecisionCategory(enum.StrEnum):
    POLICY = "Policy"
    BUDGET = "Budget"
    EVENT = "Event"
    PARTNERSHIP = "Partnership"
    INFRASTRUCTURE = "Infrastructure"
    OTHER = "Other"


class DecisionPriority(enum.StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class CouncilMember(Base, UUIDMixin, TimestampMixin):
    """A seat holder on the governance council.

    Members are never deleted; ``is_active`` is cleared instead so that
    historical references stay valid.
    """

    __tablename__ = "council_members"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    term: Mapped[str] = mapped_column(String(20), nullable=False, default="2024-2025")
    photo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    joined_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("ix_council_members_active_role", "is_active", "role"),)


class GovernanceDecision(Base, UUIDMixin, TimestampMixin):
    """A proposal under collective review.

    Attributes:
        consensus_rate: ``round(votes_for / total_votes * 100)``, 0 with no votes.
        decision_date: Stamped when a vote tally settles the status.
        implementation_date: Stamped on the move to ``Implemented``.
    """

    __tablename__ = "governance_decisions"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=DecisionStatus.PROPOSED.value)
    stage: Mapped[str] = mapped_column(String(20), nullable=False, default=DecisionStage.DELIBERATION.value)
    proposed_by: Mapped[str] = mapped_column(String(100), nullable=False)
    votes_for: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    votes_against: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    consensus_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    decision_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    implementation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default=DecisionCategory.OTHER.value)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=DecisionPriority.MEDIUM.value)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        CheckConstraint("consensus_rate BETWEEN 0 AND 100", name="ck_governance_consensus_rate_range"),
        Index("ix_governance_decisions_status", "status"),
    )
