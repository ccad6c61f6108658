"""Pydantic v2 schemas for the governance council and decisions."""

import uuid
from datetime import datetime

from pydantic import Field, model_validator

from people_center_api.models.governance import (
    CouncilRole,
    DecisionCategory,
    DecisionPriority,
    DecisionStage,
    DecisionStatus,
)
from people_center_api.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CouncilMemberResponse(CamelModel):
    id: uuid.UUID
    name: str
    role: str
    term: str
    photo: str | None = None
    bio: str = ""
    email: str = ""
    is_active: bool
    joined_date: datetime


class DecisionResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: str
    status: str
    stage: str
    proposed_by: str
    votes_for: int
    votes_against: int
    total_votes: int
    consensus_rate: int
    decision_date: datetime | None = None
    implementation_date: datetime | None = None
    category: str
    priority: str
    notes: str = ""
    created_at: datetime
    updated_at: datetime


class GovernanceMetricsResponse(CamelModel):
    total_decisions: int
    approved_decisions: int
    pending_decisions: int
    active_members: int
    avg_consensus_rate: str = Field(description='Mean consensus of voted decisions, e.g. "72%"')
    last_updated: datetime


# ---------------------------------------------------------------------------
# Write schemas (admin)
# ---------------------------------------------------------------------------


class CouncilMemberCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    role: CouncilRole
    term: str = Field(default="2024-2025", max_length=20)
    photo: str | None = Field(default=None, max_length=500)
    bio: str = ""
    email: str = ""


class CouncilMemberUpdateRequest(CamelModel):
    """All fields optional; only provided fields are updated."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    role: CouncilRole | None = None
    term: str | None = Field(default=None, max_length=20)
    photo: str | None = Field(default=None, max_length=500)
    bio: str | None = None
    email: str | None = None
    is_active: bool | None = None


class _VoteFields(CamelModel):
    votes_for: int | None = Field(default=None, ge=0)
    votes_against: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_vote_pair(self):  # noqa: ANN201
        if (self.votes_for is None) != (self.votes_against is None):
            msg = "votesFor and votesAgainst must be provided together"
            raise ValueError(msg)
        return self

    @property
    def has_votes(self) -> bool:
        return self.votes_for is not None and self.votes_against is not None


class DecisionCreateRequest(_VoteFields):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    proposed_by: str = Field(min_length=1, max_length=100)
    status: DecisionStatus = DecisionStatus.PROPOSED
    stage: DecisionStage = DecisionStage.DELIBERATION
    category: DecisionCategory = DecisionCategory.OTHER
    priority: DecisionPriority = DecisionPriority.MEDIUM
    notes: str = ""


class DecisionUpdateRequest(_VoteFields):
    """All fields optional; a vote pair re-derives status and consensus."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    proposed_by: str | None = Field(default=None, min_length=1, max_length=100)
    status: DecisionStatus | None = None
    stage: DecisionStage | None = None
    category: DecisionCategory | None = None
    priority: DecisionPriority | None = None
    notes: str | None = None
