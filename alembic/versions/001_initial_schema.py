"""Initial schema: citizens, issues, events, surveys and governance tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSON_TYPE = sa.JSON().with_variant(JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "citizens",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=True),
        sa.Column("last_name", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("gender", sa.String(20), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("location", JSON_TYPE, nullable=True),
        sa.Column("interests", JSON_TYPE, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_citizens_email", "citizens", ["email"], unique=True)

    op.create_table(
        "civic_issues",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("location", JSON_TYPE, nullable=False),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("submitted_by_id", sa.Uuid(), sa.ForeignKey("citizens.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_civic_issues_status_created", "civic_issues", ["status", "created_at"])
    op.create_index("ix_civic_issues_category", "civic_issues", ["category"])
    op.create_index("ix_civic_issues_submitted_by", "civic_issues", ["submitted_by_id"])

    op.create_table(
        "issue_status_entries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("issue_id", sa.Uuid(), sa.ForeignKey("civic_issues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("updated_by_id", sa.Uuid(), sa.ForeignKey("citizens.id"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("issue_id", "sequence", name="uq_issue_status_entry_sequence"),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("event_type", sa.String(20), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("time", sa.String(50), nullable=False),
        sa.Column("location", JSON_TYPE, nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("registered_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_by_id", sa.Uuid(), sa.ForeignKey("citizens.id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("capacity IS NULL OR capacity >= 1", name="ck_events_capacity_positive"),
        sa.CheckConstraint(
            "capacity IS NULL OR registered_count <= capacity",
            name="ck_events_registered_within_capacity",
        ),
    )
    op.create_index("ix_events_date_status", "events", ["date", "status"])

    op.create_table(
        "event_registrations",
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("citizen_id", sa.Uuid(), sa.ForeignKey("citizens.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "surveys",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by_id", sa.Uuid(), sa.ForeignKey("citizens.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_surveys_status_created", "surveys", ["status", "created_at"])

    op.create_table(
        "survey_questions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("survey_id", sa.Uuid(), sa.ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(20), nullable=False),
        sa.Column("options", JSON_TYPE, nullable=False),
        sa.Column("required", sa.Boolean(), nullable=False),
    )

    op.create_table(
        "survey_responses",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("survey_id", sa.Uuid(), sa.ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False),
        sa.Column("respondent_id", sa.Uuid(), sa.ForeignKey("citizens.id"), nullable=False),
        sa.Column("answers", JSON_TYPE, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("survey_id", "respondent_id", name="uq_survey_response_respondent"),
    )

    op.create_table(
        "council_members",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("term", sa.String(20), nullable=False),
        sa.Column("photo", sa.String(500), nullable=True),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("joined_date", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_council_members_active_role", "council_members", ["is_active", "role"])

    op.create_table(
        "governance_decisions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("stage", sa.String(20), nullable=False),
        sa.Column("proposed_by", sa.String(100), nullable=False),
        sa.Column("votes_for", sa.Integer(), nullable=False),
        sa.Column("votes_against", sa.Integer(), nullable=False),
        sa.Column("total_votes", sa.Integer(), nullable=False),
        sa.Column("consensus_rate", sa.Integer(), nullable=False),
        sa.Column("decision_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("implementation_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("consensus_rate BETWEEN 0 AND 100", name="ck_governance_consensus_rate_range"),
    )
    op.create_index("ix_governance_decisions_status", "governance_decisions", ["status"])


def downgrade() -> None:
    op.drop_table("governance_decisions")
    op.drop_table("council_members")
    op.drop_table("survey_responses")
    op.drop_table("survey_questions")
    op.drop_table("surveys")
    op.drop_table("event_registrations")
    op.drop_table("events")
    op.drop_table("issue_status_entries")
    op.drop_table("civic_issues")
    op.drop_table("citizens")
