"""ORM model registry: import all models so Alembic autogenerate discovers them."""

from people_center_api.models.base import Base
from people_center_api.models.citizen import Citizen
from people_center_api.models.civic_issue import CivicIssue, IssueStatusEntry
from people_center_api.models.event import Event, EventRegistration
from people_center_api.models.governance import CouncilMember, GovernanceDecision
from people_center_api.models.survey import Survey, SurveyQuestion, SurveyResponse

__all__ = [
    "Base",
    "Citizen",
    "CivicIssue",
    "CouncilMember",
    "Event",
    "EventRegistration",
    "GovernanceDecision",
    "IssueStatusEntry",
    "Survey",
    "SurveyQuestion",
    "SurveyResponse",
]
