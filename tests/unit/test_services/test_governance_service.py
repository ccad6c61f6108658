"""Unit tests for the governance council and decision workflow."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.errors import NotFound, StateError
from people_center_api.models.base import as_utc
from people_center_api.schemas.governance import (
    CouncilMemberCreateRequest,
    CouncilMemberUpdateRequest,
    DecisionCreateRequest,
    DecisionUpdateRequest,
)
from people_center_api.services import governance_service

THRESHOLD = 70


def _decision_request(**overrides: object) -> DecisionCreateRequest:
    values: dict[str, object] = {
        "title": "Adopt open budget",
        "description": "Publish the ward budget monthly",
        "proposedBy": "PPC Coordinator",
    }
    values.update(overrides)
    return DecisionCreateRequest.model_validate(values)


def _member_request(name: str, role: str) -> CouncilMemberCreateRequest:
    return CouncilMemberCreateRequest.model_validate({"name": name, "role": role, "email": f" {name}@Example.com "})


class TestCouncil:
    async def test_create_and_list_active(self, async_session: AsyncSession) -> None:
        youth = await governance_service.create_member(async_session, _member_request("Maya", "Youth Member"))
        await governance_service.create_member(async_session, _member_request("Hari", "Civic Volunteer Lead"))
        assert youth.email == "maya@example.com"
        assert youth.is_active

        await governance_service.deactivate_member(async_session, youth.id)

        active = await governance_service.list_council(async_session)
        assert [m.name for m in active] == ["Hari"]
        everyone = await governance_service.list_council(async_session, include_inactive=True)
        assert [m.name for m in everyone] == ["Hari", "Maya"]

    async def test_update_only_given_fields(self, async_session: AsyncSession) -> None:
        member = await governance_service.create_member(async_session, _member_request("Maya", "Youth Member"))
        updated = await governance_service.update_member(
            async_session, member.id, CouncilMemberUpdateRequest(bio="Student leader", role="PPC Coordinator")
        )
        assert updated.bio == "Student leader"
        assert updated.role == "PPC Coordinator"
        assert updated.name == "Maya"

    async def test_missing_member(self, async_session: AsyncSession) -> None:
        with pytest.raises(NotFound):
            await governance_service.deactivate_member(async_session, uuid.uuid4())


class TestCreateDecision:
    async def test_defaults(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        assert decision.status == "Proposed"
        assert decision.stage == "Deliberation"
        assert decision.total_votes == 0
        assert decision.consensus_rate == 0
        assert decision.decision_date is None

    async def test_votes_settle_status(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(
            async_session, _decision_request(votesFor=7, votesAgainst=3, status="Voting"), THRESHOLD
        )
        assert decision.status == "Approved"
        assert decision.consensus_rate == 70
        assert decision.decision_date is not None

    @pytest.mark.parametrize("status", ["Approved", "Rejected", "Implemented"])
    async def test_settled_status_without_votes_rejected(self, async_session: AsyncSession, status: str) -> None:
        with pytest.raises(StateError) as exc_info:
            await governance_service.create_decision(async_session, _decision_request(status=status), THRESHOLD)
        assert exc_info.value.code == "INVALID_TRANSITION"
        assert await governance_service.list_decisions(async_session) == []

    async def test_settled_status_with_zero_votes_rejected(self, async_session: AsyncSession) -> None:
        with pytest.raises(StateError):
            await governance_service.create_decision(
                async_session, _decision_request(status="Approved", votesFor=0, votesAgainst=0), THRESHOLD
            )

    async def test_pending_status_accepted(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(
            async_session, _decision_request(status="In Deliberation"), THRESHOLD
        )
        assert decision.status == "In Deliberation"
        assert decision.decision_date is None


class TestUpdateDecision:
    async def test_votes_approve(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        updated = await governance_service.update_decision(
            async_session, decision.id, DecisionUpdateRequest(votes_for=7, votes_against=3), THRESHOLD
        )
        assert updated.total_votes == 10
        assert updated.consensus_rate == 70
        assert updated.status == "Approved"
        assert updated.decision_date is not None

    async def test_votes_reject(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        updated = await governance_service.update_decision(
            async_session, decision.id, DecisionUpdateRequest(votes_for=6, votes_against=4), THRESHOLD
        )
        assert updated.consensus_rate == 60
        assert updated.status == "Rejected"

    async def test_same_tally_keeps_decision_date(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        request = DecisionUpdateRequest(votes_for=7, votes_against=3)
        first = await governance_service.update_decision(async_session, decision.id, request, THRESHOLD)
        first_date = as_utc(first.decision_date)

        second = await governance_service.update_decision(async_session, decision.id, request, THRESHOLD)
        assert as_utc(second.decision_date) == first_date
        assert second.status == "Approved"

    async def test_flipped_tally_moves_decision_date(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        first = await governance_service.update_decision(
            async_session, decision.id, DecisionUpdateRequest(votes_for=7, votes_against=3), THRESHOLD
        )
        first_date = as_utc(first.decision_date)
        second = await governance_service.update_decision(
            async_session, decision.id, DecisionUpdateRequest(votes_for=3, votes_against=7), THRESHOLD
        )
        assert second.status == "Rejected"
        assert as_utc(second.decision_date) >= first_date

    async def test_tally_overrides_manual_status(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        updated = await governance_service.update_decision(
            async_session,
            decision.id,
            DecisionUpdateRequest(status="Voting", votes_for=2, votes_against=8),
            THRESHOLD,
        )
        assert updated.status == "Rejected"

    async def test_manual_forward_path(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        updated = await governance_service.update_decision(
            async_session, decision.id, DecisionUpdateRequest(status="In Deliberation", notes="Town hall next"), THRESHOLD
        )
        assert updated.status == "In Deliberation"
        assert updated.notes == "Town hall next"

    async def test_manual_jump_rejected(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        with pytest.raises(StateError) as exc_info:
            await governance_service.update_decision(
                async_session, decision.id, DecisionUpdateRequest(status="Approved", title="Changed"), THRESHOLD
            )
        assert exc_info.value.code == "INVALID_TRANSITION"
        unchanged = await governance_service.get_decision(async_session, decision.id)
        assert unchanged.title == "Adopt open budget"

    async def test_implemented_stamps_date(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(
            async_session, _decision_request(votesFor=9, votesAgainst=1), THRESHOLD
        )
        implemented = await governance_service.update_decision(
            async_session, decision.id, DecisionUpdateRequest(status="Implemented"), THRESHOLD
        )
        assert implemented.status == "Implemented"
        assert implemented.implementation_date is not None

    async def test_same_tally_after_implemented_changes_nothing(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        decision_id = decision.id
        votes = DecisionUpdateRequest(votes_for=7, votes_against=3)
        approved = await governance_service.update_decision(async_session, decision_id, votes, THRESHOLD)
        decided_at = as_utc(approved.decision_date)
        await governance_service.update_decision(
            async_session, decision_id, DecisionUpdateRequest(status="Implemented"), THRESHOLD
        )

        again = await governance_service.update_decision(async_session, decision_id, votes, THRESHOLD)
        assert again.status == "Implemented"
        assert as_utc(again.decision_date) == decided_at

    async def test_new_tally_after_implemented_keeps_status(self, async_session: AsyncSession) -> None:
        decision = await governance_service.create_decision(
            async_session, _decision_request(votesFor=8, votesAgainst=2), THRESHOLD
        )
        decision_id = decision.id
        decided_at = as_utc(decision.decision_date)
        await governance_service.update_decision(
            async_session, decision_id, DecisionUpdateRequest(status="Implemented"), THRESHOLD
        )

        recount = await governance_service.update_decision(
            async_session, decision_id, DecisionUpdateRequest(votes_for=3, votes_against=7), THRESHOLD
        )
        assert recount.status == "Implemented"
        assert recount.consensus_rate == 30
        assert recount.total_votes == 10
        assert as_utc(recount.decision_date) == decided_at

    async def test_missing(self, async_session: AsyncSession) -> None:
        with pytest.raises(NotFound):
            await governance_service.update_decision(async_session, uuid.uuid4(), DecisionUpdateRequest(), THRESHOLD)


class TestListAndMetrics:
    async def test_list_filter_and_limit(self, async_session: AsyncSession) -> None:
        for n in range(3):
            await governance_service.create_decision(async_session, _decision_request(title=f"D{n}"), THRESHOLD)
        await governance_service.create_decision(
            async_session, _decision_request(title="Voted", votesFor=8, votesAgainst=2), THRESHOLD
        )
        assert len(await governance_service.list_decisions(async_session, limit=2)) == 2
        approved = await governance_service.list_decisions(async_session, status="Approved")
        assert [d.title for d in approved] == ["Voted"]

    async def test_metrics(self, async_session: AsyncSession) -> None:
        await governance_service.create_member(async_session, _member_request("Maya", "Youth Member"))
        await governance_service.create_decision(async_session, _decision_request(), THRESHOLD)
        await governance_service.create_decision(
            async_session, _decision_request(votesFor=7, votesAgainst=3), THRESHOLD
        )
        await governance_service.create_decision(
            async_session, _decision_request(votesFor=5, votesAgainst=3), THRESHOLD
        )

        metrics = await governance_service.get_metrics(async_session)
        assert metrics["total_decisions"] == 3
        assert metrics["approved_decisions"] == 1
        assert metrics["pending_decisions"] == 1
        assert metrics["active_members"] == 1
        # (70 + 63) / 2 = 66.5
        assert metrics["avg_consensus_rate"] == "67%"

    async def test_metrics_empty(self, async_session: AsyncSession) -> None:
        metrics = await governance_service.get_metrics(async_session)
        assert metrics["total_decisions"] == 0
        assert metrics["avg_consensus_rate"] == "0%"
