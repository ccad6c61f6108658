"""Unit tests for civic issues and their status history."""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from people_center_api.core.errors import Conflict, NotFound, ValidationFailed
from people_center_api.models.citizen import Citizen
from people_center_api.schemas.issue import IssueCreateRequest
from people_center_api.services import issue_service


def _issue_request(**overrides: object) -> IssueCreateRequest:
    values: dict[str, object] = {
        "title": "Broken streetlight",
        "description": "The light on 5th street has been out for a week",
        "category": "infrastructure",
        "location": {"address": "5th Street", "city": "Pokhara"},
    }
    values.update(overrides)
    return IssueCreateRequest.model_validate(values)


class TestCreateIssue:
    async def test_starts_open_with_one_history_entry(self, async_session: AsyncSession, citizen: Citizen) -> None:
        issue = await issue_service.create_issue(async_session, citizen, _issue_request())
        assert issue.status == "open"
        assert issue.submitted_by.id == citizen.id
        assert issue.location == {"address": "5th Street", "city": "Pokhara"}
        assert len(issue.status_history) == 1
        assert issue.status_history[0].status == "open"
        assert issue.image_url is None

    async def test_image_url_stored(self, async_session: AsyncSession, citizen: Citizen) -> None:
        issue = await issue_service.create_issue(
            async_session, citizen, _issue_request(), image_url="/uploads/issues/2026/10/abc.png"
        )
        assert issue.image_url == "/uploads/issues/2026/10/abc.png"


class TestGetIssue:
    async def test_missing(self, async_session: AsyncSession) -> None:
        with pytest.raises(NotFound):
            await issue_service.get_issue(async_session, uuid.uuid4())


class TestListIssues:
    async def test_filters_and_search(self, async_session: AsyncSession, citizen: Citizen, admin: Citizen) -> None:
        light = await issue_service.create_issue(async_session, citizen, _issue_request())
        await issue_service.create_issue(
            async_session,
            citizen,
            _issue_request(title="School roof leaking", description="Rain gets in", category="education"),
        )
        await issue_service.update_issue_status(async_session, light.id, "in-progress", None, admin)

        issues, total = await issue_service.list_issues(async_session, status="in-progress")
        assert total == 1
        assert issues[0].id == light.id

        issues, total = await issue_service.list_issues(async_session, category="education")
        assert [i.title for i in issues] == ["School roof leaking"]

        issues, total = await issue_service.list_issues(async_session, search="ROOF")
        assert total == 1

        issues, total = await issue_service.list_issues(async_session, search="100%")
        assert total == 0

    async def test_pagination(self, async_session: AsyncSession, citizen: Citizen) -> None:
        for n in range(3):
            await issue_service.create_issue(async_session, citizen, _issue_request(title=f"Issue {n}"))
        issues, total = await issue_service.list_issues(async_session, page=2, limit=2)
        assert total == 3
        assert len(issues) == 1


class TestUpdateIssueStatus:
    async def test_appends_history(self, async_session: AsyncSession, citizen: Citizen, admin: Citizen) -> None:
        issue = await issue_service.create_issue(async_session, citizen, _issue_request())
        updated = await issue_service.update_issue_status(async_session, issue.id, "in-progress", None, admin)

        assert updated.status == "in-progress"
        assert [e.status for e in updated.status_history] == ["open", "in-progress"]
        assert updated.status_history[-1].comment == "Status changed to in-progress"
        assert updated.status_history[-1].updated_by.id == admin.id

    async def test_resolve_requires_comment(self, async_session: AsyncSession, citizen: Citizen, admin: Citizen) -> None:
        issue = await issue_service.create_issue(async_session, citizen, _issue_request())
        with pytest.raises(ValidationFailed) as exc_info:
            await issue_service.update_issue_status(async_session, issue.id, "resolved", "   ", admin)
        assert exc_info.value.code == "COMMENT_REQUIRED"

        unchanged = await issue_service.get_issue(async_session, issue.id)
        assert unchanged.status == "open"
        assert len(unchanged.status_history) == 1

    async def test_resolve_with_comment(self, async_session: AsyncSession, citizen: Citizen, admin: Citizen) -> None:
        issue = await issue_service.create_issue(async_session, citizen, _issue_request())
        resolved = await issue_service.update_issue_status(async_session, issue.id, "resolved", "Bulb replaced", admin)
        assert resolved.status == "resolved"
        assert resolved.status_history[-1].comment == "Bulb replaced"

    async def test_any_transition_allowed(self, async_session: AsyncSession, citizen: Citizen, admin: Citizen) -> None:
        issue = await issue_service.create_issue(async_session, citizen, _issue_request())
        await issue_service.update_issue_status(async_session, issue.id, "closed", None, admin)
        reopened = await issue_service.update_issue_status(async_session, issue.id, "open", "Reopened", admin)
        assert reopened.status == "open"
        assert len(reopened.status_history) == 3

    @pytest.mark.parametrize("status", [None, "", "done", "Resolved"])
    async def test_invalid_status(self, async_session: AsyncSession, admin: Citizen, status: str | None) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            await issue_service.update_issue_status(async_session, uuid.uuid4(), status, "x", admin)
        assert exc_info.value.code == "INVALID_STATUS"

    async def test_missing_issue(self, async_session: AsyncSession, admin: Citizen) -> None:
        with pytest.raises(NotFound):
            await issue_service.update_issue_status(async_session, uuid.uuid4(), "closed", None, admin)

    async def test_sequence_collisions_give_up(
        self, async_session: AsyncSession, citizen: Citizen, admin: Citizen, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        issue = await issue_service.create_issue(async_session, citizen, _issue_request())
        issue_id = issue.id
        real_commit = async_session.commit
        attempts = 0

        async def _colliding_commit() -> None:
            nonlocal attempts
            attempts += 1
            raise IntegrityError("INSERT INTO issue_status_entries", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(async_session, "commit", _colliding_commit)
        with pytest.raises(Conflict) as exc_info:
            await issue_service.update_issue_status(async_session, issue_id, "closed", None, admin)
        monkeypatch.setattr(async_session, "commit", real_commit)

        assert exc_info.value.code == "CONCURRENT_UPDATE"
        assert attempts == 3
        assert len((await issue_service.get_issue(async_session, issue_id)).status_history) == 1


class TestAddIssueComment:
    async def test_keeps_status(self, async_session: AsyncSession, citizen: Citizen, admin: Citizen) -> None:
        issue = await issue_service.create_issue(async_session, citizen, _issue_request())
        commented = await issue_service.add_issue_comment(async_session, issue.id, "Crew scheduled", admin)
        assert commented.status == "open"
        assert commented.status_history[-1].comment == "Crew scheduled"
        assert commented.status_history[-1].status == "open"

    async def test_empty_comment(self, async_session: AsyncSession, admin: Citizen) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            await issue_service.add_issue_comment(async_session, uuid.uuid4(), "  ", admin)
        assert exc_info.value.code == "MISSING_COMMENT"
