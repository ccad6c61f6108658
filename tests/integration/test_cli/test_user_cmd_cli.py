"""Integration tests for the ``user`` CLI command group."""

from contextlib import ExitStack
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from people_center_api.cli.app import app
from people_center_api.core.config import Settings

runner = CliRunner()


def _patch_cli_deps(stack: ExitStack, settings: Settings) -> AsyncMock:
    """Patch settings and the database layer; returns the mock session."""
    mock_session = AsyncMock()
    mock_factory = MagicMock()
    mock_factory.return_value = MagicMock(
        __aenter__=AsyncMock(return_value=mock_session),
        __aexit__=AsyncMock(return_value=False),
    )
    stack.enter_context(patch("people_center_api.cli.app.get_settings", return_value=settings))
    stack.enter_context(patch("people_center_api.core.config.get_settings", return_value=settings))
    stack.enter_context(patch("people_center_api.core.database.init_engine"))
    stack.enter_context(patch("people_center_api.core.database.dispose_engine", new_callable=AsyncMock))
    stack.enter_context(patch("people_center_api.core.database.get_session_factory", return_value=mock_factory))
    return mock_session


def _citizen(email: str, *, name: str = "Test Citizen", is_admin: bool = False) -> MagicMock:
    citizen = MagicMock()
    citizen.email = email
    citizen.name = name
    citizen.is_admin = is_admin
    return citizen


class TestMakeAdmin:
    def test_promotes_citizen(self, settings: Settings) -> None:
        with ExitStack() as stack:
            session = _patch_cli_deps(stack, settings)
            citizen = _citizen("ada@example.com")
            stack.enter_context(
                patch(
                    "people_center_api.services.auth_service.get_citizen_by_email",
                    new_callable=AsyncMock,
                    return_value=citizen,
                )
            )
            result = runner.invoke(app, ["user", "make-admin", "ada@example.com"])

        assert result.exit_code == 0
        assert "is now an admin" in result.output
        assert citizen.role == "admin"
        session.commit.assert_awaited_once()

    def test_already_admin(self, settings: Settings) -> None:
        with ExitStack() as stack:
            session = _patch_cli_deps(stack, settings)
            stack.enter_context(
                patch(
                    "people_center_api.services.auth_service.get_citizen_by_email",
                    new_callable=AsyncMock,
                    return_value=_citizen("root@example.com", is_admin=True),
                )
            )
            result = runner.invoke(app, ["user", "make-admin", "root@example.com"])

        assert result.exit_code == 0
        assert "already an admin" in result.output
        session.commit.assert_not_awaited()

    def test_unknown_email(self, settings: Settings) -> None:
        with ExitStack() as stack:
            _patch_cli_deps(stack, settings)
            stack.enter_context(
                patch(
                    "people_center_api.services.auth_service.get_citizen_by_email",
                    new_callable=AsyncMock,
                    return_value=None,
                )
            )
            result = runner.invoke(app, ["user", "make-admin", "ghost@example.com"])

        assert result.exit_code == 1


class TestCleanupEmails:
    def test_dry_run_reports_only(self, settings: Settings) -> None:
        with ExitStack() as stack:
            _patch_cli_deps(stack, settings)
            stack.enter_context(
                patch(
                    "people_center_api.services.citizen_service.find_citizens_with_invalid_email",
                    new_callable=AsyncMock,
                    return_value=[_citizen("typo@gmial.com")],
                )
            )
            remove = stack.enter_context(
                patch("people_center_api.services.citizen_service.remove_citizen", new_callable=AsyncMock)
            )
            result = runner.invoke(app, ["user", "cleanup-emails"])

        assert result.exit_code == 0
        assert "typo@gmial.com" in result.output
        assert "Dry run" in result.output
        remove.assert_not_awaited()

    def test_apply_removes(self, settings: Settings) -> None:
        with ExitStack() as stack:
            _patch_cli_deps(stack, settings)
            stack.enter_context(
                patch(
                    "people_center_api.services.citizen_service.find_citizens_with_invalid_email",
                    new_callable=AsyncMock,
                    return_value=[_citizen("typo@gmial.com"), _citizen("bad@yahooo.com")],
                )
            )
            stack.enter_context(
                patch(
                    "people_center_api.services.citizen_service.remove_citizen",
                    new_callable=AsyncMock,
                    side_effect=[True, False],
                )
            )
            result = runner.invoke(app, ["user", "cleanup-emails", "--apply"])

        assert result.exit_code == 0
        assert "Removed 1 of 2" in result.output

    def test_nothing_to_clean(self, settings: Settings) -> None:
        with ExitStack() as stack:
            _patch_cli_deps(stack, settings)
            stack.enter_context(
                patch(
                    "people_center_api.services.citizen_service.find_citizens_with_invalid_email",
                    new_callable=AsyncMock,
                    return_value=[],
                )
            )
            result = runner.invoke(app, ["user", "cleanup-emails"])

        assert result.exit_code == 0
        assert "No invalid emails found" in result.output


class TestCreateCitizen:
    def test_rejects_unknown_role(self, settings: Settings) -> None:
        with ExitStack() as stack:
            _patch_cli_deps(stack, settings)
            result = runner.invoke(
                app,
                ["user", "create", "--name", "Ada", "--email", "ada@example.com", "--password", "password123", "--role", "root"],
            )

        assert result.exit_code == 1
