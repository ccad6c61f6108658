"""Citizen account maintenance CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from sqlalchemy.ext.asyncio import AsyncSession

user_app = typer.Typer()

T = TypeVar("T")


async def _with_session(work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``work`` with a session on a freshly initialized engine."""
    from people_center_api.core.config import get_settings
    from people_center_api.core.database import dispose_engine, get_session_factory, init_engine

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        factory = get_session_factory()
        async with factory() as session:
            return await work(session)
    finally:
        await dispose_engine()


@user_app.command("list")
def list_citizens() -> None:
    """List every citizen account."""
    asyncio.run(_with_session(_list_citizens))


async def _list_citizens(session: AsyncSession) -> None:
    from people_center_api.services.citizen_service import list_all_citizens

    citizens = await list_all_citizens(session)
    typer.echo(f"{'Name':<30} {'Email':<35} {'Role':<8} {'Created':<20}")
    typer.echo("-" * 96)
    for citizen in citizens:
        created = citizen.created_at.strftime("%Y-%m-%d %H:%M")
        typer.echo(f"{citizen.name:<30} {citizen.email:<35} {citizen.role:<8} {created:<20}")
    typer.echo(f"\nTotal: {len(citizens)}")


@user_app.command("make-admin")
def make_admin(email: str = typer.Argument(..., help="Email of the citizen to promote")) -> None:
    """Give an existing citizen the admin role."""
    asyncio.run(_with_session(lambda session: _make_admin(session, email)))


async def _make_admin(session: AsyncSession, email: str) -> None:
    from people_center_api.models.citizen import CitizenRole
    from people_center_api.services.auth_service import get_citizen_by_email

    citizen = await get_citizen_by_email(session, email)
    if citizen is None:
        typer.echo(f"Error: no citizen with email '{email}'", err=True)
        raise typer.Exit(code=1)
    if citizen.is_admin:
        typer.echo(f"'{citizen.email}' is already an admin")
        return
    citizen.role = CitizenRole.ADMIN.value
    await session.commit()
    typer.echo(f"'{citizen.email}' is now an admin")


@user_app.command("create")
def create_citizen(
    name: str = typer.Option(..., prompt=True, help="Full name"),
    email: str = typer.Option(..., prompt=True, help="Email address"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password"),
    role: str = typer.Option("citizen", prompt=True, help="Role (citizen/admin)"),
) -> None:
    """Create a citizen account interactively."""
    asyncio.run(_with_session(lambda session: _create_citizen(session, name, email, password, role)))


async def _create_citizen(session: AsyncSession, name: str, email: str, password: str, role: str) -> None:
    from people_center_api.core.config import get_settings
    from people_center_api.core.errors import AppError
    from people_center_api.models.citizen import CitizenRole
    from people_center_api.schemas.auth import RegisterRequest
    from people_center_api.services.auth_service import register_citizen

    if role not in {r.value for r in CitizenRole}:
        typer.echo(f"Error: invalid role '{role}'", err=True)
        raise typer.Exit(code=1)
    try:
        citizen = await register_citizen(
            session, RegisterRequest(name=name, email=email, password=password), get_settings()
        )
    except AppError as e:
        typer.echo(f"Error: {e.message} ({e.code})", err=True)
        raise typer.Exit(code=1) from e
    if citizen.role != role:
        citizen.role = role
        await session.commit()
    typer.echo(f"Citizen '{citizen.email}' created with role '{citizen.role}'")


@user_app.command("cleanup-emails")
def cleanup_emails(
    dry_run: bool = typer.Option(True, "--dry-run/--apply", help="Only report, or actually remove accounts"),
) -> None:
    """Remove accounts whose email is malformed or uses a misspelled provider domain."""
    asyncio.run(_with_session(lambda session: _cleanup_emails(session, dry_run=dry_run)))


async def _cleanup_emails(session: AsyncSession, *, dry_run: bool) -> None:
    from people_center_api.services.citizen_service import find_citizens_with_invalid_email, remove_citizen

    invalid = await find_citizens_with_invalid_email(session)
    if not invalid:
        typer.echo("No invalid emails found")
        return

    typer.echo(f"Found {len(invalid)} citizen(s) with invalid emails:")
    for citizen in invalid:
        typer.echo(f"  {citizen.email:<35} {citizen.name}")
    if dry_run:
        typer.echo("\nDry run, nothing removed. Re-run with --apply to delete.")
        return

    removed = 0
    for citizen in invalid:
        if await remove_citizen(session, citizen):
            removed += 1
    typer.echo(f"\nRemoved {removed} of {len(invalid)} citizen(s)")
