"""``people-center`` command line: API server, migrations and account upkeep."""

import typer

from people_center_api.cli.db_cmd import db_app
from people_center_api.cli.user_cmd import user_app
from people_center_api.core.config import get_settings
from people_center_api.core.logging import setup_logging

app = typer.Typer(name="people-center", help="Politikos People Center management CLI", no_args_is_help=True)
app.add_typer(db_app, name="db", help="Database migration commands")
app.add_typer(user_app, name="user", help="Citizen account maintenance commands")


@app.callback()
def _main_callback(
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL for this command"),
) -> None:
    """Configure logging before any subcommand runs."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),  # noqa: S104
    port: int = typer.Option(5000, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development only)"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("people_center_api.main:create_app", factory=True, host=host, port=port, reload=reload)
