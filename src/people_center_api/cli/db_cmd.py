"""``people-center db``: Alembic migrations driven from ``alembic.ini``."""

import typer
from loguru import logger

db_app = typer.Typer()

ALEMBIC_INI = "alembic.ini"


def _alembic_config():  # noqa: ANN202
    from alembic.config import Config

    return Config(ALEMBIC_INI)


@db_app.command()
def upgrade(revision: str = typer.Argument("head", help="Target revision")) -> None:
    """Apply migrations up to ``revision``."""
    from alembic import command

    logger.info(f"Migrating database up to {revision}")
    command.upgrade(_alembic_config(), revision)
    logger.info("Migration finished")


@db_app.command()
def downgrade(revision: str = typer.Argument("-1", help="Target revision")) -> None:
    """Revert migrations down to ``revision`` (one step by default)."""
    from alembic import command

    logger.info(f"Migrating database down to {revision}")
    command.downgrade(_alembic_config(), revision)
    logger.info("Migration finished")


@db_app.command()
def current() -> None:
    """Print the revision the database is at."""
    from alembic import command

    command.current(_alembic_config(), verbose=True)


@db_app.command()
def history() -> None:
    """List every known revision, newest first."""
    from alembic import command

    command.history(_alembic_config())
