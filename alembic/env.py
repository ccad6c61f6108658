"""Alembic migration environment for the People Center database.

The URL and optional PostgreSQL schema come from ``Settings`` rather than
``alembic.ini``; online migrations run over the async engine.
"""

import asyncio
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from people_center_api.core.config import get_settings
from people_center_api.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
settings = get_settings()


def _options(**extra: Any) -> dict[str, Any]:
    options: dict[str, Any] = {"target_metadata": target_metadata, "compare_type": True, **extra}
    if settings.database_schema is not None:
        options["version_table_schema"] = settings.database_schema
    return options


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        **_options(url=settings.database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    is_sqlite = connection.dialect.name == "sqlite"
    if settings.database_schema is not None and not is_sqlite:
        connection.execute(text(f'SET search_path TO "{settings.database_schema}", public'))
    # SQLite cannot ALTER constraints in place.
    context.configure(**_options(connection=connection, render_as_batch=is_sqlite))
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = settings.database_url
    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    async with engine.connect() as connection:
        if settings.database_schema is not None and connection.dialect.name != "sqlite":
            await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{settings.database_schema}"'))
            await connection.commit()
        await connection.run_sync(_migrate)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
