"""Process-wide async engine and session factory.

``init_engine`` is called once from the app lifespan (or a CLI command);
request handlers get sessions through ``core.dependencies.get_async_session``.
PostgreSQL runs on asyncpg; SQLite (aiosqlite) is used for local runs and
the test suite and gets foreign keys and a busy timeout switched on.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

SQLITE_BUSY_TIMEOUT_MS = 5000


def get_engine() -> AsyncEngine:
    """Return the engine created by :func:`init_engine`.

    Raises:
        RuntimeError: Before ``init_engine`` or after ``dispose_engine``.
    """
    if _engine is None:
        msg = "Database engine not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        msg = "Session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _session_factory


def enable_sqlite_pragmas(engine: AsyncEngine) -> None:
    """Run ``foreign_keys=ON`` and a busy timeout on every new SQLite connection.

    Without the timeout a second writer fails at once with
    ``database is locked`` instead of waiting its turn.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ANN001, ARG001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")
        cursor.close()


def init_engine(database_url: str, *, schema: str | None = None, **kwargs: object) -> AsyncEngine:
    """Create the engine and session factory, replacing any previous ones.

    Args:
        database_url: ``postgresql+asyncpg://...`` or ``sqlite+aiosqlite://...``.
        schema: PostgreSQL schema put first on the ``search_path``.
        **kwargs: Passed through to ``create_async_engine``.

    Returns:
        The new engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    is_sqlite = database_url.startswith("sqlite")

    if schema is not None:
        connect_args = kwargs.pop("connect_args", {})
        if not isinstance(connect_args, dict):
            msg = "connect_args must be a dict"
            raise TypeError(msg)
        connect_args["server_settings"] = {"search_path": f"{schema},public"}
        kwargs["connect_args"] = connect_args
    if not is_sqlite and kwargs.get("poolclass") is not StaticPool:
        kwargs.setdefault("pool_size", 10)
        kwargs.setdefault("max_overflow", 5)

    _engine = create_async_engine(database_url, **kwargs)
    if is_sqlite:
        enable_sqlite_pragmas(_engine)
    # Objects stay readable after commit; services reload explicitly when needed.
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
