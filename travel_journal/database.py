"""
Travel Journal Backend — Database Session Management
======================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine, provides a session dependency that commits on
       success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Transaction boundary:
    One request == one session == one transaction. The journal upsert writes
    the country status row and (optionally) a journal entry inside the same
    session, so the commit in get_db_session lands both or, on any exception,
    the rollback discards both.

Connection Pooling:
    SQLite (the default) uses SQLAlchemy's own pool defaults; pool sizing
    settings are only passed for server databases such as PostgreSQL.
"""

from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from travel_journal.config import settings

# Largest value a signed 64-bit INTEGER primary key column can hold
MAX_ROW_ID = 2**63 - 1


def parse_row_id(raw: str) -> Optional[int]:
    """
    Parse an id coming from a URL or token.

    Returns None unless `raw` is plain ASCII digits naming a value in
    1..MAX_ROW_ID, so the result can always be bound to an INTEGER column.
    """
    # isdecimal() rejects signs, spaces and non-ASCII digit forms int() would take;
    # the length cap keeps int() away from huge digit strings
    if not raw.isascii() or not raw.isdecimal() or len(raw) > len(str(MAX_ROW_ID)):
        return None
    value = int(raw)
    if value <= 0 or value > MAX_ROW_ID:
        return None
    return value


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: ORM objects stay readable after the request commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this shared metadata, which is what
    init_models() and Alembic use to create the schema.
    """
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/journal")
        async def list_entries(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_models(bind: AsyncEngine = engine) -> None:
    """
    Create all tables that don't exist yet.

    When:  Application startup (lifespan) and test fixtures.
    Why:   Lets the service run against a fresh SQLite file without a
           separate migration step; Alembic describes the same schema for
           deployments that manage it explicitly.
    """
    # Models must be imported so they register with Base.metadata
    from travel_journal.models import journal, user  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool (application shutdown)."""
    await engine.dispose()
