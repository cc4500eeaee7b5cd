"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

Two backends are supported behind the same session API:
- PostgreSQL (asyncpg) for production
- SQLite (aiosqlite) as an embedded store for dev and tests
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from teamdesk.config import settings
from teamdesk.db.models import Base


def _engine_options(url: str) -> dict:
    """Pool options per backend.

    An in-memory SQLite database lives and dies with its connection, so
    every session has to share one (StaticPool).
    """
    if url.startswith("sqlite"):
        options: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            options["poolclass"] = StaticPool
        return options
    # Connection pool: min 5, max 20 connections.
    return {"pool_size": 5, "max_overflow": 15, "pool_pre_ping": True}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_schema() -> None:
    """Create all tables that don't exist yet (dev / embedded SQLite)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
