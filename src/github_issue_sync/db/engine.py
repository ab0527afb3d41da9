"""Async SQLAlchemy engine and session management.

The engine and session factory are created once at startup and passed to
the sync components; nothing here holds module-level state.
"""

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from github_issue_sync.config import Settings, get_settings
from github_issue_sync.db.models import Base


def create_engine(
    database_url: str | None = None,
    *,
    settings: Settings | None = None,
    echo: bool = False,
) -> AsyncEngine:
    """Create the async engine for the document store.

    Args:
        database_url: Connection string (defaults to Settings.database_url)
        settings: Settings to read the URL from when database_url is omitted
        echo: Log emitted SQL
    """
    url = database_url or (settings or get_settings()).database_url
    return create_async_engine(
        url,
        echo=echo,
        future=True,
        poolclass=pool.NullPool,  # Required for SQLite to prevent "database is locked"
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the engine.

    Each source worker opens its own session from this factory.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet.

    Safe to run on every start. In production, prefer Alembic migrations.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    """Drop all tables.

    WARNING: This will delete all data. Use only for testing.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
