"""Pytest configuration and shared fixtures.

Usage Guide:
- For store tests: use the file-backed `session_factory` / `db_session`
- For transformer tests: build raw records with tests.factories
- For orchestrator tests: combine `session_factory` with `FakeGitHub`
  from tests.factories
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from github_issue_sync.config import Settings
from github_issue_sync.db import create_engine, create_session_factory, create_tables
from github_issue_sync.logging import reset_logging
from github_issue_sync.schemas import PaginationMode, Source

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# All hardcoded dates should reference these constants for consistency.
# -----------------------------------------------------------------------------

# Base dates (datetime objects for Pydantic)
MAR_15 = datetime(2021, 3, 15, 10, 0, 0, tzinfo=UTC)  # Monday, issue opened
MAR_16 = datetime(2021, 3, 16, 10, 0, 0, tzinfo=UTC)  # Tuesday, issue closed
MAR_21 = datetime(2021, 3, 21, 23, 30, 0, tzinfo=UTC)  # Sunday, late update

# ISO 8601 strings (for GitHub API mocks)
MAR_15_ISO = "2021-03-15T10:00:00Z"
MAR_16_ISO = "2021-03-16T10:00:00Z"
MAR_21_ISO = "2021-03-21T23:30:00Z"

# Milliseconds between MAR_15 and MAR_16
ONE_DAY_MS = 86_400_000


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine(tmp_path):
    """Create a file-backed SQLite engine for tests.

    A file (not :memory:) so that the separate sessions opened per source
    all see the same database. Each test gets a fresh file.
    """
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(test_engine)


@pytest.fixture
async def db_session(session_factory):
    """A single session for repository tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# -----------------------------------------------------------------------------
# Settings / Source Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def test_settings() -> Settings:
    """Settings with no retry wait, isolated from the environment's .env."""
    return Settings(
        _env_file=None,
        github_token="test-token",
        sync={
            "page_size": 2,
            "max_concurrent_sources": 2,
            "max_fetch_retries": 2,
            "retry_backoff_seconds": 0.0,
        },
    )


@pytest.fixture
def source() -> Source:
    """The default offset-mode source used across tests."""
    return Source(owner="elastic", name="eui")


@pytest.fixture
def cursor_source() -> Source:
    """A cursor-mode source."""
    return Source(owner="elastic", name="elastic-charts", mode=PaginationMode.CURSOR)


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_logging():
    """Leave loguru without handlers after each test."""
    yield
    reset_logging()


@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
