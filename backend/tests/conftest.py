"""
TimeTracker Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock async session for service unit tests
    ├── database:        Fresh SQLite schema seeded with 50 test users
    ├── db_session:      Real AsyncSession on that database
    ├── sample_project:  A client with one project, for time entry tests
    └── test_client:     HTTPX AsyncClient bound to a new app instance
"""

import os
import tempfile
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any timetracker import: settings and the engine are
# created when timetracker.config / timetracker.database are first imported
_TEST_DB_DIR = tempfile.mkdtemp(prefix="timetracker_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTH_REQUIRE_TOKEN"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

TEST_USER_COUNT = 50

API = "/api/v1"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_user(mock_db_session):
            mock_db_session.get.return_value = user
            result = await user_service.get_user(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.scalar = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """
    Recreates every table and inserts 50 users ("Test user 0" .. "Test user 49",
    hour rate 10 + i). User ids therefore run from 1 to 50.
    """
    import timetracker.models  # noqa: F401
    from timetracker.database import Base, async_session_factory, engine
    from timetracker.models import User

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        session.add_all(
            [User(name=f"Test user {i}", hour_rate=10 + i) for i in range(TEST_USER_COUNT)]
        )
        await session.commit()

    yield

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    from timetracker.database import async_session_factory

    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def sample_project(database):
    """A committed client ("Acme") with one project ("Website"). Returns (client_id, project_id)."""
    from timetracker.database import async_session_factory
    from timetracker.models import Client, Project

    async with async_session_factory() as session:
        client = Client(name="Acme")
        project = Project(name="Website", client=client)
        session.add_all([client, project])
        await session.commit()
        return client.id, project.id


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    A new app per test keeps rate-limiter state isolated. ASGITransport does
    not run the lifespan; the `database` fixture prepares the store instead.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from timetracker.main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
