"""Shared test fixtures.

Tests run against a throwaway SQLite file through aiosqlite. Redis is left
uninitialized, so broadcasts are skipped and rate limiting passes through.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncGenerator, Callable

_DB_FD, _DB_PATH = tempfile.mkstemp(prefix="ambassador_test_", suffix=".db")
os.close(_DB_FD)
os.environ["AMB_DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["AMB_ADMIN_API_KEY"] = "test-admin-key"
os.environ["AMB_LOG_FORMAT"] = "console"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from ambassador.config import get_settings  # noqa: E402
from ambassador.database import close_db, get_engine, get_session, init_db  # noqa: E402
from ambassador.db import models  # noqa: E402, F401
from ambassador.db.base import Base  # noqa: E402
from ambassador.main import create_app  # noqa: E402
from ambassador.redis_client import close_redis  # noqa: E402

ADMIN_KEY = "test-admin-key"

get_settings.cache_clear()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema for every test."""
    await init_db(get_settings().database_url)
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """A direct database session for service calls and assertions."""
    sessions = get_session()
    session = await anext(sessions)
    yield session
    await sessions.aclose()


@pytest.fixture
def new_session() -> Callable[[], AsyncSession]:
    """Factory for extra independent sessions on the same engine."""

    def _make() -> AsyncSession:
        return AsyncSession(get_engine(), expire_on_commit=False)

    return _make


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app. The lifespan does not run under ASGITransport."""
    await close_redis()
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Key": ADMIN_KEY}
