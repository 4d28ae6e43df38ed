"""Pytest configuration and fixtures for orgdesk.

Durable store: SQLite in memory through aiosqlite (one connection per test
via StaticPool, foreign keys enforced, schema created from the ORM metadata).
Reads through a session with uncommitted writes skip the cache, so tests
that assert on cache contents commit their setup first. Cache: InMemoryCache
driven by a fake clock so TTL expiry is deterministic.
"""

import os

os.environ.setdefault("CACHE_BACKEND", "memory")

from collections.abc import AsyncIterator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import orgdesk.infrastructure.persistence.models  # noqa: F401  (register tables)
from orgdesk.application.dtos import OrganizationResult, UserResult
from orgdesk.core.config import get_settings
from orgdesk.infrastructure.cache.memory_cache import InMemoryCache
from orgdesk.infrastructure.cache.policy import CachePolicies, get_cache_policies
from orgdesk.infrastructure.persistence import database
from orgdesk.infrastructure.persistence.database import Base, create_session_factory
from orgdesk.infrastructure.persistence.repositories import (
    OrganizationRepository,
    UserRepository,
)
from orgdesk.infrastructure.persistence.transaction import commit
from orgdesk.main import app


class FakeClock:
    """Monotonic clock controlled by the test."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StatementCounter:
    """Counts SQL statements sent to the database (store calls)."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self, *args: Any) -> None:
        self.count += 1


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI, lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE / SET NULL unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    db_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(db_engine.sync_engine, "connect", _enable_foreign_keys)
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def sql_counter(engine: AsyncEngine) -> StatementCounter:
    """Statement counter attached to the test engine."""
    counter = StatementCounter()
    event.listen(engine.sync_engine, "before_cursor_execute", counter)
    return counter


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Database session for repository tests. Rolls back after test."""
    async with create_session_factory(engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryCache:
    return InMemoryCache(clock=clock)


@pytest.fixture
def policies() -> CachePolicies:
    return get_cache_policies()


@pytest.fixture
async def organization(db_session: AsyncSession) -> OrganizationResult:
    """Committed organization, created without a cache so no keys are pre-populated."""
    created = await OrganizationRepository(db_session).create_organization("Acme", "acme")
    await commit(db_session)
    return created


@pytest.fixture
async def user(db_session: AsyncSession) -> UserResult:
    created = await UserRepository(db_session).create_user("ada@example.com", "Ada Lovelace")
    await commit(db_session)
    return created


@pytest.fixture
async def app_database(tmp_path, monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[None]:
    """Bind the app's session dependencies to a SQLite file with the schema created."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'orgdesk.db'}")
    get_settings.cache_clear()
    async for _ in database.get_db():
        pass
    assert database.engine is not None
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await database.dispose_engine()
    get_settings.cache_clear()
