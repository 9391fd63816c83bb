"""
Pytest configuration and fixtures.
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-bytes-for-hs256")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from slidetrack.application.ports import (  # noqa: E402
    DeckRepositoryPort,
    NavigationRepositoryPort,
    SessionRepositoryPort,
    ViewerRepositoryPort,
)
from slidetrack.domain.entities import Deck, Viewer, ViewingSession  # noqa: E402

START = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


class SteppingClock:
    """Deterministic clock: every reading is ``step`` later than the last."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class MockUnitOfWork:
    """UnitOfWork stand-in whose repositories are AsyncMocks bound to the port interfaces."""

    def __init__(self):
        self.deck_repo = AsyncMock(spec=DeckRepositoryPort)
        self.viewer_repo = AsyncMock(spec=ViewerRepositoryPort)
        self.session_repo = AsyncMock(spec=SessionRepositoryPort)
        self.navigation_repo = AsyncMock(spec=NavigationRepositoryPort)
        self.commit = AsyncMock()
        self.rollback = AsyncMock()
        self.savepoints = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    @asynccontextmanager
    async def savepoint(self):
        self.savepoints += 1
        yield self


# ---------- ENTITY FACTORIES ----------


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def make_deck(owner_id):
    def _make(**overrides) -> Deck:
        values = dict(
            id=uuid4(),
            owner_id=owner_id,
            title="Quarterly Review",
            total_pages=2,
            public_token=f"tok-{uuid4().hex}",
            created_at=START,
            is_active=True,
        )
        values.update(overrides)
        return Deck(**values)

    return _make


@pytest.fixture
def make_viewer():
    def _make(deck_id, **overrides) -> Viewer:
        values = dict(
            id=uuid4(),
            deck_id=deck_id,
            email="ana@example.com",
            first_viewed_at=START,
            last_viewed_at=START,
            total_opens=1,
            total_time_spent=0,
        )
        values.update(overrides)
        return Viewer(**values)

    return _make


@pytest.fixture
def make_session():
    def _make(deck_id, viewer_id, **overrides) -> ViewingSession:
        values = dict(
            id=uuid4(),
            viewer_id=viewer_id,
            deck_id=deck_id,
            session_token=str(uuid4()),
            started_at=START,
        )
        values.update(overrides)
        return ViewingSession(**values)

    return _make


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def mock_uow():
    return MockUnitOfWork()


# ---------- DATABASE FIXTURES ----------


@pytest.fixture
async def test_db_engine():
    """In-memory SQLite engine with the full schema."""
    from slidetrack.infra.config.database import configure_sqlite, init_models

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    configure_sqlite(engine)
    await init_models(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def uow(test_db_session):
    from slidetrack.infra.config.dependencies import build_unit_of_work

    return build_unit_of_work(test_db_session)


# ---------- API TESTING FIXTURES ----------


@pytest.fixture
def app(test_session_factory, owner_id):
    """FastAPI app bound to the in-memory database, authenticated as ``owner_id``."""
    from slidetrack.infra.config.database import get_db_session
    from slidetrack.infra.config.dependencies import get_current_user_id
    from slidetrack.main import app as fastapi_app

    async def _session_override():
        async with test_session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db_session] = _session_override
    fastapi_app.dependency_overrides[get_current_user_id] = lambda: owner_id

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as ac:
        yield ac


# ---------- PYTEST CONFIGURATION ----------


def pytest_configure(config):
    markers = [
        "unit: Unit tests (fast, isolated)",
        "integration: Integration tests against an in-memory database",
        "api: HTTP endpoint tests",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        path = str(item.fspath)
        if "/unit/" in path:
            item.add_marker(pytest.mark.unit)
        if "/integration/" in path:
            item.add_marker(pytest.mark.integration)
        if "/api/" in path:
            item.add_marker(pytest.mark.api)
