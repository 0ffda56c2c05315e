"""Service test fixtures — async DB, fakes, controller and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager patched so repositories and readiness use the test engine
    - Controller tests run on fakes with a settable clock (no real time passes)
    - The app runtime is installed per test; no lifespan, no tick driver

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for the
      repository contract (ADR: PostgreSQL-specific features not exercised here)
    - StaticPool: one connection, so every session sees the same in-memory DB
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

import app.infrastructure.database as db_module
from app.api.dependencies import install_runtime
from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
import app.models  # noqa: F401
from app.main import app
from app.services.round_controller import RoundController
from tests.clock import FakeClock, utc
from tests.services.fakes import (
    SEED, FakeHistoryRepository, FakeHub, FakeRoundRepository,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_manager(test_engine, test_session_factory, monkeypatch):
    """DatabaseSessionManager bound to the test engine, installed as db_manager."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    monkeypatch.setattr(db_module, "db_manager", manager)
    return manager


@pytest.fixture
def rounds():
    return FakeRoundRepository()


@pytest.fixture
def history():
    return FakeHistoryRepository()


@pytest.fixture
def hub():
    return FakeHub()


@pytest.fixture
def clock():
    """03:31:05 UTC: inside the window, round 2, 55 s left."""
    return FakeClock(utc(3, 31, 5))


@pytest.fixture
def controller(rounds, history, hub, window, clock):
    return RoundController(
        rounds, history, hub, window,
        round_duration=60,
        persistence_timeout=1.0,
        clock=clock,
        seed_factory=lambda: dict(SEED),
    )


@pytest.fixture
async def client(test_manager, controller, hub):
    """FastAPI test client with DB and runtime installed."""
    install_runtime(app, controller, hub)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
