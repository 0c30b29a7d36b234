"""Service test fixtures — async DB, ledger service and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every test gets a fresh LedgerService over a default-genesis engine
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test database

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Lifespan not run by ASGITransport: the client fixture installs the
      ledger service itself and removes it afterwards
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from carbon_ledger.db.base import Base
from carbon_ledger.infrastructure.database import get_db, DatabaseSessionManager
import carbon_ledger.infrastructure.database as db_module
from carbon_ledger.api.dependencies import init_ledger_service
from carbon_ledger.core.ledger_engine import LedgerEngine
from carbon_ledger.services.ledger_host import LedgerHost
from carbon_ledger.services.ledger_service import LedgerService
from carbon_ledger.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
def ledger_service():
    return LedgerService(LedgerHost(LedgerEngine(), audit=True))


@pytest.fixture
async def client(test_engine, test_session_factory, ledger_service):
    """FastAPI test client with DB dependency overridden and ledger installed."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    init_ledger_service(ledger_service)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    init_ledger_service(None)
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
