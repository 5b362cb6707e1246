"""
Rabbitry Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Each test gets a fresh in-memory SQLite database (aiosqlite, foreign
       keys on) with the full schema, a BreedService bound to it and an
       HTTPX client whose breed routes use that service.

Fixtures (all function-scoped):
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── engine / session_factory: in-memory SQLite with all tables created
    ├── breed_service: BreedService on session_factory
    ├── row_counts: coroutine returning {table: row count} for all tables
    ├── dwarf_lop: a ready-made AddBreedRequest
    └── test_client: HTTPX AsyncClient against the FastAPI app
"""

import os

# Must run before any rabbitry import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

import rabbitry.models  # noqa: F401
from rabbitry.database import Base, build_engine, build_session_factory
from rabbitry.schemas.breed import AddBreedRequest
from rabbitry.services.breed_service import BreedService, get_breed_service


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for unit tests that never touch a database.

    Usage:
        async def test_insert(mock_db_session):
            mock_db_session.execute.side_effect = IntegrityError(...)
            await BreedDao(mock_db_session).insert_breed("Rex", "Velvet coat.")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.get_bind = MagicMock()
    session.get_bind.return_value.dialect.name = "sqlite"
    return session


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with every table created; disposed after the test."""
    test_engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def breed_service(session_factory):
    return BreedService(session_factory)


@pytest.fixture
def row_counts(session_factory):
    """
    Returns a coroutine function reporting the row count of every table.

    Usage:
        before = await row_counts()
        ...
        assert await row_counts() == before
    """
    async def _counts():
        async with session_factory() as session:
            counts = {}
            for table in Base.metadata.sorted_tables:
                result = await session.execute(select(func.count()).select_from(table))
                counts[table.name] = result.scalar_one()
            return counts

    return _counts


@pytest.fixture
def dwarf_lop():
    return AddBreedRequest(
        name="Dwarf Lop",
        description="Small show breed.",
        category_names=["lop-eared", "smooth"],
        alternate_names=["Klein Widder"],
    )


@pytest_asyncio.fixture
async def test_client(breed_service):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    The breed routes are wired to the per-test BreedService, so requests hit
    the in-memory database created for this test.
    """
    from rabbitry.main import app

    app.dependency_overrides[get_breed_service] = lambda: breed_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
