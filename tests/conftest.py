"""
Naija Tax Calculator - Test Configuration

Pytest fixtures and configuration.
"""

from typing import AsyncGenerator
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_async_session
from app.models.calculation import CalculationRecord  # noqa: F401  (registers the table)
from main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh in-memory database and session for each test."""
    # StaticPool keeps the single in-memory connection alive for the whole test
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ===========================================
# DATA FIXTURES
# ===========================================

@pytest.fixture
def owner_id() -> UUID:
    """Opaque owner identifier for history tests."""
    return uuid4()


@pytest.fixture
def pit_inputs() -> dict:
    return {
        "incomes": [{"source_type": "salary", "amount": 1_000_000}],
        "deductions": [],
        "is_resident": True,
    }


@pytest.fixture
def cit_inputs() -> dict:
    return {"turnover": 200_000_000, "assessable_profits": 10_000_000}
