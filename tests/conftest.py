"""Pytest configuration and fixtures for the market indexer tests"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from punks_indexer.models.database import Base
from punks_indexer.services.buckets import SnapshotPolicy
from punks_indexer.services.event_processor import EventProcessor, MarketConfig
from punks_indexer.services.pricing import StaticPriceOracle
from punks_indexer.services.store import EntityStore

from factories import DAY, WRAPPER, EventFactory

# In-memory SQLite shared by every session of one test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test"""
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def store(db_session: AsyncSession) -> EntityStore:
    return EntityStore(db_session)


@pytest.fixture
def policy() -> SnapshotPolicy:
    return SnapshotPolicy(bucket_seconds=DAY, lookback_limit=30, floor_min_listings=5)


@pytest.fixture
def processor(policy: SnapshotPolicy) -> EventProcessor:
    return EventProcessor(
        MarketConfig(wrapper_address=WRAPPER, policy=policy),
        oracle=StaticPriceOracle(300),
    )


@pytest.fixture
def events() -> EventFactory:
    return EventFactory()
