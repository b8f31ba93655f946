"""Tests for engine and session factory lifecycle"""
import pytest
from sqlalchemy import inspect

import punks_indexer.models as models
from punks_indexer.config import get_settings
from punks_indexer.models.database import close_db, get_engine, get_session_factory, init_db
from punks_indexer.models.state import State


@pytest.fixture
def database(tmp_path, monkeypatch):
    monkeypatch.setenv("PUNKS_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'punks.db'}")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_public_surface():
    assert sorted(models.__all__) == sorted([
        "Base",
        "init_db",
        "close_db",
        "Account",
        "Punk",
        "Listing",
        "Bid",
        "Event",
        "EventType",
        "Transfer",
        "State",
        "SyncCursor",
    ])


@pytest.mark.asyncio
async def test_factory_is_shared_until_closed(database):
    factory = get_session_factory()
    assert get_session_factory() is factory
    assert "punks.db" in str(get_engine().url)

    await close_db()
    assert get_session_factory() is not factory
    await close_db()


@pytest.mark.asyncio
async def test_init_db_creates_tables(database):
    await init_db()
    try:
        async with get_session_factory()() as session:
            tables = await session.run_sync(
                lambda sync_session: inspect(sync_session.connection()).get_table_names()
            )
            assert State.__tablename__ in tables
    finally:
        await close_db()
