"""
Test suite for schema bootstrap.

System role: Verification of table creation and teardown helpers
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from memory_backend.boundary.db.create_tables import create_all_tables, drop_all_tables


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    await engine.dispose()


async def _table_names(engine) -> set[str]:
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


@pytest.mark.asyncio
async def test_create_and_drop_all_tables(engine) -> None:
    # Act
    await create_all_tables(engine)
    await create_all_tables(engine)
    created = await _table_names(engine)
    await drop_all_tables(engine)
    dropped = await _table_names(engine)

    # Assert
    assert {"users", "sessions", "turns", "conversation_summaries"} <= created
    assert dropped == set()
