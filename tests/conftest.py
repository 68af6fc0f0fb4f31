"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory and SQLite-backed record stores, small-dimension
settings, vector helpers
Dependencies: pytest, pytest_asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import math
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from memory_backend.configs.memory import MemorySettings

TEST_DIMENSION = 4


def vector_with_similarity(score: float, dimension: int = TEST_DIMENSION) -> list[float]:
    """Unit vector whose cosine similarity to the first basis vector is score."""
    vector = [0.0] * dimension
    vector[0] = score
    vector[1] = math.sqrt(max(0.0, 1.0 - score * score))
    return vector


def query_vector(dimension: int = TEST_DIMENSION) -> list[float]:
    """First basis vector, used as the query in ranking tests."""
    vector = [0.0] * dimension
    vector[0] = 1.0
    return vector


def utc(minutes: int = 0) -> datetime:
    """Fixed timestamp offset by minutes."""
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc) + timedelta(minutes=minutes)


@pytest.fixture
def similar_vector():
    """Factory for vectors with a chosen cosine similarity to the query vector."""
    return vector_with_similarity


@pytest.fixture
def query():
    """Query vector for ranking tests."""
    return query_vector()


@pytest.fixture
def at():
    """Factory for fixed UTC timestamps."""
    return utc


@pytest.fixture
def memory_settings() -> MemorySettings:
    """Retrieval settings with a small embedding dimension."""
    return MemorySettings(embedding_dimension=TEST_DIMENSION, store_backend="memory")


@pytest.fixture
def memory_store():
    """Fresh process-local record store."""
    from memory_backend.boundary.memory_store import InMemoryRecordStore

    return InMemoryRecordStore()


@pytest_asyncio.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from memory_backend.boundary.db.base import Base
    from memory_backend.boundary.db import models  # noqa: F401

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def sql_store(test_async_db):
    """SQLRecordStore over the SQLite test session."""
    from memory_backend.boundary.db.record_store import SQLRecordStore

    return SQLRecordStore(test_async_db)
