"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, memory_backend.configs
System role: Database schema initialization

Usage:
    python -m memory_backend.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from memory_backend.boundary.db.base import Base
from memory_backend.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from memory_backend.boundary.db.models import (  # noqa: F401
    SessionModel,
    SummaryModel,
    TurnModel,
    UserModel,
)

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: calls CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Args:
        engine: Engine to use (defaults to the configured async engine)

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - All tables created successfully")


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.

    Raises:
        SQLAlchemyError: If database connection fails or drop fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info(f"{__name__}:drop_all_tables - All tables dropped successfully")


if __name__ == "__main__":
    from memory_backend.observability.logger import configure_logging

    configure_logging()
    asyncio.run(create_all_tables())
