"""
Record store factory for selecting between SQL (default) and in-memory stores.

Depends on MEMORY_STORE_BACKEND environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: memory_backend.boundary, memory_backend.configs
System role: Record store instantiation and selection
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.record_store import SQLRecordStore
from memory_backend.boundary.memory_store import InMemoryRecordStore
from memory_backend.configs import get_settings
from memory_backend.core.record_store import RecordStore

logger = logging.getLogger(__name__)

_memory_store: InMemoryRecordStore | None = None


def get_memory_store() -> InMemoryRecordStore:
    """Process-wide in-memory store, created on first use."""
    global _memory_store
    if _memory_store is None:
        logger.info(f"{__name__}:get_memory_store - Creating in-memory record store (local dev mode)")
        _memory_store = InMemoryRecordStore()
    return _memory_store


def reset_memory_store() -> None:
    """Drop the process-wide in-memory store."""
    global _memory_store
    _memory_store = None


def get_record_store(db: AsyncSession | None = None) -> RecordStore:
    """
    Factory function to get record store based on environment configuration.

    Args:
        db: Request-scoped database session (required for the SQL store)

    Returns:
        SQLRecordStore or InMemoryRecordStore: Configured record store

    Raises:
        ValueError: If MEMORY_STORE_BACKEND is invalid or the SQL store has no session
    """
    settings = get_settings()
    backend = settings.memory.store_backend.lower()

    if backend == "sql":
        if db is None:
            raise ValueError("SQL record store requires a database session")
        return SQLRecordStore(db)

    elif backend == "memory":
        return get_memory_store()

    else:
        raise ValueError(
            f"Invalid MEMORY_STORE_BACKEND: {backend}. "
            f"Must be 'sql' (default) or 'memory' (local dev)."
        )
