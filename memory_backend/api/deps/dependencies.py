"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: memory_backend.configs, memory_backend.application, memory_backend.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.application.services import ChatService, MemoryService
from memory_backend.boundary.db.connection import get_async_db
from memory_backend.boundary.store_factory import get_record_store
from memory_backend.configs import Settings, get_settings
from memory_backend.core.record_store import RecordStore


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_store(db: AsyncSession = Depends(get_async_db)) -> RecordStore:
    """
    Get the configured record store for this request.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        RecordStore: SQL store over the request session, or the in-memory store
    """
    return get_record_store(db)


def get_memory_service(
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dependency),
) -> MemoryService:
    """
    Get memory service instance.

    Args:
        store: Record store (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        MemoryService: Service instance for this request
    """
    return MemoryService(store, settings.memory)


def get_chat_service(store: RecordStore = Depends(get_store)) -> ChatService:
    """
    Get chat service instance.

    Args:
        store: Record store (injected via Depends)

    Returns:
        ChatService: Service instance for this request
    """
    return ChatService(store)
