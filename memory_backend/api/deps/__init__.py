"""Dependency injection."""

from .dependencies import (
    get_chat_service,
    get_memory_service,
    get_settings_dependency,
    get_store,
)

__all__ = [
    "get_chat_service",
    "get_memory_service",
    "get_settings_dependency",
    "get_store",
]
