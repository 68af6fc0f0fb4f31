"""Service orchestrators."""

from .chat_service import ChatService
from .memory_service import MemoryService

__all__ = [
    "ChatService",
    "MemoryService",
]
