"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from memory_backend.configs.base import ServiceSettings
from memory_backend.configs.database import DatabaseSettings
from memory_backend.configs.memory import MemorySettings


class Settings(ServiceSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    memory: MemorySettings = MemorySettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from memory_backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()
