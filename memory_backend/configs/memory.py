"""
Memory retrieval configuration settings.

Embedding dimensionality, search defaults and clamps, and record store
backend selection.

Dependencies: pydantic, pydantic_settings
System role: Retrieval engine configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MemorySettings(BaseSettings):
    """Retrieval and storage configuration for conversation memory."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MEMORY_",
        case_sensitive=False,
        extra="ignore",
    )

    embedding_dimension: int = Field(
        default=1536,
        gt=0,
        description="Length every summary and query embedding must have",
    )
    default_limit: int = Field(default=5, description="Results returned when caller omits limit")
    max_limit: int = Field(default=20, description="Upper clamp for result count")
    default_threshold: float = Field(
        default=0.7,
        description="Minimum cosine similarity when caller omits threshold (0.0-1.0)",
    )
    default_keyword_limit: int = Field(default=5, description="Default keyword search result count")
    store_backend: str = Field(
        default="sql",
        description="Record store type: 'sql' (SQLAlchemy) or 'memory' (process-local, dev only)",
    )
