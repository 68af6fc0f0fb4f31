"""
Service-wide configuration shared by every settings module.

Reads .env and plain environment variables. Holds the deployment
environment label and the root log level used by configure_logging.

Dependencies: pydantic, pydantic_settings
System role: Shared settings root for the memory service
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    """Settings common to the API process and the record store."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment label reported at startup (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for the service (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level
