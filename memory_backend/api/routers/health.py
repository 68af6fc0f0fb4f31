"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: memory_backend.boundary, memory_backend.configs
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.api.deps import get_settings_dependency
from memory_backend.boundary.db.connection import get_async_db
from memory_backend.boundary.db.record_store import UNAVAILABLE_ERRORS
from memory_backend.configs import Settings

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> HealthResponse:
    """
    Record store health check.

    Raises:
        HTTPException(503): Database unreachable
    """
    if settings.memory.store_backend.lower() == "memory":
        return HealthResponse(status="healthy", message="In-memory record store")

    try:
        await db.execute(text("SELECT 1"))
    except UNAVAILABLE_ERRORS as e:
        logger.error(f"{__name__}:health_check_db - Database unreachable", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        ) from e
    return HealthResponse(status="healthy", message="Database connection OK")
