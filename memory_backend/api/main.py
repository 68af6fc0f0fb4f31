"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, memory_backend.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from memory_backend import __version__
from memory_backend.boundary.db.connection import get_async_engine
from memory_backend.configs import get_settings
from memory_backend.models.common import ErrorResponse
from memory_backend.observability.logger import configure_logging
from memory_backend.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import (
    chat_router,
    health_router,
    memory_router,
    users_router,
)

logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as InvalidQueryError (400) instead of 422."""
    logger.warning(
        f"{__name__}:request_validation_handler - Invalid request",
        extra={"path": request.url.path, "error_count": len(exc.errors())},
    )
    detail = ErrorResponse(
        error="Invalid request",
        error_type="InvalidQueryError",
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail.model_dump()},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    configure_logging()
    settings = get_settings()
    logger.info(
        f"{__name__}:lifespan - Starting conversation memory API",
        extra={
            "environment": settings.environment,
            "store_backend": settings.memory.store_backend,
            "embedding_dimension": settings.memory.embedding_dimension,
        },
    )

    yield

    if settings.memory.store_backend.lower() == "sql":
        await get_async_engine().dispose()
    logger.info(f"{__name__}:lifespan - Shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Conversation Memory API",
        description="Conversation history storage with semantic retrieval over summaries",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(memory_router, prefix="/api/v1")
    app.include_router(chat_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "memory_backend.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
