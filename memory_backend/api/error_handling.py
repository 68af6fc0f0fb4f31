"""
Memory API error handling.

Provides a decorator that maps the service exception hierarchy onto HTTP
status codes with a uniform error body.

Dependencies: fastapi, memory_backend.core.exceptions
System role: Exception-to-HTTP translation for all routers
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from memory_backend.core.exceptions import (
    DimensionMismatchError,
    InvalidQueryError,
    MemoryServiceException,
    NotFoundError,
    StoreUnavailableError,
)
from memory_backend.models.common import ErrorResponse
from memory_backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _detail(e: BaseException, details: dict | None = None) -> dict:
    message = e.message if isinstance(e, MemoryServiceException) else str(e)
    return ErrorResponse(
        error=message,
        error_type=type(e).__name__,
        details=details or {},
    ).model_dump()


def handle_memory_errors(func: F) -> F:
    """
    Decorator to transform service errors into HTTPExceptions.

    - InvalidQueryError, DimensionMismatchError -> 400
    - NotFoundError -> 404
    - StoreUnavailableError -> 503 (retryable)
    - anything else -> 500
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except (InvalidQueryError, DimensionMismatchError) as e:
            logger.warning(
                f"{__name__}:{func.__name__} - Invalid request",
                extra={"error": e.message, "details": e.details},
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=_detail(e, e.details),
            ) from e

        except NotFoundError as e:
            logger.warning(
                f"{__name__}:{func.__name__} - Resource not found",
                extra={"resource": e.resource, "identifier": str(e.identifier)},
            )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=_detail(e, e.details),
            ) from e

        except StoreUnavailableError as e:
            logger.error(
                f"{__name__}:{func.__name__} - Record store unavailable",
                extra={"operation": e.operation},
            )
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=_detail(e, {"operation": e.operation, "retryable": True}),
                headers={"Retry-After": "1"},
            ) from e

        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:{func.__name__} - Unexpected failure",
                e,
                endpoint=func.__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=_detail(e),
            ) from e

    return wrapper  # type: ignore
