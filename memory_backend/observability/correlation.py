"""
Correlation ID context.

Carries a per-request correlation ID across await points using contextvars,
and exposes a logging filter that stamps it onto every record.

Dependencies: contextvars, logging (stdlib)
System role: Request tracing across service boundaries
"""

import logging
import uuid
from contextvars import ContextVar

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set correlation ID in context.

    Args:
        correlation_id: Optional correlation ID (generates new if None or blank)

    Returns:
        str: The correlation ID that was set
    """
    value = correlation_id.strip() if correlation_id else ""
    if not value:
        value = str(uuid.uuid4())
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation ID, or an empty string outside a request."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    """Clear correlation ID from context."""
    correlation_id_ctx.set("")


class CorrelationIdFilter(logging.Filter):
    """Adds ``correlation_id`` to each log record ("-" when unset)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True
