"""
Logging utilities for safe structured logging.

Keeps embeddings and long message texts out of log lines: sequences are
logged by length, long strings are truncated.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

MAX_LOG_VALUE_LENGTH = 200


def safe_log_value(value: Any, max_length: int = MAX_LOG_VALUE_LENGTH) -> str:
    """
    Convert a value to a short string for logging.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    if value is None:
        return "None"
    if isinstance(value, str):
        text = value
    elif isinstance(value, (list, tuple, set)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        try:
            text = str(value)
        except Exception as e:
            return f"<unable to log: {type(e).__name__}>"

    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with traceback and context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context
    """
    safe_context = {key: safe_log_value(val) for key, val in context.items()}
    safe_context.update(
        {
            "error_type": type(exc).__name__,
            "error_msg": safe_log_value(str(exc)),
        }
    )
    logger.error(message, exc_info=exc, extra=safe_context)
