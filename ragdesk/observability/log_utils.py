"""
Logging utilities for safe structured logging.

Context values attached to records are rendered once, here, so secrets are
masked and large payloads (chunk lists, embeddings) become short summaries.

Dependencies: logging (stdlib), pydantic
System role: Logging helper functions
"""

import logging
from typing import Any

from pydantic import SecretStr

MASKED = "**********"

# LogRecord attributes that cannot be overwritten through ``extra``
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log record.

    Args:
        value: Value to render
        max_length: Longest text kept before truncation

    Returns:
        str: Masked, summarized or truncated text
    """
    try:
        if isinstance(value, SecretStr):
            return MASKED
        if isinstance(value, (list, tuple, set, frozenset)):
            return f"{type(value).__name__}({len(value)} items)"
        if isinstance(value, dict):
            return f"dict({len(value)} keys)"
        if isinstance(value, bytes):
            return f"bytes({len(value)})"
        text = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def _as_extra(context: dict[str, Any]) -> dict[str, str]:
    return {
        (f"ctx_{key}" if key in _RESERVED else key): safe_log_value(val)
        for key, val in context.items()
    }


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    """
    Log a message with structured context attached as record attributes.

    Keys that clash with LogRecord attributes are stored with a ``ctx_`` prefix.
    """
    logger.log(level, message, extra=_as_extra(context))


def log_exception_with_context(logger: logging.Logger, message: str, exc: Exception, **context) -> None:
    """
    Log an exception at ERROR with its traceback and context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception being reported (need not be the one currently handled)
        **context: Additional context
    """
    extra = _as_extra(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
