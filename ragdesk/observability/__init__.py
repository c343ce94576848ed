"""
Observability module.

Logging setup, structured logging helpers, correlation IDs and the prompt
registry.

Dependencies: logging, langfuse, langchain_core
System role: Cross-cutting observability concerns
"""

from ragdesk.observability.correlation import (
    CorrelationIdFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from ragdesk.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from ragdesk.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "safe_log_value",
    "log_with_context",
    "log_exception_with_context",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "CorrelationIdFilter",
]
