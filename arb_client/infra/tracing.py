"""
Correlation IDs and error classification

Structured logging helpers that tag every log line of one operation with
the same correlation ID, plus keyword-based classification of raw
transport exceptions.
"""

import logging
import uuid
import contextvars
from typing import Optional, Tuple

from ..errors import ErrorCode

logger = logging.getLogger(__name__)

# Context variable for correlation ID (thread-safe)
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for transaction tracing."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> contextvars.Token:
    """Set the correlation ID in context. Returns token for reset."""
    return _correlation_id.set(correlation_id)


class CorrelationContext:
    """
    Context manager for correlation ID scoping.

    Usage:
        with CorrelationContext("transfer") as cid:
            log_with_correlation(logging.INFO, "Starting", "transfer")
    """

    def __init__(self, prefix: Optional[str] = None):
        self.correlation_id = generate_correlation_id()
        if prefix:
            self.correlation_id = f"{prefix}_{self.correlation_id}"
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)


def log_with_correlation(
    level: int,
    message: str,
    operation_name: str,
    log: Optional[logging.Logger] = None,
    **extra
):
    """
    Log message with correlation ID and structured context.

    Args:
        level: Logging level (logging.INFO, logging.WARNING, etc.)
        message: Log message
        operation_name: Name of the operation being executed
        log: Logger to use (defaults to this module's logger)
        **extra: Additional context fields
    """
    cid = get_correlation_id()

    parts = []
    if cid:
        parts.append(f"[{cid}]")
    parts.append(f"[{operation_name}]")
    parts.append(message)

    extra_context = {
        "correlation_id": cid,
        "operation": operation_name,
        **extra
    }

    (log or logger).log(level, " ".join(parts), extra=extra_context)


# Error keywords for classification
TIMEOUT_KEYWORDS = [
    "timeout", "timed out", "etimedout",
]

CONNECTION_KEYWORDS = [
    "connection", "network", "econnreset", "econnrefused", "enotfound",
    "socket hang up", "name resolution", "max retries exceeded",
]

RATE_LIMIT_KEYWORDS = [
    "rate limit", "too many requests", "429",
]

UNAVAILABLE_KEYWORDS = [
    "503", "502", "504", "temporarily unavailable", "service unavailable",
]


def classify_error(error: Exception) -> Tuple[bool, Optional[ErrorCode]]:
    """
    Classify a raw transport exception.

    Args:
        error: The exception to classify

    Returns:
        Tuple of (is_transient, error_code); error_code is None when the
        message matches nothing known
    """
    error_str = str(error).lower()

    if any(keyword in error_str for keyword in TIMEOUT_KEYWORDS):
        return True, ErrorCode.RPC_TIMEOUT
    if any(keyword in error_str for keyword in RATE_LIMIT_KEYWORDS):
        return True, ErrorCode.RPC_RATE_LIMITED
    if any(keyword in error_str for keyword in CONNECTION_KEYWORDS):
        return True, ErrorCode.RPC_CONNECTION_FAILED
    if any(keyword in error_str for keyword in UNAVAILABLE_KEYWORDS):
        return True, ErrorCode.RPC_INVALID_RESPONSE

    return False, None
