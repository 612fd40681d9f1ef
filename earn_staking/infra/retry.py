"""
Retry Logic Helper Module

Retries idempotent RPC reads with linear backoff. Includes structured
logging with correlation IDs for request tracing.
"""

import asyncio
import logging
import uuid
import contextvars
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

from ..errors import ErrorCode, EarnStakingError
from ..config import config as global_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Context variable for correlation ID (task-local under asyncio)
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
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
        with CorrelationContext("pools") as cid:
            logger.info(f"[{cid}] Listing pools")
            pools = await client.get_all_pools()
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


def _log_with_correlation(
    level: int,
    message: str,
    operation_name: str,
    attempt: Optional[int] = None,
    max_retries: Optional[int] = None,
    **extra
):
    """
    Log message with correlation ID and structured context.

    Args:
        level: Logging level (logging.INFO, logging.WARNING, etc.)
        message: Log message
        operation_name: Name of the operation being executed
        attempt: Current attempt number (1-indexed)
        max_retries: Maximum number of attempts
        **extra: Additional context fields
    """
    cid = get_correlation_id()

    parts = []
    if cid:
        parts.append(f"[{cid}]")
    parts.append(f"[{operation_name}]")
    if attempt is not None and max_retries is not None:
        parts.append(f"[{attempt}/{max_retries}]")
    parts.append(message)

    extra_context = {
        "correlation_id": cid,
        "operation": operation_name,
        "attempt": attempt,
        "max_retries": max_retries,
        **extra
    }

    logger.log(level, " ".join(parts), extra=extra_context)


# Error keywords for classification
RECOVERABLE_KEYWORDS = [
    "timeout", "timed out", "connection", "network", "rate limit",
    "too many requests", "503", "502", "504",
    "temporarily unavailable", "service unavailable",
    "econnreset", "enotfound", "etimedout",
    "socket hang up", "request failed",
]


def classify_error(error: Exception) -> Tuple[bool, Optional[ErrorCode]]:
    """
    Classify an error to determine if it's worth retrying.

    Staking client errors carry their own flag; anything else is judged
    by its message.

    Returns:
        Tuple of (is_recoverable, error_code)
    """
    if isinstance(error, EarnStakingError):
        return error.recoverable, error.code

    error_str = str(error).lower()
    is_recoverable = any(keyword in error_str for keyword in RECOVERABLE_KEYWORDS)

    error_code = None
    if is_recoverable:
        if "timeout" in error_str or "timed out" in error_str:
            error_code = ErrorCode.RPC_TIMEOUT
        elif any(kw in error_str for kw in ["connection", "network", "socket"]):
            error_code = ErrorCode.RPC_CONNECTION_FAILED
        elif "rate limit" in error_str or "too many requests" in error_str:
            error_code = ErrorCode.RPC_RATE_LIMITED
        else:
            error_code = ErrorCode.RPC_INVALID_RESPONSE

    return is_recoverable, error_code


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    operation_name: str,
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> T:
    """
    Await an idempotent operation, retrying recoverable errors.

    Linear backoff: retry_delay * attempt. Non-recoverable errors and the
    last recoverable one are re-raised unchanged.

    Args:
        operation: Zero-argument coroutine factory
        operation_name: Name for logging purposes
        max_retries: Total attempts (defaults to config.rpc.max_retries)
        retry_delay: Base delay in seconds (defaults to config.rpc.retry_delay_seconds)

    Returns:
        Whatever the operation returns
    """
    if max_retries is None:
        max_retries = global_config.rpc.max_retries
    if retry_delay is None:
        retry_delay = global_config.rpc.retry_delay_seconds
    max_retries = max(1, max_retries)

    for attempt in range(1, max_retries + 1):
        try:
            result = await operation()
            if attempt > 1:
                _log_with_correlation(
                    logging.INFO,
                    f"Succeeded after {attempt} attempts",
                    operation_name,
                    attempt,
                    max_retries,
                )
            return result

        except Exception as e:
            is_recoverable, error_code = classify_error(e)

            if is_recoverable and attempt < max_retries:
                _log_with_correlation(
                    logging.WARNING,
                    f"Recoverable error: {e}",
                    operation_name,
                    attempt,
                    max_retries,
                    error_type="recoverable",
                    error_code=error_code.value if error_code else None,
                )
                await asyncio.sleep(retry_delay * attempt)
                continue

            _log_with_correlation(
                logging.ERROR,
                f"Failed: {e}",
                operation_name,
                attempt,
                max_retries,
                error_type="recoverable" if is_recoverable else "fatal",
            )
            raise
