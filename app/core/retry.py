"""Retry helper for idempotent async calls to external services.

Only transport-level failures should be retried, and only for calls that
are safe to repeat (e.g. fetching a userinfo document). Single-use
operations such as an authorization-code exchange run with ``attempts=1``.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 2
DEFAULT_BASE_DELAY = 0.2  # seconds

T = TypeVar("T")


def _calculate_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Exponential backoff: base_delay * 2^attempt (attempt is zero-indexed)."""
    return base_delay * (2**attempt)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    base_delay: float = DEFAULT_BASE_DELAY,
    operation: str = "call",
) -> T:
    """Run ``fn`` until it succeeds or ``attempts`` are used up.

    Args:
        fn: Zero-argument coroutine factory
        attempts: Maximum number of attempts (1 means no retry)
        exceptions: Exception types that trigger another attempt
        base_delay: Base delay in seconds for exponential backoff
        operation: Short label used in log lines

    Returns:
        Result of the first successful attempt

    Raises:
        The last caught exception if every attempt fails
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    last_error: Exception | None = None

    for attempt in range(attempts):
        try:
            return await fn()
        except exceptions as e:
            last_error = e
            if attempt < attempts - 1:
                delay = _calculate_delay(attempt, base_delay)
                logger.info(
                    "%s failed (%s), retrying in %.2fs",
                    operation,
                    type(e).__name__,
                    delay,
                )
                await asyncio.sleep(delay)

    raise last_error  # type: ignore[misc]
