"""Bounded retry with exponential backoff for flaky async operations."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

log = logging.getLogger(__name__)


async def retry_with_backoff[T](
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    delay: float = 1.0,
    factor: float = 2.0,
    retry_on: Callable[[Exception], bool] = lambda _: True,
) -> T:
    """Await ``operation`` until it succeeds or ``attempts`` are exhausted.

    Args:
        operation: Zero-argument coroutine function to call
        attempts: Maximum number of calls (at least 1)
        delay: Seconds to wait after the first failure
        factor: Multiplier applied to the delay after each failure
        retry_on: Predicate deciding whether an exception is transient

    Returns:
        The first successful result

    Raises:
        ValueError: If attempts is lower than 1
        Exception: The last failure, or the first non-transient one

    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if not retry_on(e):
                raise
            if attempt == attempts:
                log.error("All %d attempts failed: %s", attempts, e)
                raise

            wait = delay * factor ** (attempt - 1)
            log.warning(
                "Attempt %d/%d failed: %s (retrying in %.2fs)",
                attempt,
                attempts,
                e,
                wait,
            )
            await asyncio.sleep(wait)

    raise AssertionError("unreachable")  # pragma: no cover
