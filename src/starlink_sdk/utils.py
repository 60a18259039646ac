"""
Timeout and retry helpers.

These compose around any façade call; the dispatch path itself never retries
and never imposes a deadline beyond the transport's request timeout.

Example:
    >>> info = await retry_with_backoff(
    ...     lambda: with_timeout(client.device.get_info(), 5000),
    ...     max_retries=3,
    ...     initial_ms=500,
    ...     max_ms=4000,
    ... )
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from starlink_sdk.errors import ErrorKind, StarlinkError

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def sleep(ms: float) -> None:
    """Suspend for ``ms`` milliseconds."""
    await asyncio.sleep(ms / 1000.0)


def calculate_backoff(attempt: int, initial_ms: float, max_ms: float) -> float:
    """Exponential backoff delay for a zero-based attempt number.

    Returns:
        ``min(initial_ms * 2**attempt, max_ms)``
    """
    return min(initial_ms * (2**attempt), max_ms)


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: int,
    initial_ms: float,
    max_ms: float,
    should_retry: Callable[[BaseException], bool] | None = None,
) -> T:
    """Call ``fn`` until it succeeds, sleeping with exponential backoff between attempts.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt
        max_retries: Maximum number of attempts
        initial_ms: Delay after the first failure
        max_ms: Upper bound for the delay
        should_retry: Predicate over the raised exception; returning False
            re-raises immediately

    Returns:
        The first successful result

    Raises:
        StarlinkError: "Max retries exceeded" when ``max_retries`` is 0
        Exception: The last error raised by ``fn`` once attempts are exhausted
    """
    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            return await fn()
        except KeyboardInterrupt:  # noqa: KBI002
            raise
        except Exception as e:
            last_error = e
            if should_retry is not None and not should_retry(e):
                raise
            if attempt + 1 >= max_retries:
                break
            delay = calculate_backoff(attempt, initial_ms, max_ms)
            logger.debug(f"Attempt {attempt + 1}/{max_retries} failed ({e}), retrying in {delay}ms")
            await sleep(delay)

    if last_error is not None:
        raise last_error
    raise StarlinkError("Max retries exceeded", details={"max_retries": max_retries})


async def with_timeout(awaitable: Awaitable[T], ms: float, message: str | None = None) -> T:
    """Race ``awaitable`` against a timer.

    The wrapped awaitable is cancelled when the timer wins.

    Raises:
        StarlinkError: (TIMEOUT) with ``details={"timeout_ms": ms}``
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=ms / 1000.0)
    except asyncio.TimeoutError:
        raise StarlinkError.timeout(message or f"Operation timed out after {ms}ms", timeout_ms=ms) from None


def is_retryable(error: Any) -> bool:
    """Default retry predicate: transient connection and timeout failures only."""
    return isinstance(error, StarlinkError) and error.kind in (ErrorKind.CONNECTION, ErrorKind.TIMEOUT)
