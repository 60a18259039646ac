"""Unit tests for timeout and retry helpers.

Uses asyncio.run() directly since pytest-asyncio is not a dependency.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from starlink_sdk.errors import ErrorKind, StarlinkError
from starlink_sdk.utils import calculate_backoff, is_retryable, retry_with_backoff, sleep, with_timeout


def _run(coro):
    """Helper to run an async coroutine in a new event loop."""
    return asyncio.run(coro)


class TestCalculateBackoff:
    def test_first_attempt_is_initial(self):
        assert calculate_backoff(0, 1000, 30000) == 1000

    def test_doubles(self):
        assert [calculate_backoff(n, 100, 10000) for n in range(4)] == [100, 200, 400, 800]

    def test_saturates_at_max(self):
        assert calculate_backoff(10, 1000, 30000) == 30000

    def test_non_decreasing(self):
        delays = [calculate_backoff(n, 250, 5000) for n in range(12)]
        assert delays == sorted(delays)
        assert delays[-1] == 5000


class TestSleep:
    def test_sleep_uses_milliseconds(self):
        with patch("starlink_sdk.utils.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            _run(sleep(250))
        mock_sleep.assert_awaited_once_with(0.25)


class TestRetryWithBackoff:
    def test_returns_first_success(self):
        fn = AsyncMock(return_value="ok")
        assert _run(retry_with_backoff(fn, 3, 1, 10)) == "ok"
        assert fn.await_count == 1

    def test_retries_until_success(self):
        fn = AsyncMock(side_effect=[StarlinkError.connection("down"), StarlinkError.connection("down"), "ok"])
        with patch("starlink_sdk.utils.sleep", new=AsyncMock()) as mock_sleep:
            assert _run(retry_with_backoff(fn, 3, 100, 1000)) == "ok"
        assert fn.await_count == 3
        assert [call.args[0] for call in mock_sleep.await_args_list] == [100, 200]

    def test_rethrows_last_error(self):
        errors = [StarlinkError.timeout("first"), StarlinkError.timeout("second")]
        fn = AsyncMock(side_effect=errors)
        with patch("starlink_sdk.utils.sleep", new=AsyncMock()):
            with pytest.raises(StarlinkError) as exc_info:
                _run(retry_with_backoff(fn, 2, 1, 10))
        assert exc_info.value is errors[1]
        assert fn.await_count == 2

    def test_zero_retries_never_calls_fn(self):
        fn = AsyncMock(return_value="ok")
        with pytest.raises(StarlinkError) as exc_info:
            _run(retry_with_backoff(fn, 0, 1, 10))
        assert "Max retries exceeded" in exc_info.value.message
        fn.assert_not_called()

    def test_should_retry_false_stops_immediately(self):
        fn = AsyncMock(side_effect=StarlinkError.validation("bad"))
        with pytest.raises(StarlinkError):
            _run(retry_with_backoff(fn, 5, 1, 10, should_retry=is_retryable))
        assert fn.await_count == 1


class TestIsRetryable:
    def test_transient_kinds(self):
        assert is_retryable(StarlinkError.connection("x"))
        assert is_retryable(StarlinkError.timeout("x"))

    def test_other_failures(self):
        assert not is_retryable(StarlinkError.unexpected_response("a", "b"))
        assert not is_retryable(ValueError("x"))


class TestWithTimeout:
    def test_resolves_before_deadline(self):
        async def quick():
            return 42

        assert _run(with_timeout(quick(), 1000)) == 42

    def test_default_message(self):
        async def run():
            await with_timeout(asyncio.sleep(10), 10)

        with pytest.raises(StarlinkError) as exc_info:
            _run(run())
        assert exc_info.value.kind is ErrorKind.TIMEOUT
        assert exc_info.value.message == "Operation timed out after 10ms"
        assert exc_info.value.details == {"timeout_ms": 10}

    def test_custom_message(self):
        with pytest.raises(StarlinkError) as exc_info:
            _run(with_timeout(asyncio.sleep(10), 10, "dish did not answer"))
        assert exc_info.value.message == "dish did not answer"

    def test_wrapped_awaitable_is_cancelled(self):
        cancelled = []

        async def slow():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        with pytest.raises(StarlinkError):
            _run(with_timeout(slow(), 10))
        assert cancelled == [True]
