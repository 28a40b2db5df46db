"""Bounded exponential backoff around idempotent boundary calls."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from docscan.logging.logger import Log
from docscan.result import Err, Ok, Result
from docscan.retry.config import RetryConfig
from docscan.services.exceptions import NetworkError, ServiceCallError

T = TypeVar("T")

_CONNECTION_ERRORS: tuple[type[BaseException], ...] = (
    NetworkError,
    TimeoutError,
    ConnectionError,
    httpx.TransportError,
)


class RetryPolicy:
    """Retries an async operation until it succeeds, fails permanently,
    or the elapsed-time budget runs out.

    The wrapped operation must be safe to repeat. Delays and the clock are
    injectable so the schedule can be driven deterministically in tests.
    """

    def __init__(
        self,
        config: RetryConfig,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        attempt_timeout_seconds: float | None = None,
    ) -> None:
        if attempt_timeout_seconds is not None and attempt_timeout_seconds <= 0:
            raise ValueError("attempt_timeout_seconds must be positive")
        self._config = config
        self._sleep = sleep
        self._clock = clock
        self._attempt_timeout_seconds = attempt_timeout_seconds

    @property
    def config(self) -> RetryConfig:
        return self._config

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        label: str = "operation",
    ) -> Result[T, Exception]:
        """Run `operation` with retries.

        Args:
            operation: Zero-argument coroutine factory, called once per attempt.
            label: Name used in log lines.

        Returns:
            Ok with the operation's value, or Err with the last observed error.
        """
        started = self._clock()
        attempt = 0
        while True:
            try:
                value = await self._attempt(operation, label)
            except Exception as exc:
                if not self.is_retryable(exc):
                    Log.warning(
                        f"{label} failed with non-retryable error: {exc}",
                        attempt=attempt + 1,
                    )
                    return Err(exc)

                elapsed_ms = (self._clock() - started) * 1000.0
                remaining_ms = self._config.max_elapsed_time_ms - elapsed_ms
                if remaining_ms <= 0:
                    Log.error(
                        f"{label} gave up after {attempt + 1} attempt(s): {exc}",
                        elapsed_ms=round(elapsed_ms),
                    )
                    return Err(exc)

                delay_ms = min(self.delay_ms(attempt), remaining_ms)
                Log.warning(
                    f"{label} failed, retrying in {delay_ms:.0f}ms: {exc}",
                    attempt=attempt + 1,
                )
                await self._sleep(delay_ms / 1000.0)
                attempt += 1
            else:
                return Ok(value)

    def delay_ms(self, attempt: int) -> float:
        """Backoff delay after the given zero-based failed attempt."""
        config = self._config
        return min(
            float(config.max_interval_ms),
            config.initial_interval_ms * config.backoff_exponent**attempt,
        )

    def is_retryable(self, exc: BaseException) -> bool:
        if isinstance(exc, _CONNECTION_ERRORS):
            return self._config.retry_on_connection_error
        if isinstance(exc, ServiceCallError):
            return exc.retryable
        return False

    async def _attempt(self, operation: Callable[[], Awaitable[T]], label: str) -> T:
        if self._attempt_timeout_seconds is None:
            return await operation()
        try:
            return await asyncio.wait_for(operation(), self._attempt_timeout_seconds)
        except TimeoutError as exc:
            raise NetworkError(
                f"{label} timed out after {self._attempt_timeout_seconds}s"
            ) from exc
