"""Tests for RetryPolicy backoff, classification and elapsed-time budget."""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from docscan.config.settings import Settings
from docscan.result import Err, Ok
from docscan.retry.config import RetryConfig
from docscan.retry.policy import RetryPolicy
from docscan.services.exceptions import (
    AuthenticationError,
    ClientRequestError,
    MalformedResponseError,
    NetworkError,
    RateLimitedError,
    ServiceError,
)


class FakeClock:
    """Monotonic clock that only moves when the policy sleeps."""

    def __init__(self) -> None:
        self.now_ms = 0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now_ms / 1000

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now_ms += round(seconds * 1000)


def _config(**overrides: object) -> RetryConfig:
    values: dict[str, object] = {
        "initial_interval_ms": 100,
        "max_interval_ms": 1000,
        "backoff_exponent": 2.0,
        "max_elapsed_time_ms": 1000,
        "retry_on_connection_error": True,
    }
    values.update(overrides)
    return RetryConfig(**values)  # type: ignore[arg-type]


def _policy(clock: FakeClock, **overrides: object) -> RetryPolicy:
    return RetryPolicy(_config(**overrides), sleep=clock.sleep, clock=clock)


class TestRetryPolicySuccess:
    @pytest.mark.asyncio
    async def test_returns_ok_on_first_success(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(return_value="text")
        result = await _policy(clock).execute(operation)
        assert result == Ok("text")
        assert operation.await_count == 1
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_succeeds_after_transient_failures(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(
            side_effect=[ServiceError("503", status_code=503), RateLimitedError("429"), "ok"]
        )
        result = await _policy(clock).execute(operation)
        assert isinstance(result, Ok)
        assert result.value == "ok"
        assert operation.await_count == 3
        assert clock.sleeps == pytest.approx([0.1, 0.2])


class TestRetryBudget:
    @pytest.mark.asyncio
    async def test_stops_once_elapsed_budget_is_spent(self) -> None:
        clock = FakeClock()
        errors = [ServiceError(f"boom {n}", status_code=503) for n in range(20)]
        operation = AsyncMock(side_effect=errors)
        result = await _policy(clock).execute(operation)
        assert isinstance(result, Err)
        assert clock.now_ms == 1000
        assert operation.await_count == 5

    @pytest.mark.asyncio
    async def test_returns_last_observed_error(self) -> None:
        clock = FakeClock()
        errors = [NetworkError(f"reset {n}") for n in range(20)]
        operation = AsyncMock(side_effect=errors)
        result = await _policy(clock).execute(operation)
        assert isinstance(result, Err)
        assert result.error is errors[operation.await_count - 1]
        assert str(result.error) == "reset 4"

    @pytest.mark.asyncio
    async def test_last_delay_is_clamped_to_remaining_budget(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(side_effect=ServiceError("down", status_code=500))
        await _policy(clock).execute(operation)
        assert clock.sleeps == pytest.approx([0.1, 0.2, 0.4, 0.3])

    @pytest.mark.asyncio
    async def test_zero_budget_means_single_attempt(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(side_effect=RateLimitedError("slow down"))
        result = await _policy(clock, max_elapsed_time_ms=0).execute(operation)
        assert isinstance(result, Err)
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_logs_exhaustion(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(side_effect=ServiceError("down", status_code=502))
        with patch("docscan.retry.policy.Log") as mock_log:
            await _policy(clock).execute(operation, label="OCR for a.jpg")
        mock_log.error.assert_called_once()
        assert "OCR for a.jpg gave up after 5 attempt(s)" in mock_log.error.call_args.args[0]
        assert mock_log.warning.call_count == 4


class TestRetryClassification:
    @pytest.mark.asyncio
    async def test_client_request_error_surfaces_immediately(self) -> None:
        clock = FakeClock()
        error = ClientRequestError("bad request", status_code=400)
        operation = AsyncMock(side_effect=error)
        result = await _policy(clock).execute(operation)
        assert result == Err(error)
        assert operation.await_count == 1
        assert clock.sleeps == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            AuthenticationError("unauthorized", status_code=401),
            MalformedResponseError("not json"),
            ValueError("bug"),
        ],
    )
    async def test_non_retryable_errors_are_not_retried(self, error: Exception) -> None:
        clock = FakeClock()
        operation = AsyncMock(side_effect=error)
        result = await _policy(clock).execute(operation)
        assert isinstance(result, Err)
        assert result.error is error
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_raw_transport_errors_are_retried(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(side_effect=[httpx.ConnectError("refused"), "ok"])
        result = await _policy(clock).execute(operation)
        assert result == Ok("ok")

    @pytest.mark.asyncio
    async def test_connection_errors_not_retried_when_disabled(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(side_effect=NetworkError("reset"))
        result = await _policy(clock, retry_on_connection_error=False).execute(operation)
        assert isinstance(result, Err)
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_http_errors_still_retried_when_connection_retry_disabled(self) -> None:
        clock = FakeClock()
        operation = AsyncMock(side_effect=[ServiceError("408", status_code=408), "ok"])
        result = await _policy(clock, retry_on_connection_error=False).execute(operation)
        assert result == Ok("ok")


class TestDelaySchedule:
    def test_grows_exponentially_and_caps_at_max_interval(self) -> None:
        policy = RetryPolicy(
            RetryConfig(
                initial_interval_ms=500,
                max_interval_ms=10000,
                backoff_exponent=1.8,
                max_elapsed_time_ms=25000,
                retry_on_connection_error=True,
            )
        )
        delays = [policy.delay_ms(attempt) for attempt in range(7)]
        assert delays[:3] == pytest.approx([500, 900, 1620])
        assert delays[-1] == 10000


class TestAttemptTimeout:
    @pytest.mark.asyncio
    async def test_timeout_counts_as_retryable_network_error(self) -> None:
        clock = FakeClock()
        calls = 0

        async def operation() -> str:
            nonlocal calls
            calls += 1
            if calls == 1:
                await asyncio.sleep(1)
            return "late but fine"

        policy = RetryPolicy(
            _config(), sleep=clock.sleep, clock=clock, attempt_timeout_seconds=0.01
        )
        result = await policy.execute(operation)
        assert result == Ok("late but fine")
        assert calls == 2

    @pytest.mark.asyncio
    async def test_repeated_timeouts_return_network_error(self) -> None:
        clock = FakeClock()

        async def operation() -> str:
            await asyncio.sleep(1)
            return "never"

        policy = RetryPolicy(
            _config(max_elapsed_time_ms=300),
            sleep=clock.sleep,
            clock=clock,
            attempt_timeout_seconds=0.01,
        )
        result = await policy.execute(operation, label="extraction")
        assert isinstance(result, Err)
        assert isinstance(result.error, NetworkError)
        assert "extraction timed out" in str(result.error)

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError, match="attempt_timeout_seconds"):
            RetryPolicy(_config(), attempt_timeout_seconds=0)


class TestRetryConfig:
    def test_from_settings_uses_defaults(self) -> None:
        config = RetryConfig.from_settings(Settings())
        assert config == RetryConfig(
            initial_interval_ms=500,
            max_interval_ms=10000,
            backoff_exponent=1.8,
            max_elapsed_time_ms=25000,
            retry_on_connection_error=True,
        )

    def test_rejects_max_below_initial(self) -> None:
        with pytest.raises(ValueError, match="max_interval_ms"):
            _config(initial_interval_ms=500, max_interval_ms=100)

    def test_rejects_backoff_below_one(self) -> None:
        with pytest.raises(ValueError, match="backoff_exponent"):
            _config(backoff_exponent=0.5)
