from dataclasses import dataclass

from docscan.config.settings import Settings


@dataclass(frozen=True)
class RetryConfig:
    """Backoff parameters for RetryPolicy. Every field must be given."""

    initial_interval_ms: int
    max_interval_ms: int
    backoff_exponent: float
    max_elapsed_time_ms: int
    retry_on_connection_error: bool

    def __post_init__(self) -> None:
        if self.initial_interval_ms <= 0:
            raise ValueError("initial_interval_ms must be positive")
        if self.max_interval_ms < self.initial_interval_ms:
            raise ValueError("max_interval_ms must be >= initial_interval_ms")
        if self.backoff_exponent < 1.0:
            raise ValueError("backoff_exponent must be >= 1.0")
        if self.max_elapsed_time_ms < 0:
            raise ValueError("max_elapsed_time_ms cannot be negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryConfig":
        return cls(
            initial_interval_ms=settings.retry_initial_interval_ms,
            max_interval_ms=settings.retry_max_interval_ms,
            backoff_exponent=settings.retry_backoff_exponent,
            max_elapsed_time_ms=settings.retry_max_elapsed_time_ms,
            retry_on_connection_error=settings.retry_on_connection_error,
        )
