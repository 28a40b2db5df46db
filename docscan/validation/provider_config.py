"""Validators for AI provider connection settings."""

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from docscan.validation.composite import ObjectValidator, field_rule
from docscan.validation.leaves import (
    BooleanValidator,
    IntegerValidator,
    NumberValidator,
    StringValidator,
    TypeAdapterValidator,
)
from docscan.validation.models import ValidationIssue

MAX_TIMEOUT_SECONDS = 60


class ApiKeyValidator(TypeAdapterValidator):
    """Rejects short keys, template placeholders and test keys in production."""

    MIN_LENGTH: ClassVar[int] = 20
    FORBIDDEN_PATTERNS: ClassVar[tuple[str, ...]] = ("placeholder", "api-key", "your_api_key")
    TEST_KEY_MARKERS: ClassVar[tuple[str, ...]] = ("test", "sk-test", "demo")

    def __init__(self, *, app_env: str = "dev") -> None:
        super().__init__(str)
        self._inner = StringValidator(min_length=self.MIN_LENGTH)
        self._production = app_env.lower() == "production"

    def extra_checks(self, value: object) -> list[ValidationIssue]:
        length_issues = self._inner.collect(value)
        if length_issues:
            return length_issues
        key = str(value)
        lowered = key.lower()
        for pattern in self.FORBIDDEN_PATTERNS:
            if pattern in lowered:
                return [
                    self.issue(
                        "API key looks like a placeholder",
                        code="forbidden_pattern",
                        value=key,
                        pattern=pattern,
                    )
                ]
        if self._production and lowered.startswith(self.TEST_KEY_MARKERS):
            return [
                self.issue(
                    "Test API keys are not allowed in production",
                    code="test_key_in_production",
                    value=key,
                )
            ]
        return []


class UrlValidator(TypeAdapterValidator):
    """HTTP(S) URL; plain HTTP is refused in production."""

    def __init__(self, *, app_env: str = "dev") -> None:
        super().__init__(str)
        self._url_adapter: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)
        self._production = app_env.lower() == "production"

    def extra_checks(self, value: object) -> list[ValidationIssue]:
        url_issues = self._url_issues(str(value))
        if url_issues:
            return url_issues
        if self._production and not str(value).lower().startswith("https://"):
            return [
                self.issue(
                    "HTTPS is required in production",
                    code="insecure_url",
                    value=value,
                )
            ]
        return []

    def _url_issues(self, value: str) -> list[ValidationIssue]:
        # lax mode: HttpUrl parses from str
        try:
            self._url_adapter.validate_python(value)
        except PydanticValidationError as exc:
            error = exc.errors(include_url=False)[0]
            return [self.issue(error["msg"], code=error["type"], value=value)]
        return []


class RetryConfigValidator(ObjectValidator):
    """Backoff settings with the max-not-below-initial interval rule."""

    def __init__(self) -> None:
        super().__init__(
            {
                "initial_interval_ms": IntegerValidator(exclusive_minimum=0),
                "max_interval_ms": IntegerValidator(exclusive_minimum=0),
                "backoff_exponent": NumberValidator(minimum=1.0),
                "max_elapsed_time_ms": IntegerValidator(minimum=0),
                "retry_on_connection_error": BooleanValidator(),
            },
            required=(
                "initial_interval_ms",
                "max_interval_ms",
                "backoff_exponent",
                "max_elapsed_time_ms",
                "retry_on_connection_error",
            ),
            rules=(
                field_rule(
                    "max_interval_ms must be greater than or equal to initial_interval_ms",
                    _max_not_below_initial,
                    code="interval_order",
                    fields=("initial_interval_ms", "max_interval_ms"),
                ),
            ),
        )


class ProviderConfigValidator(ObjectValidator):
    """Connection settings for one AI provider, with optional nested retry block."""

    def __init__(self, *, app_env: str = "dev", require_api_key: bool = True) -> None:
        super().__init__(
            {
                "api_key": ApiKeyValidator(app_env=app_env),
                "base_url": UrlValidator(app_env=app_env),
                "timeout_seconds": NumberValidator(
                    exclusive_minimum=0, maximum=MAX_TIMEOUT_SECONDS
                ),
                "retry": RetryConfigValidator(),
            },
            required=("api_key",) if require_api_key else (),
        )


def _max_not_below_initial(value: Mapping[str, Any]) -> bool:
    return value["max_interval_ms"] >= value["initial_interval_ms"]
