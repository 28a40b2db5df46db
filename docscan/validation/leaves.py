"""Leaf validators backed by strict pydantic TypeAdapters.

Leaves fail fast: they report at most one issue for the value they own.
"""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import ErrorDetails

from docscan.validation.base import Validator
from docscan.validation.models import ValidationIssue


class TypeAdapterValidator(Validator[Any]):
    """Validates a value against a pydantic annotation in strict mode."""

    def __init__(self, annotation: Any) -> None:
        self._adapter: TypeAdapter[Any] = TypeAdapter(annotation)

    def collect(self, value: object) -> list[ValidationIssue]:
        try:
            self._adapter.validate_python(value, strict=True)
        except PydanticValidationError as exc:
            return [self._issue_from_pydantic(exc.errors(include_url=False)[0], value)]
        return self.extra_checks(value)

    def extra_checks(self, value: object) -> list[ValidationIssue]:
        """Hook for checks pydantic cannot express. Runs only after the type passed."""
        return []

    def _issue_from_pydantic(self, error: ErrorDetails, value: object) -> ValidationIssue:
        return ValidationIssue(
            message=error["msg"],
            path=tuple(error["loc"]),
            code=error["type"],
            invalid_value=error.get("input", value),
            metadata={"validator": self.name, **error.get("ctx", {})},
        )


class AnyValidator(Validator[Any]):
    def collect(self, value: object) -> list[ValidationIssue]:
        return []


class StringValidator(TypeAdapterValidator):
    def __init__(
        self,
        *,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | None = None,
        choices: Sequence[str] | None = None,
    ) -> None:
        if choices:
            if min_length is not None or max_length is not None or pattern is not None:
                raise ValueError(
                    "choices cannot be combined with min_length, max_length or pattern"
                )
            annotation: Any = Literal[tuple(choices)]
        else:
            annotation = Annotated[
                str, Field(min_length=min_length, max_length=max_length, pattern=pattern)
            ]
        super().__init__(annotation)


class BooleanValidator(TypeAdapterValidator):
    def __init__(self) -> None:
        super().__init__(bool)


class _NumericValidator(TypeAdapterValidator):
    _type_code = "float_type"

    def collect(self, value: object) -> list[ValidationIssue]:
        # bool is an int subclass but never a valid amount or count
        if isinstance(value, bool):
            return [
                self.issue(
                    "Input should be a valid number, not a boolean",
                    code=self._type_code,
                    value=value,
                )
            ]
        return super().collect(value)


class NumberValidator(_NumericValidator):
    def __init__(
        self,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
        exclusive_minimum: float | None = None,
    ) -> None:
        super().__init__(
            Annotated[
                float,
                Field(ge=minimum, le=maximum, gt=exclusive_minimum, allow_inf_nan=False),
            ]
        )


class IntegerValidator(_NumericValidator):
    _type_code = "int_type"

    def __init__(
        self,
        *,
        minimum: int | None = None,
        maximum: int | None = None,
        exclusive_minimum: int | None = None,
    ) -> None:
        super().__init__(
            Annotated[int, Field(ge=minimum, le=maximum, gt=exclusive_minimum)]
        )


class DateTimeValidator(TypeAdapterValidator):
    """ISO 8601 date-time string, or a plain date when `date_only` is set."""

    def __init__(self, *, date_only: bool = False) -> None:
        super().__init__(str)
        self._date_only = date_only

    def extra_checks(self, value: object) -> list[ValidationIssue]:
        parser = date.fromisoformat if self._date_only else datetime.fromisoformat
        try:
            parser(str(value))
        except ValueError:
            expected = "YYYY-MM-DD" if self._date_only else "an ISO 8601 date-time"
            return [
                self.issue(
                    f"Input should be {expected}",
                    code="invalid_datetime",
                    value=value,
                    expected=expected,
                )
            ]
        return []
