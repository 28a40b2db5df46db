from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Generic, TypeVar

from docscan.result import Err, Ok, Result
from docscan.validation.exceptions import ValidationError
from docscan.validation.models import PathSegment, ValidationIssue

T = TypeVar("T")


class Validator(ABC, Generic[T]):
    """Contract shared by leaf and composite validators.

    Subclasses implement `collect`; the two public modes are built on it.
    Validation never mutates the value and `validate` never raises.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def collect(self, value: object) -> list[ValidationIssue]:
        """Return every issue found in `value` (empty list when valid).

        Args:
            value: The value to check. Must not be modified.

        Returns:
            Issues with paths relative to `value`.
        """

    def validate(self, value: T) -> Result[T, ValidationError[T]]:
        issues = self.collect(value)
        if issues:
            return Err(ValidationError(self._summary(issues), issues, value))
        return Ok(value)

    def assert_valid(self, value: T) -> T:
        """Return `value` unchanged or raise ValidationError with all issues."""
        result = self.validate(value)
        if isinstance(result, Err):
            raise result.error
        return result.value

    def propagate(
        self,
        issues: Iterable[ValidationIssue],
        segment: PathSegment,
        nested: "Validator[object]",
    ) -> list[ValidationIssue]:
        """Re-emit a nested validator's issues under `segment`."""
        return [issue.nested_under(segment, nested.name) for issue in issues]

    def issue(
        self,
        message: str,
        *,
        code: str,
        value: object,
        path: tuple[PathSegment, ...] = (),
        **metadata: object,
    ) -> ValidationIssue:
        return ValidationIssue(
            message=message,
            path=path,
            code=code,
            invalid_value=value,
            metadata={"validator": self.name, **metadata},
        )

    def _summary(self, issues: list[ValidationIssue]) -> str:
        noun = "issue" if len(issues) == 1 else "issues"
        return f"{self.name} found {len(issues)} {noun}"
