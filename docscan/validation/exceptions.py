from collections.abc import Sequence
from typing import Generic, TypeVar

from docscan.validation.models import ValidationIssue

T = TypeVar("T")


class ValidationError(Exception, Generic[T]):
    """Structured, path-addressed collection of validation failures for a value."""

    def __init__(
        self,
        summary: str,
        issues: Sequence[ValidationIssue],
        original_value: T,
    ) -> None:
        if not issues:
            raise ValueError("ValidationError requires at least one issue")
        super().__init__(summary)
        self.summary = summary
        self.issues: tuple[ValidationIssue, ...] = tuple(issues)
        self.original_value = original_value

    @property
    def paths(self) -> list[tuple[str | int, ...]]:
        return [issue.path for issue in self.issues]

    def formatted_message(self) -> str:
        """Render the summary followed by one `- path: message` line per issue."""
        lines = [self.summary]
        for issue in self.issues:
            location = issue.dotted_path or "<root>"
            lines.append(f"- {location}: {issue.message}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.formatted_message()
