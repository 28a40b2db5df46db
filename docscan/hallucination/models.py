from collections.abc import Sequence

from docscan.validation.models import ValidationIssue


class HallucinationWarning(UserWarning):
    """Extracted values that could not be traced to the source text.

    Non-fatal by default; raised or returned as a failure only when the
    pipeline is configured to reject hallucinations.
    """

    def __init__(self, kind: str, issues: Sequence[ValidationIssue]) -> None:
        self.kind = kind
        self.issues: tuple[ValidationIssue, ...] = tuple(issues)
        self.fields: tuple[str, ...] = tuple(issue.dotted_path for issue in self.issues)
        super().__init__(
            f"{len(self.fields)} unsupported {kind} field(s): {', '.join(self.fields)}"
        )
