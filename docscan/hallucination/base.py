from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from docscan.hallucination.checks import FieldCheck
from docscan.hallucination.source import SourceText
from docscan.hallucination.suspicion import SuspicionReport, SuspicionScorer
from docscan.validation.models import ValidationIssue

UNSUPPORTED_VALUE = "unsupported_value"


class BaseHallucinationDetector(ABC):
    """Contract for per-document-type hallucination detectors."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def detect(
        self, source_text: str, extracted: Mapping[str, Any]
    ) -> tuple[ValidationIssue, ...]:
        """Return one issue per extracted value missing from `source_text`.

        An empty tuple means every checked value was traced. Absent, null
        and empty values are not checked.
        """

    def assess(self, extracted: Mapping[str, Any]) -> SuspicionReport:
        """Score `extracted` for stock placeholder values. Nothing is scored by default."""
        return SuspicionReport(score=0, threshold=SuspicionScorer.THRESHOLD)


class FieldTraceDetector(BaseHallucinationDetector):
    """Runs a list of field checks against the source text."""

    def __init__(
        self, checks: Sequence[FieldCheck], scorer: SuspicionScorer | None = None
    ) -> None:
        self._checks = tuple(checks)
        self._scorer = scorer

    @property
    def checks(self) -> tuple[FieldCheck, ...]:
        return self._checks

    def assess(self, extracted: Mapping[str, Any]) -> SuspicionReport:
        if self._scorer is None:
            return super().assess(extracted)
        return self._scorer.score(extracted)

    def detect(
        self, source_text: str, extracted: Mapping[str, Any]
    ) -> tuple[ValidationIssue, ...]:
        source = SourceText(source_text)
        issues: list[ValidationIssue] = []
        for check in self._checks:
            for path, value in check.resolve(extracted):
                if value is None or value == "" or isinstance(value, (Mapping, list, bool)):
                    continue
                if check.supports(value, source):
                    continue
                dotted = ".".join(str(segment) for segment in path)
                issues.append(
                    ValidationIssue(
                        message=f"Value {value!r} for '{dotted}' was not found in the source text",
                        path=path,
                        code=UNSUPPORTED_VALUE,
                        invalid_value=value,
                        metadata={"check": check.name, "detector": self.name},
                    )
                )
        return tuple(issues)
