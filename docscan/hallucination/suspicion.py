"""Scoring of generic placeholder values that models invent for unreadable input.

Each placeholder match or rule hit adds to a suspicion score. At the
threshold the extraction is treated as invented: the pipeline marks the
record invalid and caps its confidence.
"""

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar

from docscan.documents.normalizers import parse_amount
from docscan.hallucination.checks import as_amounts, resolve_path
from docscan.validation.models import ValidationIssue

SUSPICIOUS_VALUE = "suspicious_value"


@dataclass(frozen=True)
class SuspicionReport:
    score: int
    threshold: int
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def flagged(self) -> bool:
        return self.score >= self.threshold


class PlaceholderCheck:
    """Matches the value at `path` against known filler values.

    `partial` matches when a placeholder occurs inside the value; `numeric`
    compares amounts to the cent. A check scores once however many list
    items it matches.
    """

    def __init__(
        self,
        path: str,
        placeholders: Iterable[Any],
        *,
        partial: bool = False,
        numeric: bool = False,
    ) -> None:
        self.path: tuple[str, ...] = tuple(path.split("."))
        self._partial = partial
        self._numeric = numeric
        if numeric:
            self._amounts = {Decimal(str(p)).quantize(Decimal("0.01")) for p in placeholders}
        self._placeholders = tuple(str(p) for p in placeholders)

    def matches(self, value: Any) -> bool:
        if value is None or value == "" or isinstance(value, (Mapping, list, bool)):
            return False
        if self._numeric:
            return not as_amounts(value).isdisjoint(self._amounts)
        text = str(value)
        if self._partial:
            return any(placeholder in text for placeholder in self._placeholders)
        return text in self._placeholders

    def find(self, data: Mapping[str, Any]) -> list[tuple[tuple[str | int, ...], Any]]:
        return [
            (path, value)
            for path, value in resolve_path(data, self.path)
            if self.matches(value)
        ]


@dataclass(frozen=True)
class SuspicionRule:
    """Whole-record heuristic reported at the record's root path."""

    message: str
    predicate: Callable[[Mapping[str, Any]], bool]
    weight: int = 1


class SuspicionScorer:
    THRESHOLD: ClassVar[int] = 2
    CONFIDENCE_CEILING: ClassVar[float] = 0.3

    def __init__(
        self,
        checks: Sequence[PlaceholderCheck],
        rules: Sequence[SuspicionRule] = (),
        *,
        threshold: int | None = None,
    ) -> None:
        self._checks = tuple(checks)
        self._rules = tuple(rules)
        self._threshold = self.THRESHOLD if threshold is None else threshold

    def score(self, data: Mapping[str, Any]) -> SuspicionReport:
        score = 0
        issues: list[ValidationIssue] = []
        for check in self._checks:
            found = check.find(data)
            if not found:
                continue
            score += 1
            for path, value in found:
                dotted = ".".join(str(segment) for segment in path)
                issues.append(
                    ValidationIssue(
                        message=f"Value {value!r} for '{dotted}' looks like a placeholder",
                        path=path,
                        code=SUSPICIOUS_VALUE,
                        invalid_value=value,
                        metadata={"check": "placeholder"},
                    )
                )
        for rule in self._rules:
            if rule.predicate(data):
                score += rule.weight
                issues.append(
                    ValidationIssue(
                        message=rule.message,
                        code=SUSPICIOUS_VALUE,
                        metadata={"check": "rule", "weight": rule.weight},
                    )
                )
        return SuspicionReport(score=score, threshold=self._threshold, issues=tuple(issues))


def total_amount(data: Mapping[str, Any], path: str) -> Decimal:
    """Amount at dotted `path`, 0 when absent or not numeric."""
    for _, value in resolve_path(data, tuple(path.split("."))):
        amount = parse_amount(value) if value is not None else None
        if amount is not None and math.isfinite(amount):
            return Decimal(str(amount))
    return Decimal(0)
