from collections.abc import Mapping
from enum import Enum
from typing import Any, ClassVar

from docscan.hallucination.base import BaseHallucinationDetector
from docscan.hallucination.detectors import (
    CheckHallucinationDetector,
    ReceiptHallucinationDetector,
)
from docscan.hallucination.suspicion import SuspicionReport, SuspicionScorer
from docscan.logging.logger import Log
from docscan.validation.models import ValidationIssue


class HallucinationDetectorFactory:
    """Maps a document kind to its detector. Unknown kinds get no detector."""

    DETECTORS: ClassVar[dict[str, type[BaseHallucinationDetector]]] = {
        "check": CheckHallucinationDetector,
        "receipt": ReceiptHallucinationDetector,
    }

    def __init__(
        self, detectors: Mapping[str, BaseHallucinationDetector] | None = None
    ) -> None:
        if detectors is None:
            detectors = {kind: cls() for kind, cls in self.DETECTORS.items()}
        self._detectors = {kind.lower(): detector for kind, detector in detectors.items()}

    def for_kind(self, kind: str | Enum) -> BaseHallucinationDetector | None:
        key = _kind_key(kind)
        detector = self._detectors.get(key)
        if detector is None:
            Log.warning(f"No hallucination detector for document kind '{key}'")
        return detector

    def detect(
        self, kind: str | Enum, source_text: str, extracted: Mapping[str, Any]
    ) -> tuple[ValidationIssue, ...]:
        detector = self.for_kind(kind)
        if detector is None:
            return ()
        return detector.detect(source_text, extracted)

    def assess(self, kind: str | Enum, extracted: Mapping[str, Any]) -> SuspicionReport:
        detector = self.for_kind(kind)
        if detector is None:
            return SuspicionReport(score=0, threshold=SuspicionScorer.THRESHOLD)
        return detector.assess(extracted)

    @staticmethod
    def infer_kind(extracted: Mapping[str, Any]) -> str | None:
        """Guess the document kind from the fields present in an extraction."""
        if "checkNumber" in extracted or "payee" in extracted:
            return "check"
        if "merchant" in extracted or "totals" in extracted:
            return "receipt"
        return None


def _kind_key(kind: str | Enum) -> str:
    value = kind.value if isinstance(kind, Enum) else kind
    return str(value).lower()
