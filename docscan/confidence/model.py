"""Aggregation of per-stage confidence scores."""

import math
from collections.abc import Sequence
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal

from docscan.confidence.models import ConfidenceBreakdown
from docscan.logging.logger import Log
from docscan.ocr.models import OcrResult

_TWO_PLACES = Decimal("0.01")


class ConfidenceModel:
    """Combines OCR and extraction confidence into one overall score.

    The overall score is the mean of both stages, rounded half-up to two
    decimals and clamped to [0, 1]. Invalid inputs fail closed to 0.
    """

    def aggregate(self, ocr_confidence: float, extraction_confidence: float) -> float:
        return self.score(ocr_confidence, extraction_confidence).overall

    def score(
        self, ocr_confidence: float, extraction_confidence: float
    ) -> ConfidenceBreakdown:
        warnings = [
            warning
            for warning in (
                _integrity_warning("ocr", ocr_confidence),
                _integrity_warning("extraction", extraction_confidence),
            )
            if warning is not None
        ]
        if warnings:
            for warning in warnings:
                Log.warning(f"Confidence data integrity: {warning}")
            return ConfidenceBreakdown(
                ocr=_safe(ocr_confidence),
                extraction=_safe(extraction_confidence),
                overall=0.0,
                warnings=tuple(warnings),
            )

        mean = (Decimal(str(ocr_confidence)) + Decimal(str(extraction_confidence))) / 2
        overall = float(mean.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
        return ConfidenceBreakdown(
            ocr=float(ocr_confidence),
            extraction=float(extraction_confidence),
            overall=min(1.0, max(0.0, overall)),
        )

    def cap(
        self, breakdown: ConfidenceBreakdown, ceiling: float, reason: str
    ) -> ConfidenceBreakdown:
        """Lower `overall` to at most `ceiling` and record `reason` as a warning."""
        return replace(
            breakdown,
            overall=min(breakdown.overall, ceiling),
            warnings=(*breakdown.warnings, reason),
        )

    @staticmethod
    def page_confidence(pages: Sequence[OcrResult]) -> float:
        """OCR stage confidence: mean of page confidences, 0 for no pages."""
        if not pages:
            return 0.0
        return sum(page.confidence for page in pages) / len(pages)


def _integrity_warning(stage: str, value: object) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"{stage} confidence is not a number: {value!r}"
    if math.isnan(value):
        return f"{stage} confidence is NaN"
    if not 0.0 <= value <= 1.0:
        return f"{stage} confidence {value} is outside [0, 1]"
    return None


def _safe(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, float(value)))
