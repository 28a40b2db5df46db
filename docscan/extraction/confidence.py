from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, ClassVar


class ExtractionConfidenceCalculator:
    """Scores an extraction from how the completion ended and what it returned.

    score = 0.6 * finish factor + 0.2 * structure factor, cut to 30% when the
    model marked the input as invalid, then blended 80/20 with a confidence
    the model reported itself.
    """

    FINISH_WEIGHT: ClassVar[float] = 0.6
    STRUCTURE_WEIGHT: ClassVar[float] = 0.2
    INVALID_INPUT_FACTOR: ClassVar[float] = 0.3
    REPORTED_CONFIDENCE_WEIGHT: ClassVar[float] = 0.2

    def calculate(self, data: Mapping[str, Any], finish_reason: str | None) -> float:
        finish = 1.0 if finish_reason == "stop" else 0.75
        structure = 0.9 if data else 0.3
        score = finish * self.FINISH_WEIGHT + structure * self.STRUCTURE_WEIGHT

        if data.get("isValidInput") is False:
            score *= self.INVALID_INPUT_FACTOR

        reported = data.get("confidence")
        if (
            isinstance(reported, (int, float))
            and not isinstance(reported, bool)
            and 0.0 <= reported <= 1.0
        ):
            weight = self.REPORTED_CONFIDENCE_WEIGHT
            score = score * (1 - weight) + reported * weight

        rounded = Decimal(str(score)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return float(rounded)
