from dataclasses import dataclass


@dataclass(frozen=True)
class ConfidenceBreakdown:
    """Per-stage and overall confidence attached to a processing result."""

    ocr: float
    extraction: float
    overall: float
    warnings: tuple[str, ...] = ()

    @property
    def flagged(self) -> bool:
        return bool(self.warnings)
