import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from docscan.confidence.models import ConfidenceBreakdown
from docscan.documents.kinds import DocumentKind
from docscan.hallucination.models import HallucinationWarning
from docscan.validation.models import ValidationIssue


class Stage(str, Enum):
    OCR = "ocr"
    EXTRACTION = "extraction"
    VALIDATION = "validation"
    HALLUCINATION = "hallucination"


class PipelineState(str, Enum):
    RECEIVED = "Received"
    OCR_IN_PROGRESS = "OCRInProgress"
    OCR_COMPLETE = "OCRComplete"
    EXTRACTION_IN_PROGRESS = "ExtractionInProgress"
    EXTRACTION_COMPLETE = "ExtractionComplete"
    VALIDATING = "Validating"
    HALLUCINATION_CHECK = "HallucinationCheck"
    DONE = "Done"
    FAILED = "Failed"


@dataclass(frozen=True)
class ProcessingResult:
    """Validated, confidence-scored record for one document.

    `data` is a read-only deep copy, so later changes to the mapping the
    result was built from do not leak into it.
    """

    data: Mapping[str, Any]
    confidence: ConfidenceBreakdown
    kind: DocumentKind
    source_text: str = ""
    document_name: str | None = None
    hallucinations: tuple[ValidationIssue, ...] = ()
    warnings: tuple[HallucinationWarning, ...] = ()
    suspicious: tuple[ValidationIssue, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(copy.deepcopy(dict(self.data))))

    @property
    def state(self) -> PipelineState:
        return PipelineState.DONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "done",
            "document": self.document_name,
            "kind": self.kind.value,
            "data": copy.deepcopy(dict(self.data)),
            "confidence": {
                "ocr": self.confidence.ocr,
                "extraction": self.confidence.extraction,
                "overall": self.confidence.overall,
                "warnings": list(self.confidence.warnings),
            },
            "hallucinations": [_issue_to_dict(issue) for issue in self.hallucinations],
            "suspicious": [_issue_to_dict(issue) for issue in self.suspicious],
        }


@dataclass(frozen=True)
class ProcessingFailure:
    """Terminal failure tagged with the stage where it happened."""

    stage: Stage
    message: str
    error: BaseException
    document_name: str | None = None
    issues: tuple[ValidationIssue, ...] = field(default=())

    @property
    def state(self) -> PipelineState:
        return PipelineState.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "failed",
            "document": self.document_name,
            "stage": self.stage.value,
            "message": self.message,
            "issues": [_issue_to_dict(issue) for issue in self.issues],
        }


ProcessingOutcome = ProcessingResult | ProcessingFailure


def _issue_to_dict(issue: ValidationIssue) -> dict[str, Any]:
    return {
        "path": list(issue.path),
        "code": issue.code,
        "message": issue.message,
        "invalid_value": issue.invalid_value,
    }
