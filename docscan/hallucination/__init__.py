from docscan.hallucination.base import (
    UNSUPPORTED_VALUE,
    BaseHallucinationDetector,
    FieldTraceDetector,
)
from docscan.hallucination.checks import AmountCheck, DateCheck, DigitsCheck, TextCheck
from docscan.hallucination.detectors import (
    CheckHallucinationDetector,
    ReceiptHallucinationDetector,
)
from docscan.hallucination.factory import HallucinationDetectorFactory
from docscan.hallucination.models import HallucinationWarning
from docscan.hallucination.suspicion import (
    SUSPICIOUS_VALUE,
    PlaceholderCheck,
    SuspicionReport,
    SuspicionRule,
    SuspicionScorer,
)

__all__ = [
    "SUSPICIOUS_VALUE",
    "UNSUPPORTED_VALUE",
    "AmountCheck",
    "BaseHallucinationDetector",
    "CheckHallucinationDetector",
    "DateCheck",
    "DigitsCheck",
    "FieldTraceDetector",
    "HallucinationDetectorFactory",
    "HallucinationWarning",
    "PlaceholderCheck",
    "ReceiptHallucinationDetector",
    "SuspicionReport",
    "SuspicionRule",
    "SuspicionScorer",
    "TextCheck",
]
