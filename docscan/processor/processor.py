import asyncio
from collections.abc import Sequence
from typing import Literal

from docscan.confidence.model import ConfidenceModel
from docscan.config.settings import Settings
from docscan.documents.kinds import DocumentKind
from docscan.documents.registry import DocumentRegistry
from docscan.extraction.base import BaseExtractionService
from docscan.extraction.factory import ExtractorFactory
from docscan.extraction.models import ExtractionRequest
from docscan.hallucination.factory import HallucinationDetectorFactory
from docscan.hallucination.models import HallucinationWarning
from docscan.hallucination.suspicion import SuspicionScorer
from docscan.logging.logger import Log
from docscan.ocr.base import BaseOcrService
from docscan.ocr.factory import OcrServiceFactory
from docscan.ocr.models import Document, OcrResult
from docscan.processor.exceptions import ProcessingError
from docscan.processor.models import (
    PipelineState,
    ProcessingFailure,
    ProcessingOutcome,
    ProcessingResult,
    Stage,
)
from docscan.result import Err
from docscan.retry.config import RetryConfig
from docscan.retry.policy import RetryPolicy
from docscan.services.exceptions import MalformedResponseError
from docscan.validation.models import ValidationIssue
from docscan.validation.provider_config import RetryConfigValidator

HallucinationPolicy = Literal["warn", "reject"]


class DocumentProcessor:
    """Orchestrates the document pipeline.

    Pipeline: OCR -> extraction -> normalization + validation ->
    hallucination check -> confidence. Stages run strictly in order; only
    the two boundary calls go through RetryPolicy and no stage is retried
    once it has failed.
    """

    def __init__(
        self,
        *,
        ocr_service: BaseOcrService,
        extractor: BaseExtractionService,
        retry_policy: RetryPolicy,
        registry: DocumentRegistry,
        confidence_model: ConfidenceModel,
        detector_factory: HallucinationDetectorFactory,
        hallucination_policy: HallucinationPolicy = "warn",
    ) -> None:
        if hallucination_policy not in ("warn", "reject"):
            raise ValueError(
                f"Unknown hallucination policy '{hallucination_policy}'. "
                "Choose from: ['warn', 'reject']"
            )
        self._ocr = ocr_service
        self._extractor = extractor
        self._retry = retry_policy
        self._registry = registry
        self._confidence = confidence_model
        self._detectors = detector_factory
        self._hallucination_policy = hallucination_policy

    async def process(
        self, document: Document, kind: DocumentKind | str
    ) -> ProcessingOutcome:
        """Run one document through every stage.

        Returns:
            ProcessingResult on success, or ProcessingFailure naming the
            stage that failed. Boundary errors never escape as exceptions.
        """
        kind = _as_kind(kind)
        label = document.label
        profile = self._registry.for_kind(kind)
        self._enter(PipelineState.RECEIVED, label, kind=kind.value)

        self._enter(PipelineState.OCR_IN_PROGRESS, label)
        ocr_result = await self._retry.execute(
            lambda: self._ocr.process(document), label=f"OCR for {label}"
        )
        if isinstance(ocr_result, Err):
            return self._fail(Stage.OCR, ocr_result.error, document)
        pages = sorted(ocr_result.value, key=lambda page: page.page_number or 0)
        source_text = _join_pages(pages)
        if not source_text:
            return self._fail(
                Stage.OCR, MalformedResponseError("OCR returned no text"), document
            )
        self._enter(PipelineState.OCR_COMPLETE, label, pages=len(pages))

        request = ExtractionRequest(source_text=source_text, target_schema=profile.schema)
        self._enter(PipelineState.EXTRACTION_IN_PROGRESS, label)
        extraction_result = await self._retry.execute(
            lambda: self._extractor.extract(request), label=f"Extraction for {label}"
        )
        if isinstance(extraction_result, Err):
            return self._fail(Stage.EXTRACTION, extraction_result.error, document)
        record = extraction_result.value
        self._enter(PipelineState.EXTRACTION_COMPLETE, label)

        self._enter(PipelineState.VALIDATING, label)
        data = profile.normalizer(record.json)
        validation = profile.validator.validate(data)
        if isinstance(validation, Err):
            error = validation.error
            return self._fail(Stage.VALIDATION, error, document, issues=error.issues)

        self._enter(PipelineState.HALLUCINATION_CHECK, label)
        hallucinations = self._detectors.detect(kind, source_text, data)
        warnings: tuple[HallucinationWarning, ...] = ()
        if hallucinations:
            warning = HallucinationWarning(kind.value, hallucinations)
            if self._hallucination_policy == "reject":
                return self._fail(
                    Stage.HALLUCINATION, warning, document, issues=hallucinations
                )
            Log.warning(f"Hallucination check flagged {label}: {warning}")
            warnings = (warning,)

        confidence = self._confidence.score(
            ConfidenceModel.page_confidence(pages), record.extraction_confidence
        )
        suspicion = self._detectors.assess(kind, data)
        if suspicion.flagged:
            reason = f"placeholder values suspected (score {suspicion.score})"
            Log.warning(f"Suspicious extraction for {label}: {reason}")
            data = {**data, "isValidInput": False}
            confidence = self._confidence.cap(
                confidence, SuspicionScorer.CONFIDENCE_CEILING, reason
            )
        self._enter(PipelineState.DONE, label, overall=confidence.overall)
        return ProcessingResult(
            data=data,
            confidence=confidence,
            kind=kind,
            source_text=source_text,
            document_name=document.name,
            hallucinations=hallucinations,
            warnings=warnings,
            suspicious=suspicion.issues if suspicion.flagged else (),
        )

    async def process_or_raise(
        self, document: Document, kind: DocumentKind | str
    ) -> ProcessingResult:
        """Like `process`, but raise ProcessingError instead of returning a failure."""
        outcome = await self.process(document, kind)
        if isinstance(outcome, ProcessingFailure):
            raise ProcessingError(outcome)
        return outcome

    async def process_batch(
        self, documents: Sequence[Document], kind: DocumentKind | str
    ) -> list[ProcessingOutcome]:
        """Process documents concurrently; outcomes keep the submission order."""
        Log.info(f"Processing batch of {len(documents)} document(s)")
        outcomes = await asyncio.gather(*(self.process(doc, kind) for doc in documents))
        failed = sum(isinstance(outcome, ProcessingFailure) for outcome in outcomes)
        Log.info(f"Batch finished: {len(outcomes) - failed} done, {failed} failed")
        return list(outcomes)

    def run_batch(
        self, documents: Sequence[Document], kind: DocumentKind | str
    ) -> list[ProcessingOutcome]:
        """Synchronous entry point for `process_batch`."""
        return asyncio.run(self.process_batch(documents, kind))

    @staticmethod
    def _enter(state: PipelineState, label: str, **context: object) -> None:
        Log.debug(f"Pipeline state -> {state.value}", document=label, **context)

    @staticmethod
    def _fail(
        stage: Stage,
        error: BaseException,
        document: Document,
        *,
        issues: tuple[ValidationIssue, ...] = (),
    ) -> ProcessingFailure:
        message = str(error) or type(error).__name__
        Log.error(
            f"Pipeline state -> {PipelineState.FAILED.value}: {message}",
            document=document.label,
            stage=stage.value,
        )
        return ProcessingFailure(
            stage=stage,
            message=message,
            error=error,
            document_name=document.name,
            issues=issues,
        )


def _as_kind(kind: DocumentKind | str) -> DocumentKind:
    if isinstance(kind, DocumentKind):
        return kind
    return DocumentKind.parse(kind)


def _join_pages(pages: Sequence[OcrResult]) -> str:
    return "\n\n".join(page.text.strip() for page in pages if page.text.strip())


def build_processor(settings: Settings) -> DocumentProcessor:
    """Build a DocumentProcessor with all adapters configured from settings."""
    RetryConfigValidator().assert_valid(
        {
            "initial_interval_ms": settings.retry_initial_interval_ms,
            "max_interval_ms": settings.retry_max_interval_ms,
            "backoff_exponent": settings.retry_backoff_exponent,
            "max_elapsed_time_ms": settings.retry_max_elapsed_time_ms,
            "retry_on_connection_error": settings.retry_on_connection_error,
        }
    )
    retry_policy = RetryPolicy(
        RetryConfig.from_settings(settings),
        attempt_timeout_seconds=settings.retry_attempt_timeout_seconds,
    )
    return DocumentProcessor(
        ocr_service=OcrServiceFactory.create(settings),
        extractor=ExtractorFactory.create(settings),
        retry_policy=retry_policy,
        registry=DocumentRegistry.default(),
        confidence_model=ConfidenceModel(),
        detector_factory=HallucinationDetectorFactory(),
        hallucination_policy=settings.hallucination_policy,
    )
