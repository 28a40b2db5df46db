from typing import Any
from unittest.mock import AsyncMock

import pytest

from docscan.confidence.model import ConfidenceModel
from docscan.documents.kinds import DocumentKind
from docscan.documents.registry import DocumentRegistry
from docscan.extraction.base import BaseExtractionService
from docscan.extraction.models import ExtractedRecord
from docscan.hallucination.factory import HallucinationDetectorFactory
from docscan.hallucination.models import HallucinationWarning
from docscan.ocr.base import BaseOcrService
from docscan.ocr.example_adapter import ExampleOcrAdapter
from docscan.ocr.models import Document, MediaType, OcrResult
from docscan.processor.exceptions import ProcessingError
from docscan.processor.models import (
    PipelineState,
    ProcessingFailure,
    ProcessingResult,
    Stage,
)
from docscan.processor.processor import DocumentProcessor
from docscan.retry.config import RetryConfig
from docscan.retry.policy import RetryPolicy
from docscan.services.exceptions import (
    AuthenticationError,
    MalformedResponseError,
    ServiceError,
)

CHECK_DATA = {"checkNumber": "12345", "payee": "John Smith", "amount": 1234.56}


def _document(name: str = "check.png") -> Document:
    return Document(content=b"image", media_type=MediaType.IMAGE, name=name)


def _retry_policy(max_elapsed_time_ms: int = 25000) -> RetryPolicy:
    config = RetryConfig(
        initial_interval_ms=100,
        max_interval_ms=1000,
        backoff_exponent=2.0,
        max_elapsed_time_ms=max_elapsed_time_ms,
        retry_on_connection_error=True,
    )
    return RetryPolicy(config, sleep=AsyncMock())


def _extractor(data: dict[str, Any] | None = None, confidence: float = 0.78) -> AsyncMock:
    extractor = AsyncMock(spec=BaseExtractionService)
    extractor.extract.return_value = ExtractedRecord(
        json=dict(CHECK_DATA if data is None else data),
        extraction_confidence=confidence,
        finish_reason="stop",
    )
    return extractor


def _processor(
    *,
    ocr: BaseOcrService | None = None,
    extractor: BaseExtractionService | None = None,
    retry_policy: RetryPolicy | None = None,
    hallucination_policy: str = "warn",
) -> DocumentProcessor:
    return DocumentProcessor(
        ocr_service=ocr or ExampleOcrAdapter(),
        extractor=extractor or _extractor(),
        retry_policy=retry_policy or _retry_policy(),
        registry=DocumentRegistry.default(),
        confidence_model=ConfidenceModel(),
        detector_factory=HallucinationDetectorFactory(),
        hallucination_policy=hallucination_policy,  # type: ignore[arg-type]
    )


class TestDocumentProcessor:
    @pytest.mark.asyncio
    async def test_happy_path_returns_result(self) -> None:
        outcome = await _processor().process(_document(), DocumentKind.CHECK)

        assert isinstance(outcome, ProcessingResult)
        assert outcome.state is PipelineState.DONE
        assert outcome.data == CHECK_DATA
        assert outcome.kind is DocumentKind.CHECK
        assert outcome.document_name == "check.png"
        assert outcome.confidence.ocr == 1.0
        assert outcome.confidence.extraction == 0.78
        assert outcome.confidence.overall == 0.89
        assert outcome.hallucinations == ()
        assert outcome.warnings == ()

    @pytest.mark.asyncio
    async def test_accepts_kind_as_string(self) -> None:
        outcome = await _processor().process(_document(), "check")
        assert isinstance(outcome, ProcessingResult)

    @pytest.mark.asyncio
    async def test_unknown_kind_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown document kind"):
            await _processor().process(_document(), "invoice")

    @pytest.mark.asyncio
    async def test_extraction_receives_joined_page_text(self) -> None:
        extractor = _extractor()
        ocr = ExampleOcrAdapter(pages=["Check #12345", "Pay to: John Smith"])

        await _processor(ocr=ocr, extractor=extractor).process(_document(), "check")

        request = extractor.extract.call_args.args[0]
        assert request.source_text == "Check #12345\n\nPay to: John Smith"
        assert request.target_schema.name == "check_extraction"

    @pytest.mark.asyncio
    async def test_pages_are_sorted_before_joining(self) -> None:
        ocr = AsyncMock(spec=BaseOcrService)
        ocr.process.return_value = [
            OcrResult(text="second", confidence=0.5, page_number=2),
            OcrResult(text="first", confidence=1.0, page_number=1),
        ]
        extractor = _extractor()

        await _processor(ocr=ocr, extractor=extractor).process(_document(), "check")

        assert extractor.extract.call_args.args[0].source_text == "first\n\nsecond"

    @pytest.mark.asyncio
    async def test_ocr_failure_stops_pipeline(self) -> None:
        ocr = AsyncMock(spec=BaseOcrService)
        ocr.process.side_effect = AuthenticationError("bad key", status_code=401)
        extractor = _extractor()

        outcome = await _processor(ocr=ocr, extractor=extractor).process(_document(), "check")

        assert isinstance(outcome, ProcessingFailure)
        assert outcome.state is PipelineState.FAILED
        assert outcome.stage is Stage.OCR
        assert outcome.message == "bad key"
        assert isinstance(outcome.error, AuthenticationError)
        extractor.extract.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transient_ocr_error_is_retried(self) -> None:
        ocr = AsyncMock(spec=BaseOcrService)
        ocr.process.side_effect = [
            ServiceError("busy", status_code=503),
            [OcrResult(text="Check #12345 John Smith $1,234.56", confidence=1.0)],
        ]
        retry_policy = _retry_policy()

        outcome = await _processor(ocr=ocr, retry_policy=retry_policy).process(
            _document(), "check"
        )

        assert isinstance(outcome, ProcessingResult)
        assert ocr.process.await_count == 2

    @pytest.mark.asyncio
    async def test_exhausted_retries_fail_with_last_error(self) -> None:
        ocr = AsyncMock(spec=BaseOcrService)
        ocr.process.side_effect = ServiceError("still busy", status_code=503)

        outcome = await _processor(
            ocr=ocr, retry_policy=_retry_policy(max_elapsed_time_ms=0)
        ).process(_document(), "check")

        assert isinstance(outcome, ProcessingFailure)
        assert outcome.stage is Stage.OCR
        assert outcome.message == "still busy"

    @pytest.mark.asyncio
    async def test_blank_ocr_text_fails_ocr_stage(self) -> None:
        outcome = await _processor(ocr=ExampleOcrAdapter(pages=["   "])).process(
            _document(), "check"
        )

        assert isinstance(outcome, ProcessingFailure)
        assert outcome.stage is Stage.OCR
        assert isinstance(outcome.error, MalformedResponseError)
        assert outcome.message == "OCR returned no text"

    @pytest.mark.asyncio
    async def test_extraction_failure_is_tagged(self) -> None:
        extractor = AsyncMock(spec=BaseExtractionService)
        extractor.extract.side_effect = MalformedResponseError("AI returned invalid JSON")

        outcome = await _processor(extractor=extractor).process(_document(), "check")

        assert isinstance(outcome, ProcessingFailure)
        assert outcome.stage is Stage.EXTRACTION
        extractor.extract.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_validation_failure_reports_every_issue(self) -> None:
        extractor = _extractor({"payee": "John Smith"})

        outcome = await _processor(extractor=extractor).process(_document(), "check")

        assert isinstance(outcome, ProcessingFailure)
        assert outcome.stage is Stage.VALIDATION
        assert sorted(issue.path for issue in outcome.issues) == [
            ("amount",),
            ("checkNumber",),
        ]
        assert all(issue.code == "required" for issue in outcome.issues)

    @pytest.mark.asyncio
    async def test_extracted_data_is_normalized_before_validation(self) -> None:
        extractor = _extractor({"checkNumber": 12345, "payee": "John Smith", "amount": "$1,234.56"})

        outcome = await _processor(extractor=extractor).process(_document(), "check")

        assert isinstance(outcome, ProcessingResult)
        assert outcome.data == CHECK_DATA

    @pytest.mark.asyncio
    async def test_hallucination_warns_by_default(self) -> None:
        extractor = _extractor({**CHECK_DATA, "payee": "Jane Doe"})

        outcome = await _processor(extractor=extractor).process(_document(), "check")

        assert isinstance(outcome, ProcessingResult)
        assert [issue.path for issue in outcome.hallucinations] == [("payee",)]
        assert len(outcome.warnings) == 1
        assert isinstance(outcome.warnings[0], HallucinationWarning)

    @pytest.mark.asyncio
    async def test_hallucination_reject_policy_fails(self) -> None:
        extractor = _extractor({**CHECK_DATA, "payee": "Jane Doe"})

        outcome = await _processor(
            extractor=extractor, hallucination_policy="reject"
        ).process(_document(), "check")

        assert isinstance(outcome, ProcessingFailure)
        assert outcome.stage is Stage.HALLUCINATION
        assert [issue.path for issue in outcome.issues] == [("payee",)]

    @pytest.mark.asyncio
    async def test_placeholder_values_cap_confidence(self) -> None:
        extractor = _extractor({"checkNumber": "1234", "payee": "John Doe", "amount": 100.0})

        outcome = await _processor(extractor=extractor).process(_document(), "check")

        assert isinstance(outcome, ProcessingResult)
        assert outcome.data["isValidInput"] is False
        assert outcome.confidence.extraction == 0.78
        assert outcome.confidence.overall == 0.3
        assert outcome.confidence.warnings == ("placeholder values suspected (score 5)",)
        assert {issue.code for issue in outcome.suspicious} == {"suspicious_value"}
        assert outcome.to_dict()["suspicious"]

    @pytest.mark.asyncio
    async def test_single_placeholder_leaves_confidence(self) -> None:
        outcome = await _processor().process(_document(), "check")

        assert isinstance(outcome, ProcessingResult)
        assert "isValidInput" not in outcome.data
        assert outcome.suspicious == ()
        assert outcome.confidence.warnings == ()

    def test_invalid_hallucination_policy_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown hallucination policy"):
            _processor(hallucination_policy="ignore")

    @pytest.mark.asyncio
    async def test_process_or_raise_raises_processing_error(self) -> None:
        extractor = _extractor({"payee": "John Smith"})

        with pytest.raises(ProcessingError) as exc_info:
            await _processor(extractor=extractor).process_or_raise(_document(), "check")
        assert exc_info.value.stage is Stage.VALIDATION
        assert len(exc_info.value.issues) == 2

    @pytest.mark.asyncio
    async def test_process_batch_keeps_order(self) -> None:
        documents = [_document(f"doc-{i}.png") for i in range(3)]

        outcomes = await _processor().process_batch(documents, "check")

        assert [o.document_name for o in outcomes] == ["doc-0.png", "doc-1.png", "doc-2.png"]


class TestProcessingOutcomeSerialization:
    @pytest.mark.asyncio
    async def test_result_to_dict(self) -> None:
        outcome = await _processor().process(_document(), "check")
        payload = outcome.to_dict()
        assert payload["status"] == "done"
        assert payload["kind"] == "check"
        assert payload["confidence"]["overall"] == 0.89

    @pytest.mark.asyncio
    async def test_failure_to_dict(self) -> None:
        outcome = await _processor(extractor=_extractor({"payee": "x"})).process(
            _document(), "check"
        )
        payload = outcome.to_dict()
        assert payload["status"] == "failed"
        assert payload["stage"] == "validation"
        assert {tuple(issue["path"]) for issue in payload["issues"]} == {
            ("amount",),
            ("checkNumber",),
        }


class TestProcessingResultData:
    def _result(self, data: dict[str, Any]) -> ProcessingResult:
        return ProcessingResult(
            data=data,
            confidence=ConfidenceModel().score(1.0, 0.78),
            kind=DocumentKind.CHECK,
        )

    def test_data_is_read_only(self) -> None:
        result = self._result(dict(CHECK_DATA))
        with pytest.raises(TypeError):
            result.data["payee"] = "Someone Else"  # type: ignore[index]

    def test_data_is_detached_from_input(self) -> None:
        source = {"checkNumber": "12345", "metadata": {"warnings": []}}
        result = self._result(source)

        source["payee"] = "Someone Else"
        source["metadata"]["warnings"].append("late")

        assert "payee" not in result.data
        assert result.data["metadata"] == {"warnings": []}

    def test_to_dict_returns_independent_copy(self) -> None:
        result = self._result({"metadata": {"warnings": []}})
        payload = result.to_dict()
        payload["data"]["metadata"]["warnings"].append("changed")
        assert result.data["metadata"] == {"warnings": []}
