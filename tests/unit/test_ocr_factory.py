import pytest

from docscan.config.settings import Settings
from docscan.ocr.example_adapter import ExampleOcrAdapter
from docscan.ocr.factory import OcrServiceFactory
from docscan.ocr.mistral_adapter import MistralOcrAdapter
from docscan.ocr.models import Document, MediaType
from docscan.ocr.pdfplumber_adapter import PdfPlumberOcrAdapter
from docscan.validation.exceptions import ValidationError


class TestOcrServiceFactory:
    def test_creates_example_adapter(self) -> None:
        adapter = OcrServiceFactory.create(Settings(ocr_provider="example"))
        assert isinstance(adapter, ExampleOcrAdapter)

    @pytest.mark.asyncio
    async def test_example_adapter_uses_configured_text(self) -> None:
        adapter = OcrServiceFactory.create(
            Settings(ocr_provider="example", ocr_example_text="Total: $46.41")
        )
        results = await adapter.process(Document(content=b"", media_type=MediaType.IMAGE))
        assert [r.text for r in results] == ["Total: $46.41"]

    def test_creates_pdfplumber_adapter(self) -> None:
        adapter = OcrServiceFactory.create(Settings(ocr_provider="PDFPLUMBER"))
        assert isinstance(adapter, PdfPlumberOcrAdapter)

    def test_creates_mistral_adapter(self) -> None:
        settings = Settings(
            ocr_provider="mistral", ocr_mistral_api_key="mk-0123456789abcdefghijkl"
        )
        assert isinstance(OcrServiceFactory.create(settings), MistralOcrAdapter)

    def test_mistral_without_key_is_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            OcrServiceFactory.create(Settings(ocr_provider="mistral"))
        assert exc_info.value.paths == [("api_key",)]

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown OCR provider 'tesseract'"):
            OcrServiceFactory.create(Settings(ocr_provider="tesseract"))
