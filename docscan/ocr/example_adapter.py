"""Example OCR adapter.

Use this module as a reference when implementing new OCR providers.
Implement BaseOcrService and register the provider in OcrServiceFactory.
"""

from typing import ClassVar

from docscan.ocr.base import BaseOcrService
from docscan.ocr.models import Document, OcrResult


class ExampleOcrAdapter(BaseOcrService):
    """Returns fixed page text without network calls."""

    DEFAULT_TEXT: ClassVar[str] = "Check #12345\nPay to: John Smith\nAmount: $1,234.56"

    def __init__(self, pages: list[str] | None = None, confidence: float = 1.0) -> None:
        self._pages = pages or [self.DEFAULT_TEXT]
        self._confidence = confidence

    async def process(self, document: Document) -> list[OcrResult]:
        _ = document
        return [
            OcrResult(text=text, confidence=self._confidence, page_number=number)
            for number, text in enumerate(self._pages, start=1)
        ]
