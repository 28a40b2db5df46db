from abc import ABC, abstractmethod

from docscan.ocr.models import Document, OcrResult


class BaseOcrService(ABC):
    """Contract for OCR boundary adapters."""

    @abstractmethod
    async def process(self, document: Document) -> list[OcrResult]:
        """Recognize text in a document.

        Args:
            document: Raw document bytes and media type.

        Returns:
            One OcrResult per page, in page order.

        Raises:
            ServiceCallError: classified provider or transport failure.
        """
