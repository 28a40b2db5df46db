import asyncio
import io

import pdfplumber

from docscan.ocr.base import BaseOcrService
from docscan.ocr.exceptions import UnsupportedDocumentError
from docscan.ocr.models import BoundingBox, Document, MediaType, OcrResult
from docscan.services.exceptions import ClientRequestError


class PdfPlumberOcrAdapter(BaseOcrService):
    """Reads the embedded text layer of PDFs with pdfplumber.

    No recognition model is involved: pages with text get confidence 1.0,
    blank pages 0.0. Images are rejected.
    """

    async def process(self, document: Document) -> list[OcrResult]:
        if document.media_type is not MediaType.PDF:
            raise UnsupportedDocumentError(
                f"pdfplumber can only read PDFs, got {document.effective_mime_type}"
            )
        return await asyncio.to_thread(self._read_pages, document.content)

    @staticmethod
    def _read_pages(pdf_bytes: bytes) -> list[OcrResult]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                results = []
                for number, page in enumerate(pdf.pages, start=1):
                    text = (page.extract_text() or "").strip()
                    results.append(
                        OcrResult(
                            text=text,
                            confidence=1.0 if text else 0.0,
                            page_number=number,
                            bounding_box=BoundingBox(
                                x=0, y=0, width=float(page.width), height=float(page.height)
                            ),
                        )
                    )
            return results
        except Exception as exc:
            raise ClientRequestError(f"pdfplumber could not read document: {exc}") from exc
