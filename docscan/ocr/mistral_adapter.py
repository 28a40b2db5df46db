"""Mistral OCR adapter over the REST API."""

import base64
from typing import Any

import httpx

from docscan.logging.logger import Log
from docscan.ocr.base import BaseOcrService
from docscan.ocr.exceptions import UnsupportedDocumentError
from docscan.ocr.models import SUPPORTED_MIME_TYPES, BoundingBox, Document, MediaType, OcrResult
from docscan.services.exceptions import (
    MalformedResponseError,
    NetworkError,
    classify_status,
)


class MistralOcrAdapter(BaseOcrService):
    """Sends documents to Mistral OCR as base64 data URLs.

    The API does not report recognition confidence, so every page is
    given 1.0 and the page dimensions become the bounding box.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "mistral-ocr-latest",
        base_url: str = "https://api.mistral.ai/v1",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def process(self, document: Document) -> list[OcrResult]:
        payload = {
            "model": self._model,
            "document": self._document_payload(document),
        }
        Log.debug(
            f"Sending {len(document.content)} bytes to Mistral OCR",
            document=document.label,
        )
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout_seconds,
                transport=self._transport,
                headers={"Authorization": f"Bearer {self._api_key}"},
            ) as client:
                response = await client.post("/ocr", json=payload)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"OCR request timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"OCR provider network error: {exc}") from exc

        if response.status_code >= 400:
            raise classify_status(
                response.status_code,
                f"OCR provider returned {response.status_code}: {response.text[:200]}",
            )
        return self._parse_pages(response)

    @staticmethod
    def _document_payload(document: Document) -> dict[str, str]:
        mime_type = document.effective_mime_type
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise UnsupportedDocumentError(f"Unsupported mime type '{mime_type}'")
        encoded = base64.b64encode(document.content).decode("ascii")
        data_url = f"data:{mime_type};base64,{encoded}"
        if document.media_type is MediaType.PDF:
            return {"type": "document_url", "document_url": data_url}
        return {"type": "image_url", "image_url": data_url}

    @staticmethod
    def _parse_pages(response: httpx.Response) -> list[OcrResult]:
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"OCR response is not JSON: {exc}") from exc

        pages = body.get("pages") if isinstance(body, dict) else None
        if not isinstance(pages, list):
            raise MalformedResponseError("OCR response is missing 'pages'")

        results = [_page_to_result(page, position) for position, page in enumerate(pages)]
        return sorted(results, key=lambda result: result.page_number or 0)


def _page_to_result(page: Any, position: int) -> OcrResult:
    if not isinstance(page, dict):
        raise MalformedResponseError(f"OCR page {position} is not an object")
    index = page.get("index", position)
    dimensions = page.get("dimensions") or {}
    bounding_box = None
    if dimensions.get("width") is not None and dimensions.get("height") is not None:
        bounding_box = BoundingBox(
            x=0, y=0, width=float(dimensions["width"]), height=float(dimensions["height"])
        )
    return OcrResult(
        text=page.get("markdown") or "",
        confidence=1.0,
        page_number=int(index) + 1,
        bounding_box=bounding_box,
    )
