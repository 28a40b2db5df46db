from dataclasses import dataclass
from enum import Enum


class MediaType(str, Enum):
    IMAGE = "image"
    PDF = "pdf"


SUPPORTED_MIME_TYPES: dict[str, MediaType] = {
    "image/jpeg": MediaType.IMAGE,
    "image/png": MediaType.IMAGE,
    "image/heic": MediaType.IMAGE,
    "image/heif": MediaType.IMAGE,
    "application/pdf": MediaType.PDF,
}


@dataclass(frozen=True)
class Document:
    """Raw document submitted for processing."""

    content: bytes
    media_type: MediaType
    name: str | None = None
    mime_type: str | None = None

    @property
    def effective_mime_type(self) -> str:
        if self.mime_type:
            return self.mime_type
        return "application/pdf" if self.media_type is MediaType.PDF else "image/jpeg"

    @property
    def label(self) -> str:
        return self.name or "<unnamed>"


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class OcrResult:
    """Text recognized on one page."""

    text: str
    confidence: float
    page_number: int | None = None
    bounding_box: BoundingBox | None = None
