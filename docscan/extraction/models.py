from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SchemaDescriptor:
    """Named JSON-Schema-like structure the extraction must conform to."""

    name: str
    definition: dict[str, Any]
    instructions: str = ""


@dataclass(frozen=True)
class ExtractionRequest:
    source_text: str
    target_schema: SchemaDescriptor


@dataclass(frozen=True)
class ExtractedRecord:
    """Structured value produced by the extraction boundary."""

    json: dict[str, Any]
    extraction_confidence: float
    finish_reason: str | None = None


@dataclass(frozen=True)
class ChatCompletion:
    """Provider-agnostic chat completion output."""

    content: str
    finish_reason: str | None = None
    usage: dict[str, int] = field(default_factory=dict)
