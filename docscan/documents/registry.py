from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from docscan.documents.kinds import DocumentKind
from docscan.documents.normalizers import normalize_check, normalize_receipt
from docscan.extraction.models import SchemaDescriptor
from docscan.extraction.prompt_loader import load_json_schema, load_prompt
from docscan.validation.base import Validator
from docscan.validation.schema_builder import validator_from_schema

Normalizer = Callable[[Mapping[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class DocumentProfile:
    """Everything the pipeline needs to process one document kind."""

    kind: DocumentKind
    schema: SchemaDescriptor
    validator: Validator[Any]
    normalizer: Normalizer

    @classmethod
    def from_schema(
        cls,
        kind: DocumentKind,
        schema: SchemaDescriptor,
        normalizer: Normalizer = dict,
    ) -> "DocumentProfile":
        return cls(
            kind=kind,
            schema=schema,
            validator=validator_from_schema(schema.definition),
            normalizer=normalizer,
        )


class DocumentRegistry:
    """Read-only mapping from document kind to its profile."""

    NORMALIZERS: Mapping[DocumentKind, Normalizer] = {
        DocumentKind.CHECK: normalize_check,
        DocumentKind.RECEIPT: normalize_receipt,
    }

    def __init__(self, profiles: Mapping[DocumentKind, DocumentProfile]) -> None:
        self._profiles = dict(profiles)

    @classmethod
    def default(cls, prompt_dir: Path | None = None) -> "DocumentRegistry":
        """Build profiles from the bundled prompts and JSON schemas."""
        profiles = {}
        for kind in DocumentKind:
            schema = SchemaDescriptor(
                name=f"{kind.value}_extraction",
                definition=load_json_schema(kind.value, prompt_dir),
                instructions=load_prompt(kind.value, prompt_dir),
            )
            profiles[kind] = DocumentProfile.from_schema(
                kind, schema, cls.NORMALIZERS[kind]
            )
        return cls(profiles)

    def for_kind(self, kind: DocumentKind) -> DocumentProfile:
        try:
            return self._profiles[kind]
        except KeyError:
            raise ValueError(f"No document profile registered for '{kind.value}'") from None

    @property
    def kinds(self) -> list[DocumentKind]:
        return list(self._profiles)
