"""Schema-guided JSON extraction over a chat completion client."""

import json
from typing import Any

from docscan.extraction.base import BaseExtractionService
from docscan.extraction.client_base import BaseExtractionClient
from docscan.extraction.confidence import ExtractionConfidenceCalculator
from docscan.extraction.models import ExtractedRecord, ExtractionRequest
from docscan.extraction.prompt_loader import load_prompt
from docscan.logging.logger import Log
from docscan.services.exceptions import MalformedResponseError


class JsonExtractor(BaseExtractionService):
    """Turns OCR text into a JSON object following the requested schema."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        temperature: float = 0.0,
        system_prompt: str | None = None,
        prompt_template: str | None = None,
        confidence_calculator: ExtractionConfidenceCalculator | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = (
            system_prompt if system_prompt is not None else load_prompt("system")
        )
        self._prompt_template = (
            prompt_template if prompt_template is not None else load_prompt("extraction")
        )
        self._confidence = confidence_calculator or ExtractionConfidenceCalculator()

    async def extract(self, request: ExtractionRequest) -> ExtractedRecord:
        schema = request.target_schema
        prompt = self._build_prompt(request)
        Log.debug(f"Extraction prompt for schema '{schema.name}':\n{prompt}")

        completion = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            schema_name=schema.name,
            json_schema=schema.definition,
        )
        Log.debug(f"AI raw response:\n{completion.content}")

        parsed = self._parse_json(completion.content)
        confidence = self._confidence.calculate(parsed, completion.finish_reason)
        Log.info(
            f"Extraction complete: {len(parsed)} top-level fields",
            schema=schema.name,
            confidence=confidence,
        )
        return ExtractedRecord(
            json=parsed,
            extraction_confidence=confidence,
            finish_reason=completion.finish_reason,
        )

    def _build_prompt(self, request: ExtractionRequest) -> str:
        return self._prompt_template.format(
            instructions=request.target_schema.instructions.strip(),
            json_schema=json.dumps(request.target_schema.definition, indent=2),
            source_text=request.source_text,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise MalformedResponseError("JSON response must be an object")
        return parsed
