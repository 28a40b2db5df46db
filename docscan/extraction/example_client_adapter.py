"""Example extraction client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseExtractionClient and register the provider in ExtractorFactory.
"""

import json
from typing import Any, ClassVar

from docscan.extraction.client_base import BaseExtractionClient
from docscan.extraction.models import ChatCompletion


class ExampleClientAdapter(BaseExtractionClient):
    """Example adapter that returns a fixed JSON object.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, Any]] = {
        "checkNumber": "12345",
        "payee": "John Smith",
        "amount": 1234.56,
    }

    def __init__(
        self,
        response: dict[str, Any] | None = None,
        finish_reason: str = "stop",
    ) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE
        self._finish_reason = finish_reason

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        json_schema: dict[str, Any],
    ) -> ChatCompletion:
        _ = model, temperature, system_prompt, user_prompt, schema_name, json_schema
        return ChatCompletion(
            content=json.dumps(self._response), finish_reason=self._finish_reason
        )
