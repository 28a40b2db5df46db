from abc import ABC, abstractmethod
from typing import Any

from docscan.extraction.models import ChatCompletion


class BaseExtractionClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
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
        """Return the provider response text and its finish reason."""
