from typing import Any

import httpx
import openai

from docscan.extraction.client_base import BaseExtractionClient
from docscan.extraction.models import ChatCompletion
from docscan.services.exceptions import (
    MalformedResponseError,
    NetworkError,
    classify_status,
)


class OpenAIClientAdapter(BaseExtractionClient):
    """Extraction client built on the OpenAI-compatible chat completions API.

    SDK retries are disabled; RetryPolicy owns the retry schedule.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

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
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": False,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise NetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIStatusError as exc:
            raise classify_status(
                exc.status_code, f"AI provider returned {exc.status_code}: {exc.message}"
            ) from exc
        except openai.APIError as exc:
            raise MalformedResponseError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise MalformedResponseError("AI returned no choices")
        choice = response.choices[0]
        content = choice.message.content
        if content is None:
            raise MalformedResponseError("AI returned empty response")
        usage: dict[str, int] = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
            }
        return ChatCompletion(content=content, finish_reason=choice.finish_reason, usage=usage)
