# src/xaiprecompute/llm/adapters/openai_adapter.py - v1
"""OpenAI chat-completions adapter implementing BaseLLMClient.

Uses the official openai SDK. The credential is checked at call time so a
missing key fails the first request instead of construction.
"""

from __future__ import annotations

import time
from typing import Any

from xaiprecompute.core.errors import ConfigurationError, SchemaError, UpstreamError
from xaiprecompute.llm.base_client import BaseLLMClient
from xaiprecompute.llm.models import LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    """OpenAI GPT adapter."""

    def __init__(
        self,
        model: str = "gpt-3.5-turbo",
        api_key: str = "",
        base_url: str = "",
        client: Any = None,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._client = client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import openai

        client = self._get_client()
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        t0 = time.monotonic()
        try:
            resp = await client.chat.completions.create(
                model=self._model,
                messages=oai_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.APIStatusError as e:
            raise UpstreamError(
                f"OpenAI returned status {e.status_code}: {e.message}",
                status_code=e.status_code,
            ) from e
        except openai.APIError as e:
            raise UpstreamError(f"OpenAI request failed: {e}") from e
        latency = int((time.monotonic() - t0) * 1000)

        choices = getattr(resp, "choices", None)
        if not choices:
            raise SchemaError("OpenAI response contained no choices")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if content is not None and not isinstance(content, str):
            raise SchemaError(
                f"Unexpected message content type: {type(content).__name__}"
            )

        usage = getattr(resp, "usage", None)
        return LLMResponse(
            content=content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency,
            raw_response=resp,
        )

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self._api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured")

        import openai

        kwargs: dict[str, Any] = {"api_key": self._api_key}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        self._client = openai.AsyncOpenAI(**kwargs)
        return self._client

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model
