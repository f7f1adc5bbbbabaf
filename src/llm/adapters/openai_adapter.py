# src/llm/adapters/openai_adapter.py — v2
"""OpenAI-compatible chat adapters implementing BaseLLMClient.

Uses the official openai SDK. OpenRouter speaks the same protocol, so
OpenRouterAdapter only changes the base URL and provider name.
"""

from __future__ import annotations

import time
from typing import Any

from swarmcoder.llm.base_client import BaseLLMClient
from swarmcoder.llm.models import LLMResponse, Message

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenAIAdapter(BaseLLMClient):
    """OpenAI chat completions adapter."""

    _provider = "openai"

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str = "",
        base_url: str | None = None,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self.__client = None

    @property
    def _client(self):
        """Lazy-init client (only on first API call)."""
        if self.__client is None:
            import openai

            self.__client = openai.AsyncOpenAI(
                api_key=self._api_key, base_url=self._base_url,
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        max_tokens: int = 4096,
        temperature: float = 0.3,
    ) -> LLMResponse:
        t0 = time.monotonic()
        resp = await self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": m.role, "content": m.content} for m in messages],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency = int((time.monotonic() - t0) * 1000)

        if not resp.choices:
            raise ValueError(f"{self._provider} returned no choices")
        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider=self._provider,
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return self._provider


class OpenRouterAdapter(OpenAIAdapter):
    """OpenRouter adapter (OpenAI-compatible endpoint)."""

    _provider = "openrouter"

    def __init__(
        self,
        model: str = "qwen/qwen3-coder",
        api_key: str = "",
        base_url: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(
            model=model, api_key=api_key, base_url=base_url or OPENROUTER_BASE_URL,
        )
