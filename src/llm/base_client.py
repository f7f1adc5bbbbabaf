# src/llm/base_client.py — v2
"""Abstract generation service interface.

The orchestration core only ever calls ``complete``: an ordered list of
role-tagged messages plus a temperature in, generated text out. Any
transport or provider failure is raised as-is; callers wrap it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from swarmcoder.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all generation providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        max_tokens: int = 4096,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openrouter, openai, anthropic, ollama, mock)."""
