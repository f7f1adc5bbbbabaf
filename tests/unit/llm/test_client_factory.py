# tests/unit/llm/test_client_factory.py — v2
"""Tests for llm/client_factory.py — provider registry and key checks."""

from __future__ import annotations

import pytest

from swarmcoder.config.settings import ConfigurationError, Settings
from swarmcoder.llm.adapters.anthropic_adapter import AnthropicAdapter
from swarmcoder.llm.adapters.mock_adapter import MockAdapter
from swarmcoder.llm.adapters.ollama_adapter import OllamaAdapter
from swarmcoder.llm.adapters.openai_adapter import OpenRouterAdapter
from swarmcoder.llm.client_factory import (
    UnsupportedProviderError,
    client_for,
    create_llm_client,
)


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestCreateLLMClient:
    def test_unknown_provider(self):
        with pytest.raises(UnsupportedProviderError, match="Available"):
            create_llm_client("nope", "m")

    def test_mock_needs_no_key(self):
        client = create_llm_client("mock", "mock", _settings())
        assert isinstance(client, MockAdapter)
        assert client.provider_name == "mock"

    def test_missing_key_raises(self):
        with pytest.raises(ConfigurationError, match="OPENROUTER_API_KEY"):
            create_llm_client("openrouter", "qwen/qwen3-coder", _settings())

    def test_openrouter_with_key(self):
        client = create_llm_client(
            "openrouter", "qwen/qwen3-coder", _settings(openrouter_api_key="sk-test"),
        )
        assert isinstance(client, OpenRouterAdapter)
        assert client.provider_name == "openrouter"

    def test_anthropic_with_key(self):
        client = create_llm_client("anthropic", "claude", _settings(anthropic_api_key="k"))
        assert isinstance(client, AnthropicAdapter)

    def test_ollama_needs_no_key(self):
        client = create_llm_client("ollama", "qwen2.5-coder", _settings())
        assert isinstance(client, OllamaAdapter)


class TestClientFor:
    def test_mock_mode(self):
        assert isinstance(client_for("planner", _settings(mock=True)), MockAdapter)

    def test_component_routing(self):
        s = _settings(llm_worker="ollama:llama3")
        assert client_for("worker", s).provider_name == "ollama"
