# tests/unit/llm/test_adapters.py — v1
"""Tests for llm/adapters — request shaping and response normalization."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from swarmcoder.llm.adapters.anthropic_adapter import AnthropicAdapter
from swarmcoder.llm.adapters.mock_adapter import MOCK_MANIFEST, MockAdapter
from swarmcoder.llm.adapters.openai_adapter import OpenAIAdapter
from swarmcoder.llm.models import Message
from swarmcoder.parsing.output_parser import parse_output

MESSAGES = [
    Message(role="system", content="be terse"),
    Message(role="user", content="hello"),
]


class TestAnthropicAdapter:
    def test_system_lifted(self):
        kwargs = AnthropicAdapter(model="m")._build_kwargs(MESSAGES, 100, 0.2)
        assert kwargs["system"] == "be terse"
        assert kwargs["messages"] == [{"role": "user", "content": "hello"}]
        assert kwargs["temperature"] == 0.2

    def test_text_blocks_concatenated(self):
        response = SimpleNamespace(content=[
            SimpleNamespace(type="text", text="a"),
            SimpleNamespace(type="tool_use"),
            SimpleNamespace(type="text", text="b"),
        ])
        assert AnthropicAdapter._extract_content(response) == "ab"


class TestOpenAIAdapter:
    @pytest.mark.asyncio
    async def test_complete(self):
        adapter = OpenAIAdapter(model="gpt-4o", api_key="k")
        fake = MagicMock()
        fake.chat.completions.create = AsyncMock(return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="out"))],
            usage=SimpleNamespace(prompt_tokens=3, completion_tokens=5),
        ))
        adapter._OpenAIAdapter__client = fake

        resp = await adapter.complete(MESSAGES, max_tokens=50, temperature=0.1)

        assert resp.content == "out"
        assert resp.input_tokens == 3
        assert resp.output_tokens == 5
        assert resp.provider == "openai"
        sent = fake.chat.completions.create.call_args.kwargs
        assert sent["messages"][0] == {"role": "system", "content": "be terse"}

    @pytest.mark.asyncio
    async def test_no_choices_raises(self):
        adapter = OpenAIAdapter(model="gpt-4o", api_key="k")
        fake = MagicMock()
        fake.chat.completions.create = AsyncMock(
            return_value=SimpleNamespace(choices=[], usage=None),
        )
        adapter._OpenAIAdapter__client = fake
        with pytest.raises(ValueError, match="no choices"):
            await adapter.complete(MESSAGES)


class TestMockAdapter:
    @pytest.mark.asyncio
    async def test_planner_gets_manifest(self):
        adapter = MockAdapter()
        resp = await adapter.complete([
            Message(role="system", content="You are a senior software architect."),
            Message(role="user", content="build"),
        ])
        assert json.loads(resp.content) == MOCK_MANIFEST

    @pytest.mark.asyncio
    async def test_worker_gets_file_blocks(self):
        adapter = MockAdapter()
        resp = await adapter.complete(MESSAGES)
        result = parse_output(resp.content, author="backend-dev")
        assert result.ok
        assert "server.js" in result.paths
        assert len(result.decisions) == 1
        assert len(adapter.calls) == 1
