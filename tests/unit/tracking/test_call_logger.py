# tests/unit/tracking/test_call_logger.py — v2
"""Tests for tracking/call_logger.py."""

from __future__ import annotations

import json

from swarmcoder.llm.models import LLMResponse
from swarmcoder.tracking.call_logger import CallLogger


def _response() -> LLMResponse:
    return LLMResponse(
        content="x", input_tokens=12, output_tokens=34, model="m", provider="p", latency_ms=5,
    )


class TestCallLogger:
    def test_record(self):
        logger = CallLogger()
        rec = logger.record("Planner", _response())
        assert rec.status == "success"
        assert rec.input_tokens == 12
        assert logger.total_calls == 1

    def test_record_failure(self):
        logger = CallLogger()
        rec = logger.record_failure("qa", "openrouter", TimeoutError("slow"))
        assert rec.status == "failed"
        assert rec.error == "slow"

    def test_save_jsonl(self, tmp_path):
        logger = CallLogger()
        logger.record("A", _response())
        logger.record_failure("B", "p", RuntimeError("no"))
        path = tmp_path / "calls_log.jsonl"
        logger.save(path)
        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["author"] for line in lines] == ["A", "B"]
