# tests/unit/llm/test_error_classifier.py — v1
"""Tests for llm/error_classifier.py."""

from __future__ import annotations

import pytest

from swarmcoder.core.errors import NoArtifactsError
from swarmcoder.llm.error_classifier import classify_error, is_transient


class TestClassifyError:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (RuntimeError("HTTP 429 Too Many Requests"), "rate_limit"),
            (TimeoutError("request timed out"), "timeout"),
            (RuntimeError("502 Bad Gateway"), "server_error"),
            (NoArtifactsError("qa", "no_file_segments"), "parse_error"),
            (ValueError("maximum context token limit exceeded"), "token_limit"),
            (KeyError("x"), "unknown"),
        ],
    )
    def test_types(self, error, expected):
        assert classify_error(error) == expected


class TestIsTransient:
    def test_transient(self):
        assert is_transient(TimeoutError("timed out"))
        assert is_transient(RuntimeError("503 Service Unavailable"))

    def test_not_transient(self):
        assert not is_transient(NoArtifactsError("qa", "empty_output"))
