# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py — defaults and consistency rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from swarmcoder.config.settings import ConfigurationError, Settings, load_settings


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestDefaults:
    def test_defaults(self):
        s = _settings()
        assert s.llm_default_provider == "openrouter"
        assert s.llm_default_model == "qwen/qwen3-coder"
        assert s.planner_temperature == 0.4
        assert s.worker_temperature == 0.25
        assert s.max_run_attempts == 1
        assert s.workspace_root == Path("./swarm-projects")
        assert s.log_format == "text"


class TestValidation:
    def test_max_run_attempts_two_allowed(self):
        assert _settings(max_run_attempts=2).max_run_attempts == 2

    def test_max_run_attempts_three_rejected(self):
        with pytest.raises(ConfigurationError, match="MAX_RUN_ATTEMPTS"):
            _settings(max_run_attempts=3)

    def test_component_assignment_format(self):
        with pytest.raises(ConfigurationError, match="LLM_WORKER"):
            _settings(llm_worker="gpt-4o")

    def test_max_tokens_positive(self):
        with pytest.raises(ConfigurationError, match="LLM_MAX_TOKENS"):
            _settings(llm_max_tokens=0)

    def test_temperature_range(self):
        with pytest.raises(ValidationError):
            _settings(worker_temperature=3.0)

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("MAX_RUN_ATTEMPTS", "2")
        monkeypatch.setenv("MOCK", "true")
        s = _settings()
        assert s.max_run_attempts == 2
        assert s.mock is True


class TestLoadSettings:
    def test_overrides(self, tmp_path: Path):
        s = load_settings(_env_file=None, workspace_root=tmp_path, mock=True)
        assert s.workspace_root == tmp_path
        assert s.mock is True
