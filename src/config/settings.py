# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: provider
credentials, model routing, workspace location, run policy and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "openrouter"
    llm_default_model: str = "qwen/qwen3-coder"
    llm_max_tokens: int = 4096

    # Per-component LLM assignment "provider:model" (highest priority)
    llm_planner: str = ""
    llm_worker: str = ""

    # Sampling temperatures
    planner_temperature: float = 0.4
    worker_temperature: float = 0.25

    # Provider credentials
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # Canned responses, no network
    mock: bool = False

    # === Workspace ===
    workspace_root: Path = Path("./swarm-projects")

    # === Run policy ===
    max_run_attempts: int = 1

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("planner_temperature", "worker_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:  # noqa: N805
        if not 0.0 <= v <= 2.0:
            raise ValueError("temperature must be within [0, 2]")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.max_run_attempts not in (1, 2):
            errors.append(
                "MAX_RUN_ATTEMPTS must be 1 (fail fast) or 2 (one whole-run retry)"
            )

        if self.llm_max_tokens <= 0:
            errors.append("LLM_MAX_TOKENS must be > 0")

        for name in ("llm_planner", "llm_worker"):
            value = getattr(self, name)
            if value and ":" not in value:
                errors.append(f"{name.upper()} must be 'provider:model', got {value!r}")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
