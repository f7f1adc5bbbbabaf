# src/llm/config.py — v2
"""Per-component LLM routing with cascade resolution.

Resolution order:
  0. Mock mode (MOCK=1) routes every component to the mock provider
  1. Per-component env var (LLM_WORKER=anthropic:claude-sonnet-4-20250514)
  2. Default provider + model (LLM_DEFAULT_PROVIDER + LLM_DEFAULT_MODEL)
  3. Hardcoded fallback (openrouter:qwen/qwen3-coder)
"""

from __future__ import annotations

from dataclasses import dataclass

from swarmcoder.config.settings import Settings

COMPONENTS = ("planner", "worker")

_FALLBACK_PROVIDER = "openrouter"
_FALLBACK_MODEL = "qwen/qwen3-coder"


@dataclass(frozen=True)
class LLMAssignment:
    """Resolved LLM provider:model for a component."""

    provider: str
    model: str
    source: str  # "mock", "component", "default", or "fallback"

    @property
    def key(self) -> str:
        """Return 'provider:model' string."""
        return f"{self.provider}:{self.model}"


def _parse_assignment(value: str) -> tuple[str, str] | None:
    """Parse 'provider:model' string. Returns None if empty."""
    if not value or ":" not in value:
        return None
    provider, model = value.split(":", 1)
    return (provider.strip(), model.strip())


def resolve_llm(component: str, settings: Settings) -> LLMAssignment:
    """Resolve LLM assignment for a component using the cascade.

    Args:
        component: Component name ("planner" or "worker").
        settings: Application settings.

    Returns:
        Resolved LLMAssignment with provider, model, and resolution source.
    """
    if settings.mock:
        return LLMAssignment(provider="mock", model="mock", source="mock")

    parsed = _parse_assignment(getattr(settings, f"llm_{component}", ""))
    if parsed:
        return LLMAssignment(provider=parsed[0], model=parsed[1], source="component")

    if settings.llm_default_provider and settings.llm_default_model:
        return LLMAssignment(
            provider=settings.llm_default_provider,
            model=settings.llm_default_model,
            source="default",
        )

    return LLMAssignment(
        provider=_FALLBACK_PROVIDER,
        model=_FALLBACK_MODEL,
        source="fallback",
    )


def resolve_all(settings: Settings) -> dict[str, LLMAssignment]:
    """Resolve LLM assignments for every known component."""
    return {comp: resolve_llm(comp, settings) for comp in COMPONENTS}
