# src/llm/client_factory.py — v3
"""Factory: instantiate LLM client from provider name.

Called by the orchestrator to create the planner and worker clients
from the routing cascade (see llm/config.py).
"""

from __future__ import annotations

import importlib
import logging

from swarmcoder.config.settings import ConfigurationError, Settings
from swarmcoder.llm.base_client import BaseLLMClient
from swarmcoder.llm.config import resolve_llm

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openrouter": "swarmcoder.llm.adapters.openai_adapter.OpenRouterAdapter",
    "openai": "swarmcoder.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "swarmcoder.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "ollama": "swarmcoder.llm.adapters.ollama_adapter.OllamaAdapter",
    "mock": "swarmcoder.llm.adapters.mock_adapter.MockAdapter",
}

# Providers that cannot work without an API key.
_KEY_FIELDS: dict[str, str] = {
    "openrouter": "openrouter_api_key",
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (openrouter, openai, anthropic, ollama, mock).
        model: Model name (e.g. qwen/qwen3-coder).
        settings: Application settings (for API keys).
        **kwargs: Additional provider-specific arguments.

    Returns:
        Configured BaseLLMClient instance.

    Raises:
        UnsupportedProviderError: If provider is not registered.
        ConfigurationError: If the provider needs an API key that is not set.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model

    if settings is not None:
        key_field = _KEY_FIELDS.get(provider)
        if key_field is not None:
            api_key = getattr(settings, key_field)
            if not api_key and "api_key" not in init_kwargs:
                raise ConfigurationError(
                    f"{key_field.upper()} missing for provider {provider!r} (or set MOCK=1)"
                )
            init_kwargs.setdefault("api_key", api_key)
        if provider == "openrouter":
            init_kwargs.setdefault("base_url", settings.openrouter_base_url)
        elif provider == "ollama":
            init_kwargs.setdefault("host", settings.ollama_base_url)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def client_for(component: str, settings: Settings) -> BaseLLMClient:
    """Create the client routed to a component ("planner" or "worker")."""
    assignment = resolve_llm(component, settings)
    logger.info(
        "LLM for %s: %s (source: %s)", component, assignment.key, assignment.source,
    )
    return create_llm_client(assignment.provider, assignment.model, settings)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
