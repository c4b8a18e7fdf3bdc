"""LLM provider factory — registry, lazy import, singleton cache."""

from __future__ import annotations

import importlib
import logging

from edurag.config import LLMSettings
from edurag.llm.base import LLMProvider

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provider registry: (provider_key, module_path, class_name)
# ---------------------------------------------------------------------------

_PROVIDER_REGISTRY: list[tuple[str, str, str]] = [
    ("openai", "edurag.llm.openai_provider", "OpenAILLMProvider"),
    ("anthropic", "edurag.llm.anthropic_provider", "AnthropicLLMProvider"),
    ("ollama", "edurag.llm.ollama_provider", "OllamaLLMProvider"),
]

# Singleton cache
_provider_cache: dict[str, LLMProvider] = {}


def get_llm_provider(provider: str = "openai", **kwargs) -> LLMProvider:
    """Get an LLM provider by name.

    Args:
        provider: One of ``openai``, ``anthropic``, ``ollama``.
        **kwargs: Passed to the provider constructor. Instances built with
            kwargs are not cached.

    Returns:
        An ``LLMProvider`` instance.
    """
    key = provider.lower()

    if not kwargs and key in _provider_cache:
        return _provider_cache[key]

    for reg_key, module_path, cls_name in _PROVIDER_REGISTRY:
        if reg_key != key:
            continue
        cls = getattr(importlib.import_module(module_path), cls_name)
        instance = cls(**kwargs)
        if not kwargs:
            _provider_cache[key] = instance
        logger.debug("Created LLM provider %s", cls_name)
        return instance

    available = [k for k, _, _ in _PROVIDER_REGISTRY]
    raise ValueError(f"Unknown LLM provider '{provider}'. Available: {available}")


def llm_from_settings(settings: LLMSettings) -> LLMProvider:
    """Build the configured provider with model and sampling defaults."""
    return get_llm_provider(
        settings.provider,
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


def available_providers() -> list[str]:
    """Return names of registered LLM providers."""
    return [k for k, _, _ in _PROVIDER_REGISTRY]


def clear_cache() -> None:
    """Clear singleton cache (for testing)."""
    _provider_cache.clear()
