"""LLM providers — OpenAI, Anthropic, Ollama."""

from edurag.llm.base import LLMProvider
from edurag.llm.factory import available_providers, get_llm_provider
from edurag.llm.structured import parse_json_response

__all__ = ["LLMProvider", "available_providers", "get_llm_provider", "parse_json_response"]
