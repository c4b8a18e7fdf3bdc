"""Embedding providers and the primary/fallback embedding client."""

from edurag.embeddings.base import EmbeddingProvider
from edurag.embeddings.client import EmbeddingClient, clean_text
from edurag.embeddings.factory import available_providers, get_embedding_provider
from edurag.embeddings.schemas import Embedding

__all__ = [
    "Embedding",
    "EmbeddingClient",
    "EmbeddingProvider",
    "available_providers",
    "clean_text",
    "get_embedding_provider",
]
