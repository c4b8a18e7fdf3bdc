"""Vector index factory — registry and lazy import."""

from __future__ import annotations

import importlib
import logging

from edurag.vectorstore.base import VectorIndex

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Index registry: (index_key, module_path, class_name)
# ---------------------------------------------------------------------------

_INDEX_REGISTRY: list[tuple[str, str, str]] = [
    ("memory", "edurag.vectorstore.memory_index", "InMemoryVectorIndex"),
    ("faiss", "edurag.vectorstore.faiss_index", "FAISSVectorIndex"),
]


def get_vector_index(backend: str = "memory", **kwargs) -> VectorIndex:
    """Create a vector index by name.

    Indexes hold data, so unlike the provider factories nothing is cached:
    every call returns a fresh, empty index.

    Args:
        backend: One of ``memory``, ``faiss``.
        **kwargs: Passed to the index constructor (e.g. ``dimension``).
    """
    key = backend.lower()
    for reg_key, module_path, cls_name in _INDEX_REGISTRY:
        if reg_key == key:
            cls = getattr(importlib.import_module(module_path), cls_name)
            return cls(**kwargs)

    available = [k for k, _, _ in _INDEX_REGISTRY]
    raise ValueError(f"Unknown vector index '{backend}'. Available: {available}")


def available_indexes() -> list[str]:
    """Return names of registered vector indexes."""
    return [k for k, _, _ in _INDEX_REGISTRY]
