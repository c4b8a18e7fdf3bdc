"""Shared fixtures for tests — mock providers and synthetic course content, no network calls."""

from __future__ import annotations

import hashlib
import textwrap
from collections.abc import Iterable

import numpy as np
import pytest

from edurag.embeddings.base import EmbeddingProvider
from edurag.errors import RateLimitedError
from edurag.llm.base import LLMProvider
from edurag.sources.base import Source
from edurag.sources.memory_store import InMemorySourceStore

DIM = 32

# ---------------------------------------------------------------------------
# Mock providers
# ---------------------------------------------------------------------------


class MockEmbedder(EmbeddingProvider):
    """Deterministic hash-based embeddings; records every call."""

    def __init__(self, dim: int = DIM):
        self._dim = dim
        self.calls: list[str] = []

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.calls.extend(texts)
        return [self._hash_embed(t) for t in texts]

    def embed_query(self, query: str) -> list[float]:
        self.calls.append(query)
        return self._hash_embed(query)

    @property
    def dimension(self) -> int:
        return self._dim

    def _hash_embed(self, text: str) -> list[float]:
        h = hashlib.sha256(text.encode()).digest()
        vec = np.array([h[i % len(h)] / 255.0 for i in range(self._dim)], dtype=np.float32)
        vec /= np.linalg.norm(vec)
        return vec.tolist()


class FailingEmbedder(MockEmbedder):
    """Always raises the given error."""

    def __init__(self, error: Exception | None = None, dim: int = DIM):
        super().__init__(dim)
        self.error = error or ConnectionError("provider down")

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.calls.extend(texts)
        raise self.error

    def embed_query(self, query: str) -> list[float]:
        self.calls.append(query)
        raise self.error


class RateLimitedEmbedder(MockEmbedder):
    """Answers 429 for the first ``failures`` attempts, then succeeds."""

    def __init__(self, failures: int = 1, dim: int = DIM):
        super().__init__(dim)
        self.failures = failures
        self.attempts = 0

    def _attempt(self) -> None:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise RateLimitedError("429 Too Many Requests")

    def embed_query(self, query: str) -> list[float]:
        self._attempt()
        return super().embed_query(query)

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self._attempt()
        return super().embed_texts(texts)


class ScriptedLLM(LLMProvider):
    """Returns queued responses in order; an ``Exception`` in the queue is raised."""

    def __init__(self, responses: Iterable[str | Exception] = ()):
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.calls: list[dict] = []

    def generate(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        self.prompts.append(prompt)
        self.calls.append({"system": system, "max_tokens": max_tokens, "temperature": temperature})
        if not self.responses:
            raise RuntimeError("ScriptedLLM ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def embedder() -> MockEmbedder:
    return MockEmbedder()


# ---------------------------------------------------------------------------
# Synthetic course content
# ---------------------------------------------------------------------------


@pytest.fixture
def course_text() -> str:
    return textwrap.dedent("""\
        Hash Tables

        A hash table stores key-value pairs in an array of buckets. A hash
        function maps each key to a bucket index. Lookups, inserts and deletes
        run in expected constant time when the load factor stays bounded.

        Collision Resolution

        Separate chaining keeps a linked list per bucket. Open addressing
        probes other buckets until a free slot is found. Linear probing
        suffers from primary clustering; quadratic probing reduces it.

        Resizing

        When the load factor exceeds a threshold the table doubles in size
        and every entry is rehashed into the new bucket array.
    """)


@pytest.fixture
def sources() -> list[Source]:
    return [
        Source(
            id="src-ds",
            title="Data Structures",
            category="Lecture Notes",
            file_url="https://files.example.edu/cs201/data-structures.pdf",
            content=(
                "A hash table maps keys to buckets with a hash function. "
                "Separate chaining stores colliding entries in a list per bucket."
            ),
        ),
        Source(id="src-algo", title="Algorithms", category="Textbook"),
    ]


@pytest.fixture
def source_store(sources: list[Source]) -> InMemorySourceStore:
    return InMemorySourceStore(sources)
