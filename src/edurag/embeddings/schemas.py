"""Data models for embeddings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Embedding:
    """A vector produced for one chunk or query string.

    ``index`` is the position of the source text in the input of a batch
    call; it is ``None`` for single embeddings.
    """

    vector: list[float]
    provider_used: str
    index: int | None = None

    @property
    def dimensionality(self) -> int:
        return len(self.vector)
