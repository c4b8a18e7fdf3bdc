"""Data models for vector index operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class IndexRecord:
    """A chunk with its embedding, ready for storage."""

    ordinal: int
    text: str
    embedding: list[float]

    def record_id(self, source_id: str) -> str:
        return f"{source_id}:{self.ordinal}"


@dataclass(frozen=True)
class IndexHit:
    """A single nearest-neighbour match returned by the index."""

    id: str
    source_id: str
    text: str
    similarity: float
