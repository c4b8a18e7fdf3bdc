"""Data models for retrieval operations."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RetrievedMatch:
    """A chunk returned for a query, enriched with its source's metadata."""

    chunk_text: str
    source_id: str
    source_title: str
    source_category: str
    similarity: float
    chunk_id: str | None = None
    file_name: str | None = None

    @property
    def similarity_percent(self) -> int:
        return round(self.similarity * 100)


@dataclass
class RetrievalResult:
    """Result of a retrieval operation.

    ``needs_processing`` is set when the index holds no vectors at all, i.e.
    the sources still have to be ingested before anything can match.
    """

    query: str
    matches: list[RetrievedMatch] = field(default_factory=list)
    needs_processing: bool = False
    message: str = ""

    @property
    def count(self) -> int:
        return len(self.matches)
