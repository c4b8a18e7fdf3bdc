"""Data models for the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class IngestResult:
    """Outcome of ingesting one source document.

    A partial success has ``chunks_failed > 0`` and ``chunks_stored > 0``;
    ``errors`` then names each failed chunk.
    """

    source_id: str
    chunks_created: int = 0
    chunks_embedded: int = 0
    chunks_failed: int = 0
    chunks_stored: int = 0
    errors: list[str] = field(default_factory=list)
    job_handle: str | None = None

    @property
    def success(self) -> bool:
        return self.chunks_stored > 0 and self.chunks_failed == 0

    @property
    def partial(self) -> bool:
        return self.chunks_stored > 0 and self.chunks_failed > 0
