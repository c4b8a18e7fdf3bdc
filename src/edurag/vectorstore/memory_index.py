"""In-memory vector index — exact cosine search over a numpy matrix.

Zero infrastructure; meant for tests, the CLI, and small course collections.
"""

from __future__ import annotations

import logging

import numpy as np

from edurag.vectorstore.base import VectorIndex
from edurag.vectorstore.schemas import IndexHit, IndexRecord

logger = logging.getLogger(__name__)


def _normalize(vec: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vec)
    return vec / norm if norm > 0 else vec


class InMemoryVectorIndex(VectorIndex):
    """Exact cosine-similarity index kept in process memory."""

    def __init__(self, dimension: int | None = None):
        super().__init__(dimension)
        self._entries: list[dict] = []  # insertion order = tie-break order
        self._matrix: np.ndarray | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def upsert(self, source_id: str, records: list[IndexRecord]) -> int:
        if not records:
            return 0

        for record in records:
            self._check_dimension(len(record.embedding))

        for record in records:
            self._entries.append({
                "id": record.record_id(source_id),
                "source_id": source_id,
                "text": record.text,
                "vector": _normalize(np.asarray(record.embedding, dtype=np.float32)),
            })
        self._matrix = None
        logger.info(
            "InMemoryVectorIndex stored %d records for %s (total: %d)",
            len(records), source_id, self.count(),
        )
        return len(records)

    def delete(self, source_id: str) -> int:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e["source_id"] != source_id]
        deleted = before - len(self._entries)
        if deleted:
            self._matrix = None
        return deleted

    def search(self, vector: list[float], threshold: float = 0.0, k: int = 10) -> list[IndexHit]:
        if not self._entries or k <= 0:
            return []

        self._check_dimension(len(vector))
        query = _normalize(np.asarray(vector, dtype=np.float32))

        if self._matrix is None:
            self._matrix = np.vstack([e["vector"] for e in self._entries])

        scores = np.clip(self._matrix @ query, 0.0, 1.0)
        order = np.argsort(-scores, kind="stable")

        hits: list[IndexHit] = []
        for idx in order:
            score = float(scores[idx])
            if score <= threshold:
                break
            entry = self._entries[int(idx)]
            hits.append(IndexHit(
                id=entry["id"],
                source_id=entry["source_id"],
                text=entry["text"],
                similarity=score,
            ))
            if len(hits) >= k:
                break
        return hits

    def count(self) -> int:
        return len(self._entries)

    def source_ids(self) -> list[str]:
        """Distinct source ids in insertion order."""
        return list(dict.fromkeys(e["source_id"] for e in self._entries))
