"""FAISS vector index — local, zero infrastructure, persistable.

Raw vectors are kept next to the FAISS index so deleting a source can
rebuild the index from what remains.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from edurag.vectorstore.base import VectorIndex
from edurag.vectorstore.schemas import IndexHit, IndexRecord

logger = logging.getLogger(__name__)


class FAISSVectorIndex(VectorIndex):
    """FAISS ``IndexFlatIP`` over L2-normalised vectors (cosine similarity)."""

    def __init__(self, dimension: int = 1536):
        try:
            import faiss
        except ImportError as exc:
            raise ImportError("faiss-cpu required: pip install edurag[faiss]") from exc

        super().__init__(dimension)
        self._faiss = faiss
        self._index = faiss.IndexFlatIP(dimension)
        self._records: list[dict] = []  # row position in the FAISS index -> record
        self._vectors = np.empty((0, dimension), dtype=np.float32)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def upsert(self, source_id: str, records: list[IndexRecord]) -> int:
        if not records:
            return 0

        for record in records:
            self._check_dimension(len(record.embedding))

        vectors = np.array([r.embedding for r in records], dtype=np.float32)
        self._faiss.normalize_L2(vectors)
        self._index.add(vectors)
        self._vectors = np.vstack([self._vectors, vectors])

        for record in records:
            self._records.append({
                "id": record.record_id(source_id),
                "source_id": source_id,
                "text": record.text,
            })

        logger.info("FAISSVectorIndex added %d records (total: %d)", len(records), self.count())
        return len(records)

    def delete(self, source_id: str) -> int:
        keep = [i for i, r in enumerate(self._records) if r["source_id"] != source_id]
        deleted = len(self._records) - len(keep)
        if deleted == 0:
            return 0

        self._records = [self._records[i] for i in keep]
        self._vectors = self._vectors[keep]
        self._index = self._faiss.IndexFlatIP(self._dimension)
        if len(keep):
            self._index.add(self._vectors)

        logger.info("FAISSVectorIndex removed %d records of %s", deleted, source_id)
        return deleted

    def search(self, vector: list[float], threshold: float = 0.0, k: int = 10) -> list[IndexHit]:
        if self._index.ntotal == 0 or k <= 0:
            return []

        self._check_dimension(len(vector))
        query = np.array([vector], dtype=np.float32)
        self._faiss.normalize_L2(query)

        scores, indices = self._index.search(query, min(k, self._index.ntotal))

        hits: list[IndexHit] = []
        for score, idx in zip(scores[0], indices[0], strict=True):
            if idx == -1:
                continue
            similarity = min(max(float(score), 0.0), 1.0)
            if similarity <= threshold:
                continue
            record = self._records[int(idx)]
            hits.append(IndexHit(
                id=record["id"],
                source_id=record["source_id"],
                text=record["text"],
                similarity=similarity,
            ))
        return hits

    def count(self) -> int:
        return self._index.ntotal

    def save(self, path: str) -> None:
        """Save FAISS index and records to disk."""
        p = Path(path)
        p.mkdir(parents=True, exist_ok=True)

        self._faiss.write_index(self._index, str(p / "index.faiss"))
        np.save(p / "vectors.npy", self._vectors)
        with open(p / "records.json", "w", encoding="utf-8") as f:
            json.dump({"dimension": self._dimension, "records": self._records}, f)

        logger.info("FAISSVectorIndex saved to %s (%d records)", path, self.count())

    def load(self, path: str) -> None:
        """Load FAISS index and records from disk."""
        p = Path(path)

        with open(p / "records.json", encoding="utf-8") as f:
            data = json.load(f)

        self._dimension = data["dimension"]
        self._records = data["records"]
        self._index = self._faiss.read_index(str(p / "index.faiss"))
        self._vectors = np.load(p / "vectors.npy")
        logger.info("FAISSVectorIndex loaded from %s (%d records)", path, self.count())
