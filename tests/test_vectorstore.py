"""Tests for vector indexes — in-memory always, FAISS when installed."""

from __future__ import annotations

from pathlib import Path

import pytest

from edurag.errors import DimensionMismatchError
from edurag.vectorstore import IndexRecord, VectorIndex, available_indexes, get_vector_index
from edurag.vectorstore.memory_index import InMemoryVectorIndex


def _records(*vectors: list[float]) -> list[IndexRecord]:
    return [IndexRecord(ordinal=i, text=f"chunk {i}", embedding=v) for i, v in enumerate(vectors)]


def _faiss_or_skip(dimension: int) -> VectorIndex:
    pytest.importorskip("faiss")
    return get_vector_index("faiss", dimension=dimension)


@pytest.fixture(params=["memory", "faiss"])
def index(request) -> VectorIndex:
    if request.param == "faiss":
        return _faiss_or_skip(3)
    return InMemoryVectorIndex(dimension=3)


# ---------------------------------------------------------------------------
# Shared behaviour
# ---------------------------------------------------------------------------


class TestVectorIndex:
    def test_empty_index(self, index: VectorIndex):
        assert index.count() == 0
        assert index.search([1.0, 0.0, 0.0]) == []

    def test_upsert_and_count(self, index: VectorIndex):
        assert index.upsert("s1", _records([1, 0, 0], [0, 1, 0])) == 2
        assert index.count() == 2
        assert index.upsert("s1", []) == 0

    def test_search_ranks_by_similarity(self, index: VectorIndex):
        index.upsert("s1", _records([1, 0, 0], [0.8, 0.6, 0], [0, 0, 1]))

        hits = index.search([1.0, 0.0, 0.0], threshold=0.0, k=10)

        assert [h.id for h in hits] == ["s1:0", "s1:1"]
        assert hits[0].similarity == pytest.approx(1.0, abs=1e-5)
        assert hits[1].similarity == pytest.approx(0.8, abs=1e-5)
        assert all(0.0 <= h.similarity <= 1.0 for h in hits)

    def test_threshold_is_strict(self, index: VectorIndex):
        index.upsert("s1", _records([1, 0, 0], [0, 1, 0]))
        assert index.search([0.0, 1.0, 0.0], threshold=0.99) != []
        assert index.search([0.0, 0.0, 1.0], threshold=0.3) == []

    def test_k_limits_results(self, index: VectorIndex):
        index.upsert("s1", _records([1, 0, 0], [0.9, 0.1, 0], [0.8, 0.2, 0]))
        assert len(index.search([1.0, 0.0, 0.0], k=2)) == 2
        assert index.search([1.0, 0.0, 0.0], k=0) == []

    def test_delete_source(self, index: VectorIndex):
        index.upsert("a", _records([1, 0, 0], [0, 1, 0]))
        index.upsert("b", _records([0, 0, 1]))

        assert index.delete("a") == 2
        assert index.count() == 1
        assert index.delete("missing") == 0
        assert [h.source_id for h in index.search([0.0, 0.0, 1.0])] == ["b"]

    def test_dimension_mismatch(self, index: VectorIndex):
        with pytest.raises(DimensionMismatchError):
            index.upsert("s1", _records([1, 0]))
        index.upsert("s1", _records([1, 0, 0]))
        with pytest.raises(DimensionMismatchError):
            index.search([1.0, 0.0])


# ---------------------------------------------------------------------------
# Backend specifics
# ---------------------------------------------------------------------------


class TestInMemoryIndex:
    def test_dimension_fixed_by_first_write(self):
        index = InMemoryVectorIndex()
        assert index.dimension is None
        index.upsert("s1", _records([1, 0, 0, 0]))
        assert index.dimension == 4
        with pytest.raises(DimensionMismatchError):
            index.upsert("s2", _records([1, 0, 0]))

    def test_source_ids(self):
        index = InMemoryVectorIndex()
        index.upsert("b", _records([1, 0]))
        index.upsert("a", _records([0, 1]))
        index.upsert("b", _records([1, 1]))
        assert index.source_ids() == ["b", "a"]

    def test_ties_keep_insertion_order(self):
        index = InMemoryVectorIndex()
        index.upsert("a", _records([1, 0, 0]))
        index.upsert("b", _records([1, 0, 0]))
        hits = index.search([1.0, 0.0, 0.0])
        assert [h.source_id for h in hits] == ["a", "b"]

    def test_negative_similarity_clipped(self):
        index = InMemoryVectorIndex()
        index.upsert("s1", _records([-1, 0]))
        hits = index.search([1.0, 0.0], threshold=-1.0)
        assert hits[0].similarity == 0.0


class TestFAISSIndex:
    def test_save_and_load(self, tmp_path: Path):
        index = _faiss_or_skip(3)
        index.upsert("s1", _records([1, 0, 0], [0, 1, 0]))
        index.save(str(tmp_path / "idx"))

        restored = get_vector_index("faiss", dimension=3)
        restored.load(str(tmp_path / "idx"))

        assert restored.count() == 2
        hits = restored.search([0.0, 1.0, 0.0])
        assert hits[0].id == "s1:1"
        assert hits[0].text == "chunk 1"

    def test_delete_then_search(self):
        index = _faiss_or_skip(3)
        index.upsert("a", _records([1, 0, 0]))
        index.upsert("b", _records([0.9, 0.1, 0]))
        index.delete("a")
        assert [h.source_id for h in index.search([1.0, 0.0, 0.0])] == ["b"]


class TestIndexFactory:
    def test_available(self):
        assert available_indexes() == ["memory", "faiss"]

    def test_memory(self):
        assert isinstance(get_vector_index("memory"), InMemoryVectorIndex)

    def test_fresh_instances(self):
        assert get_vector_index("memory") is not get_vector_index("memory")

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown vector index"):
            get_vector_index("pinecone")
