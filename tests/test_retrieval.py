"""Tests for the retriever — stub embeddings and in-memory index, no network."""

from __future__ import annotations

import pytest
from conftest import FailingEmbedder, MockEmbedder

from edurag.embeddings import EmbeddingClient
from edurag.errors import EmbeddingUnavailableError, EmptyInputError, IndexUnavailableError
from edurag.retrieval import RetrievalResult, Retriever
from edurag.sources.memory_store import InMemorySourceStore
from edurag.vectorstore import IndexRecord
from edurag.vectorstore.memory_index import InMemoryVectorIndex


class KeywordEmbedder(MockEmbedder):
    """Maps known phrases to fixed 3-d vectors."""

    VECTORS = {
        "hash table collisions": [1.0, 0.0, 0.0],
        "binary search trees": [0.0, 1.0, 0.0],
        "operating systems": [0.0, 0.0, 1.0],
    }

    def __init__(self):
        super().__init__(dim=3)

    def embed_query(self, query: str) -> list[float]:
        self.calls.append(query)
        return self.VECTORS.get(query, [0.0, 0.0, 1.0])


class BrokenIndex(InMemoryVectorIndex):
    def count(self) -> int:
        raise ConnectionError("database offline")


class SearchFailsIndex(InMemoryVectorIndex):
    def search(self, vector, threshold=0.0, k=10):
        raise ConnectionError("rpc failed")


@pytest.fixture
def index() -> InMemoryVectorIndex:
    index = InMemoryVectorIndex()
    index.upsert("src-ds", [
        IndexRecord(0, "Chaining resolves collisions with per-bucket lists.", [1.0, 0.0, 0.0]),
        IndexRecord(1, "Open addressing probes for a free slot.", [0.8, 0.6, 0.0]),
        IndexRecord(2, "A BST keeps keys ordered.", [0.0, 1.0, 0.0]),
    ])
    index.upsert("src-orphan", [
        IndexRecord(0, "Chunk whose source row was deleted.", [0.95, 0.31, 0.0]),
    ])
    return index


@pytest.fixture
def retriever(index: InMemoryVectorIndex, source_store: InMemorySourceStore) -> Retriever:
    return Retriever(EmbeddingClient(KeywordEmbedder()), index, source_store)


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------


class TestRetriever:
    def test_ranked_and_enriched(self, retriever: Retriever):
        result = retriever.retrieve("hash table collisions", threshold=0.3, k=10)

        assert isinstance(result, RetrievalResult)
        assert not result.needs_processing
        sims = [m.similarity for m in result.matches]
        assert sims == sorted(sims, reverse=True)
        assert all(s > 0.3 for s in sims)

        top = result.matches[0]
        assert top.source_id == "src-ds"
        assert top.source_title == "Data Structures"
        assert top.source_category == "Lecture Notes"
        assert top.file_name == "data-structures.pdf"
        assert top.chunk_id == "src-ds:0"
        assert top.similarity_percent == 100

    def test_unresolved_sources_dropped(self, retriever: Retriever):
        result = retriever.retrieve("hash table collisions", threshold=0.3)
        assert "src-orphan" not in {m.source_id for m in result.matches}
        assert result.count == 2

    def test_k_limits_hits(self, retriever: Retriever):
        assert len(retriever.search("hash table collisions", k=1)) == 1

    def test_nothing_above_threshold(self, retriever: Retriever):
        result = retriever.retrieve("operating systems", threshold=0.3)
        assert result.matches == []
        assert not result.needs_processing
        assert result.message

    def test_search_returns_matches(self, retriever: Retriever):
        matches = retriever.search("binary search trees", threshold=0.5)
        assert [m.chunk_text for m in matches] == ["A BST keeps keys ordered.", "Open addressing probes for a free slot."]

    def test_empty_index_needs_processing(self, source_store: InMemorySourceStore):
        embedder = KeywordEmbedder()
        retriever = Retriever(EmbeddingClient(embedder), InMemoryVectorIndex(), source_store)

        result = retriever.retrieve("hash table collisions")

        assert result.needs_processing
        assert result.matches == []
        assert embedder.calls == []

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query(self, retriever: Retriever, query: str):
        with pytest.raises(EmptyInputError):
            retriever.retrieve(query)

    def test_index_failure(self, source_store: InMemorySourceStore):
        retriever = Retriever(EmbeddingClient(KeywordEmbedder()), BrokenIndex(), source_store)
        with pytest.raises(IndexUnavailableError, match="database offline"):
            retriever.retrieve("hash table collisions")

    def test_search_failure(self, source_store: InMemorySourceStore):
        index = SearchFailsIndex()
        index.upsert("src-ds", [IndexRecord(0, "text", [1.0, 0.0, 0.0])])
        retriever = Retriever(EmbeddingClient(KeywordEmbedder()), index, source_store)
        with pytest.raises(IndexUnavailableError):
            retriever.retrieve("hash table collisions")

    def test_embedding_failure_propagates(self, index: InMemoryVectorIndex, source_store: InMemorySourceStore):
        client = EmbeddingClient(FailingEmbedder(), FailingEmbedder())
        retriever = Retriever(client, index, source_store)
        with pytest.raises(EmbeddingUnavailableError):
            retriever.retrieve("hash table collisions")


# ---------------------------------------------------------------------------
# Source store
# ---------------------------------------------------------------------------


class TestSourceStore:
    def test_get_by_ids_skips_unknown(self, source_store: InMemorySourceStore):
        found = source_store.get_sources_by_ids(["src-algo", "nope", "src-algo"])
        assert [s.id for s in found] == ["src-algo"]

    def test_yaml_roundtrip(self, tmp_path, source_store: InMemorySourceStore):
        path = tmp_path / "catalog" / "sources.yaml"
        source_store.to_yaml(path)
        loaded = InMemorySourceStore.from_yaml(path)
        assert loaded.list_sources() == source_store.list_sources()

    def test_yaml_bare_list(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("- id: 7\n  title: Networks\n")
        (source,) = InMemorySourceStore.from_yaml(path).list_sources()
        assert source.id == "7"
        assert source.category == ""
        assert source.label == "Networks"
