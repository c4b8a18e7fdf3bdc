"""Retriever — embed query, search vector index, attach source metadata."""

from __future__ import annotations

import logging

from edurag.embeddings.client import EmbeddingClient
from edurag.errors import EmptyInputError, IndexUnavailableError
from edurag.retrieval.schemas import RetrievalResult, RetrievedMatch
from edurag.sources.base import SourceStore
from edurag.vectorstore.base import VectorIndex

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.3
DEFAULT_TOP_K = 10


class Retriever:
    """Orchestrates embedding → search → metadata enrichment."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        vector_index: VectorIndex,
        source_store: SourceStore,
    ):
        self.embedding_client = embedding_client
        self.vector_index = vector_index
        self.source_store = source_store

    def retrieve(
        self,
        query: str,
        threshold: float = DEFAULT_THRESHOLD,
        k: int = DEFAULT_TOP_K,
    ) -> RetrievalResult:
        """Run a full retrieval: embed → search → enrich.

        An index without content, or without anything above ``threshold``,
        yields an empty result rather than an error.

        Raises:
            EmptyInputError: If the query is blank.
            EmbeddingUnavailableError: If the query cannot be embedded.
            IndexUnavailableError: If the index call itself fails.
        """
        if not query or not query.strip():
            raise EmptyInputError("Query is required")

        try:
            indexed = self.vector_index.count()
        except Exception as exc:
            raise IndexUnavailableError(f"Vector index unavailable: {exc}") from exc

        if indexed == 0:
            logger.info("No embeddings in the index; sources need processing first")
            return RetrievalResult(
                query=query,
                needs_processing=True,
                message="No processed materials found. Process materials before searching.",
            )

        # Step 1: Embed the query
        query_embedding = self.embedding_client.embed(query)

        # Step 2: Search the index
        try:
            hits = self.vector_index.search(query_embedding.vector, threshold=threshold, k=k)
        except Exception as exc:
            raise IndexUnavailableError(f"Vector index search failed: {exc}") from exc

        if not hits:
            logger.info("No matches above threshold %.2f for query", threshold)
            return RetrievalResult(
                query=query,
                message="No matching documents found. Try a different query or lower the threshold.",
            )

        # Step 3: Enrich with source metadata, dropping unresolved sources
        source_ids = list(dict.fromkeys(h.source_id for h in hits))
        sources = {s.id: s for s in self.source_store.get_sources_by_ids(source_ids)}

        matches: list[RetrievedMatch] = []
        for hit in hits:
            source = sources.get(hit.source_id)
            if source is None:
                continue
            matches.append(RetrievedMatch(
                chunk_text=hit.text,
                source_id=hit.source_id,
                source_title=source.title,
                source_category=source.category,
                similarity=hit.similarity,
                chunk_id=hit.id,
                file_name=source.file_name,
            ))

        dropped = len(hits) - len(matches)
        logger.info(
            "Retrieved %d matches (hits=%d, unresolved=%d, provider=%s)",
            len(matches), len(hits), dropped, query_embedding.provider_used,
        )
        return RetrievalResult(query=query, matches=matches)

    def search(
        self,
        query: str,
        threshold: float = DEFAULT_THRESHOLD,
        k: int = DEFAULT_TOP_K,
    ) -> list[RetrievedMatch]:
        """Convenience wrapper returning only the ranked matches."""
        return self.retrieve(query, threshold=threshold, k=k).matches
