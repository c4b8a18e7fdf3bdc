"""Ingestion pipeline — text → chunk → embed (worker pool) → store.

Chunks of one source are embedded concurrently but written in ascending
ordinal order, after the source's previous chunks have been deleted.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from edurag.chunking.base import BaseChunker
from edurag.chunking.schemas import Chunk
from edurag.chunking.text_chunker import TextChunker
from edurag.config import Settings
from edurag.embeddings.client import EmbeddingClient
from edurag.embeddings.schemas import Embedding
from edurag.errors import (
    DimensionMismatchError,
    EmbeddingUnavailableError,
    EmptyInputError,
    IndexUnavailableError,
    InvalidArgumentError,
)
from edurag.jobs import JobStatus, JobStore
from edurag.pipeline.rate_limit import RateLimiter
from edurag.pipeline.schemas import IngestResult
from edurag.vectorstore.base import VectorIndex
from edurag.vectorstore.schemas import IndexRecord

logger = logging.getLogger(__name__)


class IngestPipeline:
    """Orchestrates source ingestion: chunk → embed → store."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        vector_index: VectorIndex,
        chunk_size: int = 1000,
        chunk_overlap: int = 100,
        max_workers: int = 4,
        requests_per_second: float = 10.0,
        chunker: BaseChunker | None = None,
        rate_limiter: RateLimiter | None = None,
        job_store: JobStore | None = None,
    ):
        if max_workers < 1:
            raise InvalidArgumentError("max_workers must be at least 1")
        self.embedding_client = embedding_client
        self.vector_index = vector_index
        self.chunker = chunker or TextChunker(chunk_size, chunk_overlap)
        self.max_workers = max_workers
        self.rate_limiter = rate_limiter or RateLimiter(requests_per_second)
        self.job_store = job_store

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        embedding_client: EmbeddingClient,
        vector_index: VectorIndex,
        job_store: JobStore | None = None,
    ) -> IngestPipeline:
        return cls(
            embedding_client,
            vector_index,
            chunk_size=settings.chunking.max_chars,
            chunk_overlap=settings.chunking.overlap_chars,
            max_workers=settings.ingestion.max_workers,
            requests_per_second=settings.ingestion.requests_per_second,
            job_store=job_store or JobStore(ttl_seconds=settings.ingestion.job_ttl_seconds),
        )

    def ingest_text(self, source_id: str, text: str) -> IngestResult:
        """Chunk, embed and store ``text`` as the content of ``source_id``.

        Chunks whose embedding fails are skipped and reported; the rest are
        stored. When no chunk could be embedded nothing is written and the
        source's previous chunks stay in place.

        Raises:
            InvalidArgumentError: If ``source_id`` is blank.
            IndexUnavailableError: If the vector index cannot be written.
        """
        if not source_id or not source_id.strip():
            raise InvalidArgumentError("source_id is required")

        handle = None
        if self.job_store is not None:
            handle = self.job_store.create("ingest").handle
            self.job_store.update(handle, status=JobStatus.RUNNING)

        try:
            result = self._ingest(source_id, text)
        except Exception as exc:
            if handle is not None:
                self.job_store.update(handle, status=JobStatus.FAILED, error=str(exc))
            raise

        result.job_handle = handle
        if handle is not None:
            status = JobStatus.COMPLETED if result.chunks_stored else JobStatus.FAILED
            error = "; ".join(result.errors) if status == JobStatus.FAILED else None
            self.job_store.update(handle, status=status, result=result, error=error)
        return result

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _ingest(self, source_id: str, text: str) -> IngestResult:
        # Step 1: Chunk
        chunks = self.chunker.chunk(text, source_id=source_id)
        if not chunks:
            logger.warning("Source %s has no text to ingest", source_id)
            return IngestResult(source_id=source_id, errors=["Source contains no text"])

        # Step 2: Embed on the worker pool
        embedded, errors = self._embed_chunks(chunks)

        # Step 3: Keep one dimensionality (fallback vectors may differ)
        records = self._to_records(embedded, errors)
        failed = len(chunks) - len(records)

        if not records:
            logger.error("No chunk of %s could be embedded; index left unchanged", source_id)
            return IngestResult(
                source_id=source_id,
                chunks_created=len(chunks),
                chunks_failed=failed,
                errors=errors,
            )

        # Step 4: Replace the source's chunks
        try:
            removed = self.vector_index.delete(source_id)
            stored = self.vector_index.upsert(source_id, records)
        except DimensionMismatchError:
            raise
        except Exception as exc:
            raise IndexUnavailableError(f"Vector index write failed: {exc}") from exc

        logger.info(
            "Ingested %s: %d chunks → %d embedded → %d stored (%d replaced, %d failed)",
            source_id, len(chunks), len(records), stored, removed, failed,
        )
        return IngestResult(
            source_id=source_id,
            chunks_created=len(chunks),
            chunks_embedded=len(records),
            chunks_failed=failed,
            chunks_stored=stored,
            errors=errors,
        )

    def _embed_one(self, chunk: Chunk) -> Embedding:
        self.rate_limiter.acquire()
        return self.embedding_client.embed(chunk.text)

    def _embed_chunks(self, chunks: list[Chunk]) -> tuple[dict[int, tuple[Chunk, Embedding]], list[str]]:
        embedded: dict[int, tuple[Chunk, Embedding]] = {}
        errors: list[str] = []

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="ingest") as pool:
            futures = [(chunk, pool.submit(self._embed_one, chunk)) for chunk in chunks]
            for chunk, future in futures:
                try:
                    embedded[chunk.ordinal] = (chunk, future.result())
                except (EmbeddingUnavailableError, EmptyInputError) as exc:
                    logger.warning("Chunk %d of %s failed: %s", chunk.ordinal, chunk.source_id, exc)
                    errors.append(f"chunk {chunk.ordinal}: {exc}")

        return embedded, errors

    def _to_records(
        self,
        embedded: dict[int, tuple[Chunk, Embedding]],
        errors: list[str],
    ) -> list[IndexRecord]:
        dimension = self.vector_index.dimension
        records: list[IndexRecord] = []
        for ordinal in sorted(embedded):
            chunk, embedding = embedded[ordinal]
            if dimension is None:
                dimension = embedding.dimensionality
            if embedding.dimensionality != dimension:
                errors.append(
                    f"chunk {ordinal}: {embedding.dimensionality}-dimensional vector from "
                    f"{embedding.provider_used} does not match index dimension {dimension}"
                )
                continue
            records.append(IndexRecord(ordinal=ordinal, text=chunk.text, embedding=embedding.vector))
        return records
