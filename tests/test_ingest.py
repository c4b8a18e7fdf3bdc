"""Tests for the ingestion pipeline, rate limiter and job store."""

from __future__ import annotations

import threading

import pytest
from conftest import DIM, FailingEmbedder, MockEmbedder

from edurag.config import IngestionSettings, Settings
from edurag.embeddings import EmbeddingClient
from edurag.errors import IndexUnavailableError, InvalidArgumentError
from edurag.jobs import JobStatus, JobStore
from edurag.pipeline import IngestPipeline, IngestResult, RateLimiter
from edurag.vectorstore.memory_index import InMemoryVectorIndex


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


class FlakyEmbedder(MockEmbedder):
    """Fails for any text containing ``marker``."""

    def __init__(self, marker: str, dim: int = DIM):
        super().__init__(dim)
        self.marker = marker
        self._lock = threading.Lock()

    def embed_query(self, query: str) -> list[float]:
        with self._lock:
            self.calls.append(query)
        if self.marker in query:
            raise ConnectionError("flaky provider")
        return self._hash_embed(query)


class RecordingIndex(InMemoryVectorIndex):
    def __init__(self):
        super().__init__()
        self.operations: list[tuple[str, str]] = []
        self.upserted_ordinals: list[int] = []

    def delete(self, source_id: str) -> int:
        self.operations.append(("delete", source_id))
        return super().delete(source_id)

    def upsert(self, source_id, records):
        self.operations.append(("upsert", source_id))
        self.upserted_ordinals.extend(r.ordinal for r in records)
        return super().upsert(source_id, records)


class ReadOnlyIndex(InMemoryVectorIndex):
    def upsert(self, source_id, records):
        raise PermissionError("read-only replica")


def _pipeline(index=None, primary=None, secondary=None, **kwargs) -> IngestPipeline:
    clock = FakeClock()
    client = EmbeddingClient(primary or MockEmbedder(), secondary, timeout=None)
    return IngestPipeline(
        client,
        index if index is not None else InMemoryVectorIndex(),
        chunk_size=kwargs.pop("chunk_size", 120),
        chunk_overlap=kwargs.pop("chunk_overlap", 20),
        rate_limiter=RateLimiter(1000, clock=clock, sleep=clock.sleep),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class TestIngestPipeline:
    def test_ingest_text(self, course_text: str):
        index = InMemoryVectorIndex()
        result = _pipeline(index).ingest_text("src-ds", course_text)

        assert isinstance(result, IngestResult)
        assert result.chunks_created > 1
        assert result.chunks_embedded == result.chunks_created
        assert result.chunks_stored == result.chunks_created
        assert result.chunks_failed == 0
        assert result.success
        assert index.count() == result.chunks_stored

    def test_ordinals_written_in_order(self, course_text: str):
        index = RecordingIndex()
        _pipeline(index, max_workers=8).ingest_text("src-ds", course_text)
        assert index.upserted_ordinals == sorted(index.upserted_ordinals)
        assert index.upserted_ordinals[0] == 0

    def test_reingest_replaces_chunks(self, course_text: str):
        index = RecordingIndex()
        pipeline = _pipeline(index)

        first = pipeline.ingest_text("src-ds", course_text)
        pipeline.ingest_text("src-ds", course_text)

        assert index.count() == first.chunks_stored
        assert index.operations == [
            ("delete", "src-ds"), ("upsert", "src-ds"),
            ("delete", "src-ds"), ("upsert", "src-ds"),
        ]

    def test_other_sources_untouched(self, course_text: str):
        index = InMemoryVectorIndex()
        pipeline = _pipeline(index)
        a = pipeline.ingest_text("a", course_text)
        b = pipeline.ingest_text("b", "Short second source about graphs.")
        assert index.count() == a.chunks_stored + b.chunks_stored
        assert index.source_ids() == ["a", "b"]

    def test_partial_failure(self, course_text: str):
        index = InMemoryVectorIndex()
        result = _pipeline(index, primary=FlakyEmbedder("Separate chaining")).ingest_text("src-ds", course_text)

        assert result.chunks_failed >= 1
        assert result.chunks_stored == result.chunks_created - result.chunks_failed
        assert result.partial
        assert not result.success
        assert all(e.startswith("chunk ") for e in result.errors)
        assert index.count() == result.chunks_stored

    def test_total_failure_writes_nothing(self, course_text: str):
        index = InMemoryVectorIndex()
        pipeline = _pipeline(index)
        pipeline.ingest_text("src-ds", course_text)
        before = index.count()

        failing = _pipeline(index, primary=FailingEmbedder())
        result = failing.ingest_text("src-ds", course_text)

        assert result.chunks_stored == 0
        assert result.chunks_failed == result.chunks_created
        assert index.count() == before

    def test_fallback_dimension_mismatch_counted_as_failure(self, course_text: str):
        index = InMemoryVectorIndex(dimension=DIM)
        pipeline = _pipeline(index, primary=FailingEmbedder(), secondary=MockEmbedder(dim=8))

        result = pipeline.ingest_text("src-ds", course_text)

        assert result.chunks_stored == 0
        assert "does not match index dimension" in result.errors[0]

    def test_empty_text(self):
        result = _pipeline().ingest_text("src-ds", "   \n")
        assert result.chunks_created == 0
        assert result.errors

    def test_blank_source_id(self):
        with pytest.raises(InvalidArgumentError):
            _pipeline().ingest_text(" ", "text")

    def test_index_failure(self, course_text: str):
        with pytest.raises(IndexUnavailableError, match="read-only"):
            _pipeline(ReadOnlyIndex()).ingest_text("src-ds", course_text)

    def test_invalid_workers(self):
        with pytest.raises(InvalidArgumentError):
            _pipeline(max_workers=0)


class TestIngestJobs:
    def test_completed_job(self, course_text: str):
        jobs = JobStore()
        result = _pipeline(job_store=jobs).ingest_text("src-ds", course_text)

        job = jobs.get(result.job_handle)
        assert job is not None
        assert job.kind == "ingest"
        assert job.status == JobStatus.COMPLETED
        assert job.result is result
        assert job.finished

    def test_failed_job(self, course_text: str):
        jobs = JobStore()
        result = _pipeline(primary=FailingEmbedder(), job_store=jobs).ingest_text("src-ds", course_text)
        job = jobs.get(result.job_handle)
        assert job.status == JobStatus.FAILED
        assert job.error

    def test_exception_marks_job_failed(self, course_text: str):
        jobs = JobStore()
        with pytest.raises(IndexUnavailableError):
            _pipeline(ReadOnlyIndex(), job_store=jobs).ingest_text("src-ds", course_text)
        (handle,) = list(jobs._jobs)
        assert jobs.get(handle).status == JobStatus.FAILED

    def test_no_store_no_handle(self, course_text: str):
        assert _pipeline().ingest_text("src-ds", course_text).job_handle is None

    def test_from_settings_tracks_jobs(self, course_text: str):
        settings = Settings(ingestion=IngestionSettings(job_ttl_seconds=120))
        client = EmbeddingClient(MockEmbedder(), timeout=None)
        pipeline = IngestPipeline.from_settings(settings, client, InMemoryVectorIndex(dimension=DIM))

        assert pipeline.job_store.ttl_seconds == 120
        result = pipeline.ingest_text("src-ds", course_text)
        assert pipeline.job_store.get(result.job_handle).status == JobStatus.COMPLETED

    def test_from_settings_keeps_given_store(self):
        jobs = JobStore(ttl_seconds=5)
        client = EmbeddingClient(MockEmbedder(), timeout=None)
        pipeline = IngestPipeline.from_settings(
            Settings(), client, InMemoryVectorIndex(dimension=DIM), job_store=jobs,
        )
        assert pipeline.job_store is jobs


# ---------------------------------------------------------------------------
# Rate limiter
# ---------------------------------------------------------------------------


class TestRateLimiter:
    def test_burst_then_wait(self):
        clock = FakeClock()
        limiter = RateLimiter(2, burst=2, clock=clock, sleep=clock.sleep)

        limiter.acquire()
        limiter.acquire()
        assert clock.now == 0.0

        limiter.acquire()
        assert clock.now == pytest.approx(0.5)

    def test_try_acquire(self):
        clock = FakeClock()
        limiter = RateLimiter(1, burst=1, clock=clock, sleep=clock.sleep)
        assert limiter.try_acquire()
        assert not limiter.try_acquire()
        clock.now += 1.0
        assert limiter.try_acquire()

    def test_refill_capped_at_burst(self):
        clock = FakeClock()
        limiter = RateLimiter(10, burst=3, clock=clock, sleep=clock.sleep)
        clock.now += 100
        assert sum(limiter.try_acquire() for _ in range(5)) == 3

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            RateLimiter(0)


# ---------------------------------------------------------------------------
# Job store
# ---------------------------------------------------------------------------


class TestJobStore:
    def test_create_and_get(self):
        store = JobStore()
        job = store.create("validate")
        assert len(job.handle) == 32
        assert store.get(job.handle) == job
        assert job.status == JobStatus.PENDING

    def test_handles_unique(self):
        store = JobStore()
        assert len({store.create("x").handle for _ in range(50)}) == 50

    def test_update(self):
        clock = FakeClock()
        store = JobStore(ttl_seconds=10, clock=clock)
        job = store.create("ingest")
        clock.now = 5
        updated = store.update(job.handle, status="running")
        assert updated.status == JobStatus.RUNNING
        assert updated.expires_at == 15

    def test_update_rejects_unknown(self):
        store = JobStore()
        job = store.create("x")
        with pytest.raises(KeyError):
            store.update("missing", status="running")
        with pytest.raises(ValueError):
            store.update(job.handle, status="exploded")

    def test_update_rejects_handle_field(self):
        store = JobStore()
        job = store.create("x")
        with pytest.raises(ValueError, match="handle"):
            store.update(job.handle, handle="other")
        assert store.get(job.handle).handle == job.handle

    def test_sweep_drops_only_expired(self):
        clock = FakeClock()
        store = JobStore(ttl_seconds=10, clock=clock)
        old = store.create("a")
        clock.now = 6
        fresh = store.create("b")
        clock.now = 11

        assert store.get(old.handle) is None
        assert store.sweep() == 1
        assert store.get(fresh.handle) is not None
        assert len(store) == 1
        assert store.sweep() == 0

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            JobStore(ttl_seconds=0)
