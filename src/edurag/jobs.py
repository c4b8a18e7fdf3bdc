"""In-process store for long-running job status.

Handles are opaque ``uuid4().hex`` strings. Jobs expire ``ttl_seconds``
after their last update and are removed only by an explicit ``sweep()``;
there are no background timers.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0


class JobStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Job:
    handle: str
    kind: str
    status: JobStatus
    created_at: float
    updated_at: float
    expires_at: float
    result: Any = None
    error: str | None = None

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)


_UPDATABLE = frozenset({"status", "result", "error"})


class JobStore:
    """Thread-safe registry of jobs keyed by handle."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()

    def create(self, kind: str) -> Job:
        now = self._clock()
        job = Job(
            handle=uuid.uuid4().hex,
            kind=kind,
            status=JobStatus.PENDING,
            created_at=now,
            updated_at=now,
            expires_at=now + self.ttl_seconds,
        )
        with self._lock:
            self._jobs[job.handle] = job
        logger.debug("Created %s job %s", kind, job.handle)
        return job

    def get(self, handle: str) -> Job | None:
        """Return the job, or ``None`` if unknown or already expired."""
        with self._lock:
            job = self._jobs.get(handle)
        if job is None or job.expires_at <= self._clock():
            return None
        return job

    def update(self, handle: str, /, **fields: Any) -> Job:
        """Set ``status``, ``result`` and/or ``error`` and extend the expiry.

        Raises:
            KeyError: If the handle is unknown (or was swept).
            ValueError: If an unsupported field is given.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update job fields: {sorted(unknown)}")
        if "status" in fields:
            fields["status"] = JobStatus(fields["status"])

        now = self._clock()
        with self._lock:
            job = self._jobs.get(handle)
            if job is None:
                raise KeyError(handle)
            job = replace(job, updated_at=now, expires_at=now + self.ttl_seconds, **fields)
            self._jobs[handle] = job
        return job

    def sweep(self) -> int:
        """Drop expired jobs and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [h for h, job in self._jobs.items() if job.expires_at <= now]
            for handle in expired:
                del self._jobs[handle]
        if expired:
            logger.info("Swept %d expired jobs", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
