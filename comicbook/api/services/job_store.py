"""In-memory job store.

Jobs live only for the lifetime of the process. Updates are shallow
merges guarded by a lock so concurrent jobs and request handlers can
share one store.
"""

import threading
import uuid
from dataclasses import fields, replace
from typing import Any, Optional

from ...core.types import ComicJobData, Job, JobKind, JobStatus

_JOB_FIELDS = {f.name for f in fields(Job)} - {"id", "kind", "created_at"}


class InMemoryJobStore:
    """Job store keyed by job id."""

    def __init__(self):
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()

    def create_job(self, kind: JobKind, data: ComicJobData) -> Job:
        """Create a pending job with progress 0."""
        job = Job(id=str(uuid.uuid4()), kind=JobKind(kind), data=data, status=JobStatus.PENDING)
        with self._lock:
            self._jobs[job.id] = job
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def update_job(self, job_id: str, **updates: Any) -> Optional[Job]:
        """
        Overwrite only the given fields of a job.

        Returns:
            The updated job, or None if no job has this id
        """
        unknown = set(updates) - _JOB_FIELDS
        if unknown:
            raise ValueError(f"Cannot update job fields: {sorted(unknown)}")

        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            updated = replace(job, **updates)
            self._jobs[job_id] = updated
            return updated
