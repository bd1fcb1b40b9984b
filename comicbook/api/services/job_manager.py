"""Background job manager running comic jobs as asyncio tasks."""

import asyncio
import logging
from typing import Awaitable, Optional

from ..config import MAX_CONCURRENT_JOBS

logger = logging.getLogger(__name__)


class JobManager:
    """Manages background comic generation jobs."""

    def __init__(self, max_concurrent: int = 2):
        """
        Initialize the job manager.

        Args:
            max_concurrent: Maximum comics generated at once.
                            Keep low since each job holds model and image calls open.
        """
        self.max_concurrent = max_concurrent
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._tasks: dict[str, asyncio.Task] = {}

    def _get_semaphore(self) -> asyncio.Semaphore:
        # Created lazily so it binds to the running loop
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
        return self._semaphore

    async def _run_limited(self, job_id: str, coro: Awaitable[None]) -> None:
        async with self._get_semaphore():
            logger.debug(f"Job {job_id} started")
            await coro

    def submit(self, job_id: str, coro: Awaitable[None]) -> asyncio.Task:
        """
        Submit a job for background execution.

        Must be called from inside the running event loop.

        Args:
            job_id: Unique identifier for the job
            coro: Coroutine to run
        """
        task = asyncio.create_task(self._run_limited(job_id, coro), name=f"comic-job-{job_id}")
        self._tasks[job_id] = task

        # Forget the task once it finishes
        def cleanup(t: asyncio.Task) -> None:
            if self._tasks.get(job_id) is t:
                del self._tasks[job_id]
            if not t.cancelled() and t.exception() is not None:
                logger.error(f"Job {job_id} crashed: {t.exception()!r}")

        task.add_done_callback(cleanup)
        return task

    @property
    def active_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    async def shutdown(self) -> None:
        """Cancel outstanding jobs and wait for them to unwind."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._semaphore = None


# Global instance - comic generation is resource-intensive, limit concurrency
job_manager = JobManager(max_concurrent=MAX_CONCURRENT_JOBS)
