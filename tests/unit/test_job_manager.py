"""Unit tests for the background job manager."""

import asyncio

import pytest

from comicbook.api.services.job_manager import JobManager


@pytest.mark.asyncio
async def test_runs_submitted_job():
    manager = JobManager(max_concurrent=2)
    done = []

    async def job():
        done.append("ran")

    await manager.submit("job-1", job())

    assert done == ["ran"]
    assert manager.active_count == 0


@pytest.mark.asyncio
async def test_limits_concurrency():
    manager = JobManager(max_concurrent=1)
    running = 0
    peak = 0

    async def job():
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1

    tasks = [manager.submit(f"job-{i}", job()) for i in range(3)]
    await asyncio.gather(*tasks)

    assert peak == 1


@pytest.mark.asyncio
async def test_shutdown_cancels_outstanding_jobs():
    manager = JobManager(max_concurrent=2)
    started = asyncio.Event()

    async def job():
        started.set()
        await asyncio.sleep(3600)

    task = manager.submit("slow", job())
    await started.wait()
    assert manager.active_count == 1

    await manager.shutdown()

    assert task.cancelled()
    assert manager.active_count == 0
