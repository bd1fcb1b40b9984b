"""Deferred deletion of a comic job's files."""

import asyncio
import shutil
from pathlib import Path
from typing import Optional

from ..config import comic_logger

# Strong references so pending cleanups are not garbage-collected
_pending_cleanups: set[asyncio.Task] = set()


def cleanup_artifacts(
    job_id: str,
    pdf_path: Optional[Path] = None,
    comic_dir: Optional[Path] = None,
    upload_file_path: Optional[str] = None,
) -> bool:
    """
    Delete the uploaded source, the PDF and the job's working tree.

    Missing files are skipped. Errors are logged, not raised.

    Returns:
        True if everything present was deleted
    """
    try:
        if upload_file_path:
            Path(upload_file_path).unlink(missing_ok=True)
        if pdf_path:
            Path(pdf_path).unlink(missing_ok=True)
        if comic_dir and Path(comic_dir).exists():
            shutil.rmtree(comic_dir)
    except OSError as e:
        comic_logger.cleanup_failed(job_id, e)
        return False

    comic_logger.cleanup_completed(job_id)
    return True


async def _cleanup_later(delay_seconds: float, job_id: str, **paths) -> None:
    await asyncio.sleep(delay_seconds)
    await asyncio.to_thread(cleanup_artifacts, job_id, **paths)


def schedule_cleanup(
    job_id: str,
    delay_seconds: float,
    pdf_path: Optional[Path] = None,
    comic_dir: Optional[Path] = None,
    upload_file_path: Optional[str] = None,
) -> asyncio.Task:
    """Run cleanup_artifacts after ``delay_seconds`` without blocking the caller."""
    task = asyncio.create_task(
        _cleanup_later(
            delay_seconds,
            job_id,
            pdf_path=pdf_path,
            comic_dir=comic_dir,
            upload_file_path=upload_file_path,
        ),
        name=f"comic-cleanup-{job_id}",
    )
    _pending_cleanups.add(task)
    task.add_done_callback(_pending_cleanups.discard)
    return task


def cancel_pending_cleanups() -> int:
    """Cancel cleanups that have not run yet. Returns how many were cancelled."""
    count = 0
    for task in list(_pending_cleanups):
        if not task.done():
            task.cancel()
            count += 1
    return count
