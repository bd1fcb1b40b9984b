"""Progress tracker for comic generation.

Maps pipeline stages to the progress percentage and stage label reported
on the job record. Every update is written straight through to the job
store, in call order, so observers never see progress move backwards.
"""

import logging
from typing import Any, Optional

from ...core.interfaces import JobStore
from ...core.types import JobStatus
from ..config import comic_logger

logger = logging.getLogger(__name__)

# Progress reported when each stage begins
STAGE_PROGRESS = {
    "initializing": 5,
    "extracting-text": 10,
    "analyzing-story": 20,
    "generating-script": 30,
    "drawing-panels": 40,
    "building-pdf": 85,
    "completed": 100,
    "failed": 100,
}

# Panel drawing spans 40 -> 80
PANELS_START = 40
PANELS_SPAN = 40


def panel_progress(completed: int, total: int) -> int:
    """Progress while drawing panel ``completed`` of ``total``."""
    return PANELS_START + (completed * PANELS_SPAN) // total


class ProgressTracker:
    """Writes stage transitions for one job to the job store."""

    def __init__(self, job_id: str, store: JobStore):
        self.job_id = job_id
        self.store = store
        self.stage: Optional[str] = None
        self.progress = 0

    def enter(self, stage: str, **fields: Any) -> None:
        """Record that ``stage`` is about to run, with optional extra job fields."""
        comic_logger.stage_started(self.job_id, stage)
        self._write(stage, STAGE_PROGRESS[stage], **fields)

    def panel(self, completed: int, total: int) -> None:
        """Record that panel ``completed`` of ``total`` (1-based) is being drawn."""
        self._write(f"drawing-panels ({completed}/{total})", panel_progress(completed, total))

    def _write(self, stage: str, progress: int, **fields: Any) -> None:
        progress = max(progress, self.progress)
        self.store.update_job(self.job_id, stage=stage, progress=progress, **fields)
        self.stage = stage
        self.progress = progress
        logger.debug(f"Job {self.job_id}: {stage} ({progress}%)")

    def fail(self, result) -> None:
        """Terminal failure write."""
        self.store.update_job(
            self.job_id,
            status=JobStatus.FAILED,
            progress=STAGE_PROGRESS["failed"],
            stage="failed",
            result=result,
        )
        self.stage = "failed"
        self.progress = STAGE_PROGRESS["failed"]
