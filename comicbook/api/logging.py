"""Structured logging infrastructure for the API layer.

Provides JSON-formatted logging for production and human-readable
logging for development, plus a ComicLogger helper for pipeline events.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

# Extra fields copied onto JSON log lines when present on the record
EXTRA_FIELDS = (
    "job_id",
    "stage",
    "duration",
    "attempt",
    "error_type",
    "panel_index",
    "failed_at_stage",
)

# Third-party loggers kept at WARNING and above
NOISY_LOGGERS = ("httpx", "httpcore", "LiteLLM")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)

    # Model client libraries log every request at INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


class ComicLogger:
    """Logger for comic generation events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("comic_generation")

    def generation_started(self, job_id: str, panel_count: int) -> None:
        self.logger.info(
            f"Comic generation started ({panel_count} panels)",
            extra={"job_id": job_id, "stage": "started"},
        )

    def stage_started(self, job_id: str, stage: str) -> None:
        self.logger.info(f"Stage started: {stage}", extra={"job_id": job_id, "stage": stage})

    def panel_completed(self, job_id: str, panel_index: int, duration: Optional[float] = None) -> None:
        extra = {"job_id": job_id, "stage": "drawing-panels", "panel_index": panel_index}
        if duration:
            extra["duration"] = round(duration, 2)
        self.logger.info(f"Panel {panel_index} completed", extra=extra)

    def generation_completed(self, job_id: str, duration: float) -> None:
        self.logger.info(
            "Comic generation completed",
            extra={"job_id": job_id, "stage": "completed", "duration": round(duration, 2)},
        )

    def generation_failed(self, job_id: str, error: BaseException, stage: Optional[str] = None) -> None:
        extra = {"job_id": job_id, "stage": "failed", "error_type": type(error).__name__}
        if stage:
            extra["failed_at_stage"] = stage
        self.logger.error(
            f"Comic generation failed: {error}",
            extra=extra,
            exc_info=(type(error), error, error.__traceback__),
        )

    def cleanup_completed(self, job_id: str) -> None:
        self.logger.info(f"Cleaned up comic job {job_id}", extra={"job_id": job_id})

    def cleanup_failed(self, job_id: str, error: BaseException) -> None:
        self.logger.error(
            f"Cleanup failed for comic job {job_id}: {error}",
            extra={"job_id": job_id, "error_type": type(error).__name__},
        )
