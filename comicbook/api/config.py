"""API configuration constants.

Single source of truth for paths and settings used across the API layer.
"""

import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv

from .logging import ComicLogger

load_dotenv()

# Per-job working trees live under WORK_ROOT/<job_id>
WORK_ROOT = Path(os.getenv("COMIC_WORK_DIR", str(Path(tempfile.gettempdir()) / "comic")))

# Finished PDFs
OUTPUT_DIR = Path(os.getenv("COMIC_OUTPUT_DIR", str(Path(tempfile.gettempdir()) / "outputs")))

# Uploaded source files
UPLOAD_DIR = Path(os.getenv("COMIC_UPLOAD_DIR", str(Path(tempfile.gettempdir()) / "uploads")))

# Job manager settings
MAX_CONCURRENT_JOBS = int(os.getenv("COMIC_MAX_CONCURRENT_JOBS", "2"))

# Logging
LOG_JSON = os.getenv("COMIC_LOG_JSON", "true").lower() != "false"

# Global comic logger instance
comic_logger = ComicLogger()
