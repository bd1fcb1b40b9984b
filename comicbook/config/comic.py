"""
Comic generation constants for the Comic Book Generator.

Bounds on input and layout, timeouts, and the retry policy for each
external model call.
"""

from ..core.retry import RetryPolicy

# Comic generation constants
COMIC_CONSTANTS = {
    "max_words": 10_000,
    "min_panel_count": 4,
    "max_panel_count": 8,
    "default_panel_count": 6,
    "panels_per_page_options": (2, 4, 6),
    "default_panels_per_page": 4,
    "timeout_seconds": 10 * 60,
    "cleanup_delay_seconds": 24 * 60 * 60,
    "max_upload_bytes": 100 * 1024 * 1024,
}

# Retry policies for each model call
ANALYSIS_RETRY = RetryPolicy(retries=2, base_delay_ms=800)
SCRIPT_RETRY = RetryPolicy(retries=2, base_delay_ms=1000)
IMAGE_RETRY = RetryPolicy(retries=2, base_delay_ms=1200)
