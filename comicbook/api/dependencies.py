"""FastAPI dependency injection for the job store, job manager and pipeline."""

from typing import Annotated, Callable, Optional

from dotenv import find_dotenv, load_dotenv
from fastapi import Depends

# Load .env from project root (find_dotenv searches parent directories)
load_dotenv(find_dotenv())

from ..core.interfaces import JobStore, TextExtractor  # noqa: E402
from .services.comic_generation import (  # noqa: E402
    ComicPipeline,
    PipelineSettings,
    create_comic_pipeline,
)
from .services.job_manager import JobManager, job_manager  # noqa: E402
from .services.job_store import InMemoryJobStore  # noqa: E402
from .services.text_extraction import PdfTextExtractor  # noqa: E402

PipelineFactory = Callable[[JobStore, Optional[PipelineSettings]], ComicPipeline]

# Jobs live only in process memory
_job_store = InMemoryJobStore()
_settings = PipelineSettings()


def get_job_store() -> JobStore:
    """Get the process-wide job store."""
    return _job_store


def get_job_manager() -> JobManager:
    return job_manager


def get_settings() -> PipelineSettings:
    return _settings


def get_text_extractor() -> TextExtractor:
    return PdfTextExtractor()


def get_pipeline_factory() -> PipelineFactory:
    """Get the function that wires a pipeline to the configured model clients."""
    return create_comic_pipeline


# Type aliases for cleaner route signatures
Store = Annotated[JobStore, Depends(get_job_store)]
Manager = Annotated[JobManager, Depends(get_job_manager)]
Settings = Annotated[PipelineSettings, Depends(get_settings)]
Extractor = Annotated[TextExtractor, Depends(get_text_extractor)]
PipelineBuilder = Annotated[PipelineFactory, Depends(get_pipeline_factory)]
