"""FastAPI application for the Comic Book Generator."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import LOG_JSON
from .logging import configure_logging
from .routes import comics
from .services.cleanup import cancel_pending_cleanups
from .services.job_manager import job_manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging(json_format=LOG_JSON)
    logger.info("Comic API started")

    yield

    # Shutdown: stop running jobs and pending cleanups
    if job_manager.active_count:
        logger.info(f"Cancelling {job_manager.active_count} running comic job(s)")
    await job_manager.shutdown()
    cancelled = cancel_pending_cleanups()
    if cancelled:
        logger.info(f"Cancelled {cancelled} pending cleanup(s)")


app = FastAPI(
    title="Comic Book Generator API",
    description="""
Turn a story into an illustrated comic book PDF.

## Features
- **Story Analysis**: Summarize the story into beats sized to the panel count
- **Scripting**: One scene per panel with a visual description and Telugu dialogue
- **Illustration**: One image per panel in the chosen style, with a speech bubble
- **Layout**: Panels laid out on A4 pages in a two-column grid

## Workflow
1. POST `/comics` with story text or a PDF to start generation
2. Poll GET `/comics/{id}` until status is `completed` or `failed`
3. View panels as they finish at `/comics/{id}/panels/{index}`
4. Open `/comics/{id}/preview` or `/comics/{id}/download` for the PDF
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(comics.router, prefix="/comics", tags=["Comics"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
