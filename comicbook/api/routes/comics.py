"""Comic job endpoints."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from pydantic import ValidationError

from ...config import COMIC_CONSTANTS
from ...core.errors import TextExtractionError
from ...core.interfaces import JobStore
from ...core.modules.story_text import count_words
from ...core.types import ComicJobData, InputType, JobKind, JobStatus
from ..dependencies import Extractor, Manager, PipelineBuilder, Settings, Store
from ..models import ComicJobResponse, ComicOptions, CreateComicResponse, first_error_message
from ..services.cleanup import cleanup_artifacts
from ..services.comic_generation import (
    ComicPipeline,
    PipelineSettings,
    panel_image_path_for,
    pdf_path_for,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_UPLOAD_TYPES = ("application/pdf", "text/plain")


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def _run_comic_job(
    pipeline: ComicPipeline,
    store: JobStore,
    job_id: str,
    upload_file_path: Optional[str],
) -> None:
    """Run the pipeline, then drop the upload if the job failed."""
    await pipeline.run(job_id)

    job = store.get_job(job_id)
    if upload_file_path and job is not None and job.status == JobStatus.FAILED:
        await asyncio.to_thread(cleanup_artifacts, job_id, upload_file_path=upload_file_path)


@router.post(
    "",
    response_model=CreateComicResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Create a comic",
    description=(
        "Start a comic generation job from story text or an uploaded PDF/text file. "
        "Returns immediately with a job ID that can be polled for status."
    ),
)
async def create_comic(
    store: Store,
    manager: Manager,
    settings: Settings,
    extractor: Extractor,
    pipeline_factory: PipelineBuilder,
    text: Optional[str] = Form(default=None, description="Story text"),
    file: Optional[UploadFile] = File(default=None, description="PDF or plain-text story"),
    visual_style: Optional[str] = Form(default=None, alias="visualStyle"),
    panel_count: Optional[str] = Form(default=None, alias="panelCount"),
    panels_per_page: Optional[str] = Form(default=None, alias="panelsPerPage"),
):
    """Validate the upload, create the job and start generation in the background."""
    try:
        options = ComicOptions(
            visual_style=visual_style,
            panel_count=panel_count,
            panels_per_page=panels_per_page,
        )
    except ValidationError as e:
        raise _bad_request(first_error_message(e))

    story_text = text or ""
    if file is None and not story_text.strip():
        raise _bad_request("Provide either text or a PDF file.")

    max_words = settings.max_words

    try:
        pipeline = pipeline_factory(store, settings)
    except ValueError as e:
        logger.error(f"Comic pipeline unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    if story_text.strip():
        if count_words(story_text) > max_words:
            raise _bad_request(f"Text too long. Max {max_words} words.")
        data = ComicJobData(
            input_type=InputType.TEXT,
            story_text=story_text,
            panel_count=options.panel_count,
            panels_per_page=options.panels_per_page,
            visual_style=options.visual_style,
        )
    else:
        content = await file.read()
        if not content:
            raise _bad_request("File is empty")
        if len(content) > COMIC_CONSTANTS["max_upload_bytes"]:
            raise _bad_request("File too large. Max 100MB.")
        if file.content_type not in ALLOWED_UPLOAD_TYPES:
            raise _bad_request("Unsupported file type. Please upload a PDF or provide text.")

        if file.content_type == "text/plain":
            txt = content.decode("utf-8", errors="replace")
            if count_words(txt) > max_words:
                raise _bad_request(f"Text too long. Max {max_words} words.")
            data = ComicJobData(
                input_type=InputType.TEXT,
                story_text=txt,
                original_filename=file.filename,
                panel_count=options.panel_count,
                panels_per_page=options.panels_per_page,
                visual_style=options.visual_style,
            )
        else:
            upload_dir = Path(settings.upload_dir)
            upload_dir.mkdir(parents=True, exist_ok=True)
            file_path = upload_dir / f"{int(time.time() * 1000)}-{Path(file.filename or 'story.pdf').name}"
            await asyncio.to_thread(file_path.write_bytes, content)

            # Reject over-long PDFs before a job exists; unreadable ones fail in the pipeline
            try:
                extracted = await asyncio.to_thread(extractor.extract, content)
            except TextExtractionError as e:
                logger.warning(f"PDF validation extraction failed; continuing: {e}")
            else:
                if count_words(extracted) > max_words:
                    file_path.unlink(missing_ok=True)
                    raise _bad_request(f"PDF text too long. Max {max_words} words.")

            data = ComicJobData(
                input_type=InputType.PDF,
                file_path=str(file_path),
                original_filename=file.filename,
                mime_type="application/pdf",
                file_size=len(content),
                panel_count=options.panel_count,
                panels_per_page=options.panels_per_page,
                visual_style=options.visual_style,
            )

    try:
        job = store.create_job(JobKind.COMIC, data)
    except Exception as e:
        logger.error(f"Job creation failed: {e}")
        if data.file_path:
            Path(data.file_path).unlink(missing_ok=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create comic job: {e}",
        )

    manager.submit(job.id, _run_comic_job(pipeline, store, job.id, data.file_path))

    return CreateComicResponse(
        job_id=job.id,
        status=job.status,
        progress=job.progress,
    )


@router.get(
    "/{job_id}",
    response_model=ComicJobResponse,
    summary="Get a comic job",
    description="Get a comic job by ID. Poll this endpoint to check generation status.",
)
async def get_comic(job_id: str, store: Store):
    """Get a comic job by ID."""
    job = store.get_job(job_id)

    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Comic job {job_id} not found",
        )

    return ComicJobResponse.from_job(job)


@router.get(
    "/{job_id}/panels/{panel_index}",
    summary="Get panel image",
    description="Get the finished image of one panel, available as soon as it is drawn.",
    responses={
        200: {"content": {"image/png": {}}},
        404: {"description": "Panel not found"},
    },
)
async def get_panel_image(job_id: str, panel_index: int, store: Store, settings: Settings):
    """Get a panel image."""
    if not store.get_job(job_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")

    if panel_index < 0:
        raise _bad_request("Invalid panel index")

    image_path = panel_image_path_for(job_id, panel_index, settings)
    if not image_path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Panel not found")

    return FileResponse(image_path, media_type="image/png", headers={"Cache-Control": "no-store"})


def _completed_pdf(job_id: str, store: JobStore, settings: PipelineSettings) -> tuple[Path, Optional[str]]:
    job = store.get_job(job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if job.status != JobStatus.COMPLETED:
        raise _bad_request("Job not completed yet")

    pdf_path = pdf_path_for(job_id, settings)
    if not pdf_path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Generated PDF not found")
    return pdf_path, job.data.original_filename


@router.get(
    "/{job_id}/preview",
    summary="Preview the comic PDF",
    responses={200: {"content": {"application/pdf": {}}}},
)
async def preview_comic(job_id: str, store: Store, settings: Settings):
    """Serve the finished PDF inline."""
    pdf_path, _ = _completed_pdf(job_id, store, settings)
    return FileResponse(
        pdf_path,
        media_type="application/pdf",
        filename="comic-preview.pdf",
        content_disposition_type="inline",
    )


@router.get(
    "/{job_id}/download",
    summary="Download the comic PDF",
    responses={200: {"content": {"application/pdf": {}}}},
)
async def download_comic(job_id: str, store: Store, settings: Settings):
    """Serve the finished PDF as an attachment named after the upload."""
    pdf_path, original_filename = _completed_pdf(job_id, store, settings)
    stem = Path(original_filename).stem if original_filename else "comic"
    return FileResponse(
        pdf_path,
        media_type="application/pdf",
        filename=f"{stem}-comic.pdf",
    )
