"""
Comic generation pipeline.

Runs one comic job end to end: resolve and clean the story text, summarize
it, script it into panels, draw each panel in order, and lay the panels out
into a PDF. Every stage is announced on the job record before it starts.
The whole sequence races a wall-clock timeout; any failure, the timeout
included, ends the job as ``failed`` with the error message in
``result.error``.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Optional

from ...config import COMIC_CONSTANTS
from ...core.errors import ComicTimeoutError, InvalidJobError, MissingInputError
from ...core.interfaces import JobStore, TextExtractor
from ...core.modules.panel_illustrator import PanelIllustrator, panel_basename
from ...core.modules.panel_prompt import build_image_prompt
from ...core.modules.pdf_assembler import build_comic_pdf
from ...core.modules.script_generator import ScriptGenerator
from ...core.modules.sidecar import write_panel_sidecar
from ...core.modules.story_analyzer import StoryAnalyzer
from ...core.modules.story_text import clean_text, enforce_word_limit
from ...core.types import (
    ComicJobData,
    ComicJobResult,
    InputType,
    JobKind,
    JobStatus,
    PanelResult,
)
from ..config import OUTPUT_DIR, UPLOAD_DIR, WORK_ROOT, comic_logger
from .cleanup import schedule_cleanup
from .progress_tracker import ProgressTracker

logger = logging.getLogger(__name__)

# Called after each panel with (stage, completed, total)
ProgressCallback = Callable[[str, int, int], None]


@dataclass
class PipelineSettings:
    """Filesystem roots and limits for a pipeline run."""

    work_root: Path = field(default_factory=lambda: WORK_ROOT)
    output_dir: Path = field(default_factory=lambda: OUTPUT_DIR)
    upload_dir: Path = field(default_factory=lambda: UPLOAD_DIR)
    max_words: int = COMIC_CONSTANTS["max_words"]
    timeout_seconds: float = COMIC_CONSTANTS["timeout_seconds"]
    # None keeps the files (CLI use)
    cleanup_delay_seconds: Optional[float] = COMIC_CONSTANTS["cleanup_delay_seconds"]


def preview_url(job_id: str) -> str:
    return f"/comics/{job_id}/preview"


def download_url(job_id: str) -> str:
    return f"/comics/{job_id}/download"


def panel_preview_url(job_id: str, index: int) -> str:
    return f"/comics/{job_id}/panels/{index}"


class ComicPipeline:
    """
    Orchestrates comic generation for jobs held in a job store.

    Args:
        store: Job store the pipeline reports through
        analyzer: Story summarizer
        script_generator: Scene scripter
        illustrator: Panel image generator
        text_extractor: PDF text extractor for uploaded files
        settings: Paths and limits
        on_progress: Optional callback invoked after each finished panel
    """

    def __init__(
        self,
        store: JobStore,
        analyzer: StoryAnalyzer,
        script_generator: ScriptGenerator,
        illustrator: PanelIllustrator,
        text_extractor: TextExtractor,
        settings: Optional[PipelineSettings] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.store = store
        self.analyzer = analyzer
        self.script_generator = script_generator
        self.illustrator = illustrator
        self.text_extractor = text_extractor
        self.settings = settings or PipelineSettings()
        self.on_progress = on_progress

    async def run(self, job_id: str) -> None:
        """
        Generate the comic for ``job_id``.

        Never raises for pipeline failures; they are written to the job.
        """
        start_time = time.time()
        tracker = ProgressTracker(job_id, self.store)
        stages = asyncio.create_task(self._run_stages(job_id, tracker), name=f"comic-{job_id}")

        try:
            done, _ = await asyncio.wait({stages}, timeout=self.settings.timeout_seconds)
            if not done:
                # Stop the stages before the failure write so nothing lands after it
                stages.cancel()
                await asyncio.gather(stages, return_exceptions=True)
                raise ComicTimeoutError()
            stages.result()
        except asyncio.CancelledError:
            stages.cancel()
            raise
        except Exception as e:
            comic_logger.generation_failed(job_id, e, stage=tracker.stage)
            self._fail(job_id, tracker, e)
            return

        comic_logger.generation_completed(job_id, time.time() - start_time)

    def _fail(self, job_id: str, tracker: ProgressTracker, error: Exception) -> None:
        job = self.store.get_job(job_id)
        previous = job.result if job and job.result else ComicJobResult()
        # Panels already reported stay visible; no PDF pointers on failure
        result = ComicJobResult(
            summary=previous.summary,
            panels=list(previous.panels),
            error=str(error) or type(error).__name__,
        )
        tracker.fail(result)

    async def resolve_story_text(self, data: ComicJobData) -> str:
        """
        Get the cleaned story text for a job.

        Provided text wins if it is not blank; otherwise the uploaded PDF is
        read and extracted.

        Raises:
            MissingInputError: If there is neither text nor a PDF to read
            StoryTooLongError: If the cleaned text is over the word limit
        """
        if data.story_text and data.story_text.strip():
            text = data.story_text
        elif data.input_type == InputType.PDF:
            if not data.file_path:
                raise MissingInputError("Missing PDF file")
            pdf_bytes = await asyncio.to_thread(Path(data.file_path).read_bytes)
            text = await asyncio.to_thread(self.text_extractor.extract, pdf_bytes)
        else:
            raise MissingInputError("Missing story text")

        cleaned = clean_text(text)
        enforce_word_limit(cleaned, self.settings.max_words)
        return cleaned

    async def _run_stages(self, job_id: str, tracker: ProgressTracker) -> None:
        tracker.enter("initializing", status=JobStatus.PROCESSING)

        job = self.store.get_job(job_id)
        if job is None or job.kind != JobKind.COMIC:
            raise InvalidJobError("Invalid job")

        data = job.data
        comic_logger.generation_started(job_id, data.panel_count)

        comic_dir = Path(self.settings.work_root) / job_id
        panels_dir = comic_dir / "panels"
        output_dir = Path(self.settings.output_dir)
        await asyncio.to_thread(panels_dir.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(output_dir.mkdir, parents=True, exist_ok=True)

        # Extract and normalize text
        tracker.enter("extracting-text")
        story_text = await self.resolve_story_text(data)
        self.store.update_job(job_id, data=replace(data, story_text=story_text))

        # Summarize
        tracker.enter("analyzing-story")
        summary = await self.analyzer.analyze(story_text, data.panel_count)

        # Script, with the summary visible before scenes arrive
        tracker.enter("generating-script", result=ComicJobResult(summary=summary, panels=[]))
        scenes = await self.script_generator.generate(
            story_text=story_text,
            summary=summary,
            visual_style=data.visual_style,
            panel_count=data.panel_count,
        )

        # Draw panels one at a time
        tracker.enter("drawing-panels")
        panels: list[PanelResult] = []
        total = len(scenes)
        for i, scene in enumerate(scenes):
            panel_start = time.time()
            tracker.panel(i + 1, total)

            image_prompt = build_image_prompt(scene.visual, data.visual_style)
            image = await self.illustrator.generate_panel(
                index=i,
                panels_dir=panels_dir,
                image_prompt=image_prompt,
                dialogue=scene.dialogue_telugu,
            )

            panel = PanelResult(
                index=i,
                scene_title=scene.title,
                scene_description=scene.visual,
                dialogue_telugu=scene.dialogue_telugu,
                image_prompt=image_prompt,
                image_url=image.image_url,
                preview_url=panel_preview_url(job_id, i),
            )
            panels.append(panel)

            self.store.update_job(job_id, result=ComicJobResult(summary=summary, panels=list(panels)))
            await asyncio.to_thread(write_panel_sidecar, panels_dir, panel, image.final_image_path)

            comic_logger.panel_completed(job_id, i, time.time() - panel_start)
            if self.on_progress:
                self.on_progress("drawing-panels", i + 1, total)

        # Lay out the PDF from the files on disk
        tracker.enter("building-pdf")
        pdf_path = await asyncio.to_thread(
            build_comic_pdf,
            job_id,
            panels_dir,
            output_dir,
            len(panels),
            data.panels_per_page,
        )

        tracker.enter(
            "completed",
            status=JobStatus.COMPLETED,
            result=ComicJobResult(
                summary=summary,
                panels=list(panels),
                preview_url=preview_url(job_id),
                download_url=download_url(job_id),
            ),
        )

        if self.settings.cleanup_delay_seconds is not None:
            schedule_cleanup(
                job_id,
                self.settings.cleanup_delay_seconds,
                pdf_path=pdf_path,
                comic_dir=comic_dir,
                upload_file_path=data.file_path,
            )


def pdf_path_for(job_id: str, settings: Optional[PipelineSettings] = None) -> Path:
    """Where the finished PDF for ``job_id`` is written."""
    settings = settings or PipelineSettings()
    return Path(settings.output_dir) / f"{job_id}-comic.pdf"


def panel_image_path_for(job_id: str, index: int, settings: Optional[PipelineSettings] = None) -> Path:
    """Where the finished image for panel ``index`` is written."""
    settings = settings or PipelineSettings()
    return Path(settings.work_root) / job_id / "panels" / f"{panel_basename(index)}.png"


def create_comic_pipeline(store: JobStore, settings: Optional[PipelineSettings] = None) -> ComicPipeline:
    """
    Build a pipeline wired to the configured model clients.

    Raises:
        ValueError: If the chat or image API key is missing
    """
    # Import here to avoid loading model clients at module import
    from ...config import HttpByteFetcher, get_chat_client, get_image_client
    from .text_extraction import PdfTextExtractor

    chat_client, chat_model = get_chat_client()
    return ComicPipeline(
        store=store,
        analyzer=StoryAnalyzer(chat_client, chat_model),
        script_generator=ScriptGenerator(chat_client, chat_model),
        illustrator=PanelIllustrator(get_image_client(), HttpByteFetcher()),
        text_extractor=PdfTextExtractor(),
        settings=settings,
    )
