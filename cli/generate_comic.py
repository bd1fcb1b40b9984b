#!/usr/bin/env python3
"""
CLI for generating a comic book PDF from a story.

Usage:
    python cli/generate_comic.py story.txt
    python cli/generate_comic.py story.pdf --panels 8 --per-page 4
    python cli/generate_comic.py story.txt --style noir --output-dir comics/
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from comicbook.api.logging import configure_logging
from comicbook.api.services.comic_generation import (
    PipelineSettings,
    create_comic_pipeline,
    pdf_path_for,
)
from comicbook.api.services.job_store import InMemoryJobStore
from comicbook.config import COMIC_CONSTANTS
from comicbook.core.types import ComicJobData, InputType, JobKind, JobStatus, VisualStyle


def build_job_data(story_path: Path, panels: int, per_page: int, style: str) -> ComicJobData:
    """Job input for a local .txt or .pdf story file."""
    if story_path.suffix.lower() == ".pdf":
        return ComicJobData(
            input_type=InputType.PDF,
            file_path=str(story_path),
            original_filename=story_path.name,
            mime_type="application/pdf",
            file_size=story_path.stat().st_size,
            panel_count=panels,
            panels_per_page=per_page,
            visual_style=VisualStyle(style),
        )

    return ComicJobData(
        input_type=InputType.TEXT,
        story_text=story_path.read_text(encoding="utf-8"),
        original_filename=story_path.name,
        panel_count=panels,
        panels_per_page=per_page,
        visual_style=VisualStyle(style),
    )


def print_progress(stage: str, completed: int, total: int) -> None:
    print(f"  panel {completed}/{total} done")


def main():
    parser = argparse.ArgumentParser(
        description="Generate a comic book PDF from a story",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python cli/generate_comic.py story.txt
    python cli/generate_comic.py story.pdf --panels 8 --per-page 4
    python cli/generate_comic.py story.txt --style watercolor
        """,
    )

    parser.add_argument(
        "story",
        type=Path,
        help="Path to the story (.txt or .pdf)",
    )

    parser.add_argument(
        "--panels",
        type=int,
        choices=range(COMIC_CONSTANTS["min_panel_count"], COMIC_CONSTANTS["max_panel_count"] + 1),
        default=COMIC_CONSTANTS["default_panel_count"],
        help="Number of panels (default: 6)",
    )

    parser.add_argument(
        "--per-page",
        type=int,
        choices=COMIC_CONSTANTS["panels_per_page_options"],
        default=COMIC_CONSTANTS["default_panels_per_page"],
        help="Panels per PDF page (default: 4)",
    )

    parser.add_argument(
        "--style",
        type=str,
        choices=[style.value for style in VisualStyle],
        default=VisualStyle.MANGA.value,
        help="Visual style (default: manga)",
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=Path(__file__).parent.parent / "output",
        help="Directory for the PDF (default: output/)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print log output",
    )

    args = parser.parse_args()

    if not args.story.exists():
        print(f"Story file not found: {args.story}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        configure_logging(json_format=False)

    store = InMemoryJobStore()
    settings = PipelineSettings(output_dir=args.output_dir, cleanup_delay_seconds=None)
    try:
        pipeline = create_comic_pipeline(store, settings)
    except ValueError as e:
        print(f"Cannot start comic generation: {e}", file=sys.stderr)
        sys.exit(1)
    pipeline.on_progress = print_progress

    job = store.create_job(JobKind.COMIC, build_job_data(args.story, args.panels, args.per_page, args.style))
    print(f"Generating {args.panels}-panel {args.style} comic from {args.story}...")

    asyncio.run(pipeline.run(job.id))

    job = store.get_job(job.id)
    if job.status != JobStatus.COMPLETED:
        print(f"Comic generation failed: {job.result.error if job.result else 'unknown error'}", file=sys.stderr)
        sys.exit(1)

    print(f"Comic saved to: {pdf_path_for(job.id, settings)}")

    if args.verbose and job.result:
        print("\n--- Summary ---")
        print(job.result.summary)


if __name__ == "__main__":
    main()
