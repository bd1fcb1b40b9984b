"""Shared fixtures for comic pipeline unit tests."""

from typing import Optional

import pytest

from comicbook.api.services.comic_generation import ComicPipeline, PipelineSettings
from comicbook.api.services.job_store import InMemoryJobStore
from comicbook.core.modules.panel_illustrator import PanelIllustrator
from comicbook.core.modules.script_generator import ScriptGenerator
from comicbook.core.modules.story_analyzer import StoryAnalyzer
from comicbook.core.types import ComicJobData, InputType, JobKind, VisualStyle
from tests.unit.fakes import (
    FAST_RETRY,
    FIFTY_WORD_STORY,
    FakeFetcher,
    FakeImageClient,
    FakeTextExtractor,
    ScriptedChatClient,
)


@pytest.fixture
def settings(tmp_path):
    """Pipeline settings pointing at a temporary directory, no cleanup."""
    return PipelineSettings(
        work_root=tmp_path / "comic",
        output_dir=tmp_path / "outputs",
        upload_dir=tmp_path / "uploads",
        cleanup_delay_seconds=None,
    )


@pytest.fixture
def store():
    return InMemoryJobStore()


@pytest.fixture
def image_client():
    return FakeImageClient()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def make_pipeline(store, settings, image_client, fetcher):
    """Build a pipeline around a scripted chat client."""

    def _make(chat_responses: list, text_extractor=None, **overrides) -> ComicPipeline:
        chat = ScriptedChatClient(chat_responses)
        return ComicPipeline(
            store=store,
            analyzer=StoryAnalyzer(chat, "test-model", policy=FAST_RETRY),
            script_generator=ScriptGenerator(chat, "test-model", policy=FAST_RETRY),
            illustrator=PanelIllustrator(image_client, fetcher, policy=FAST_RETRY),
            text_extractor=text_extractor or FakeTextExtractor(),
            settings=overrides.pop("settings", settings),
            **overrides,
        )

    return _make


@pytest.fixture
def make_job(store):
    """Create a comic job from text."""

    def _make(
        story_text: Optional[str] = FIFTY_WORD_STORY,
        panel_count: int = 4,
        panels_per_page: int = 2,
        visual_style: VisualStyle = VisualStyle.MANGA,
        **data_fields,
    ):
        data = ComicJobData(
            input_type=data_fields.pop("input_type", InputType.TEXT),
            story_text=story_text,
            panel_count=panel_count,
            panels_per_page=panels_per_page,
            visual_style=visual_style,
            **data_fields,
        )
        return store.create_job(JobKind.COMIC, data)

    return _make
