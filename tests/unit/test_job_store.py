"""Unit tests for the in-memory job store."""

import pytest

from comicbook.api.services.job_store import InMemoryJobStore
from comicbook.core.types import ComicJobData, ComicJobResult, InputType, JobKind, JobStatus, VisualStyle


@pytest.fixture
def job_data():
    return ComicJobData(
        input_type=InputType.TEXT,
        story_text="A story",
        panel_count=4,
        panels_per_page=2,
        visual_style=VisualStyle.MANGA,
    )


def test_create_job_is_pending(job_data):
    store = InMemoryJobStore()

    job = store.create_job(JobKind.COMIC, job_data)

    assert job.status == JobStatus.PENDING
    assert job.progress == 0
    assert job.kind == JobKind.COMIC
    assert store.get_job(job.id) == job


def test_ids_are_unique(job_data):
    store = InMemoryJobStore()
    assert store.create_job(JobKind.COMIC, job_data).id != store.create_job(JobKind.COMIC, job_data).id


def test_update_only_overwrites_given_fields(job_data):
    store = InMemoryJobStore()
    job = store.create_job(JobKind.COMIC, job_data)
    store.update_job(job.id, stage="analyzing-story", progress=20)

    updated = store.update_job(job.id, result=ComicJobResult(summary="s"))

    assert updated.stage == "analyzing-story"
    assert updated.progress == 20
    assert updated.result.summary == "s"
    assert updated.data == job_data


def test_update_unknown_job_returns_none():
    assert InMemoryJobStore().update_job("missing", progress=5) is None


def test_update_rejects_unknown_fields(job_data):
    store = InMemoryJobStore()
    job = store.create_job(JobKind.COMIC, job_data)

    with pytest.raises(ValueError):
        store.update_job(job.id, colour="blue")

    with pytest.raises(ValueError):
        store.update_job(job.id, id="other")

