"""Pydantic models for API responses.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...core.types import ComicJobResult, Job, JobStatus, PanelResult


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateComicResponse(CamelModel):
    """Response after submitting a comic job."""

    job_id: str
    status: JobStatus
    progress: int = 0
    message: str = "Comic job created. Processing started."


class PanelResponse(CamelModel):
    """One drawn panel of the comic."""

    index: int
    scene_title: Optional[str] = None
    scene_description: str
    dialogue_telugu: str
    image_prompt: str
    image_url: Optional[str] = None
    preview_url: Optional[str] = None

    @classmethod
    def from_panel(cls, panel: PanelResult) -> "PanelResponse":
        return cls(
            index=panel.index,
            scene_title=panel.scene_title,
            scene_description=panel.scene_description,
            dialogue_telugu=panel.dialogue_telugu,
            image_prompt=panel.image_prompt,
            image_url=panel.image_url,
            preview_url=panel.preview_url,
        )


class ComicResultResponse(CamelModel):
    """Result payload; grows as panels finish."""

    summary: Optional[str] = None
    panels: list[PanelResponse] = Field(default_factory=list)
    preview_url: Optional[str] = None
    download_url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: ComicJobResult) -> "ComicResultResponse":
        return cls(
            summary=result.summary,
            panels=[PanelResponse.from_panel(p) for p in result.panels],
            preview_url=result.preview_url,
            download_url=result.download_url,
            error=result.error,
        )


class ComicJobResponse(CamelModel):
    """Status of a comic job. Poll until status is completed or failed."""

    job_id: str
    status: JobStatus
    stage: Optional[str] = None
    progress: int = 0
    type: str
    created_at: datetime
    data: dict[str, Any] = Field(default_factory=dict)
    result: Optional[ComicResultResponse] = None

    @classmethod
    def from_job(cls, job: Job) -> "ComicJobResponse":
        return cls(
            job_id=job.id,
            status=job.status,
            stage=job.stage,
            progress=job.progress,
            type=job.kind.value,
            created_at=job.created_at,
            data=job.data.to_dict(),
            result=ComicResultResponse.from_result(job.result) if job.result else None,
        )
