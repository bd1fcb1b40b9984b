"""
Centralized domain types for the Comic Book Generator.

All dataclasses that are used across multiple modules are defined here
to make data flow explicit and avoid circular imports.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Enums
# =============================================================================


class JobStatus(str, Enum):
    """Lifecycle status of a job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class JobKind(str, Enum):
    """Job discriminator. The pipeline only handles comics."""

    COMIC = "comic"


class InputType(str, Enum):
    """Where the story text comes from."""

    TEXT = "text"
    PDF = "pdf"


class VisualStyle(str, Enum):
    """Closed set of art styles a comic can be drawn in."""

    MANGA = "manga"
    INDIAN_COMIC = "indian-comic"
    CINEMATIC = "cinematic"
    WATERCOLOR = "watercolor"
    NOIR = "noir"


# =============================================================================
# Script Types
# =============================================================================


@dataclass
class Scene:
    """One scripted panel before it has an image."""

    visual: str  # English description for the illustrator
    dialogue_telugu: str  # Short line for the speech bubble
    title: Optional[str] = None


@dataclass
class PanelResult:
    """A finished panel, as reported in the job result and the sidecar file."""

    index: int
    scene_description: str
    dialogue_telugu: str
    image_prompt: str
    scene_title: Optional[str] = None
    image_url: Optional[str] = None
    preview_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "sceneTitle": self.scene_title,
            "sceneDescription": self.scene_description,
            "dialogueTelugu": self.dialogue_telugu,
            "imagePrompt": self.image_prompt,
            "imageUrl": self.image_url,
            "previewUrl": self.preview_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PanelResult":
        return cls(
            index=int(data["index"]),
            scene_title=data.get("sceneTitle"),
            scene_description=data["sceneDescription"],
            dialogue_telugu=data["dialogueTelugu"],
            image_prompt=data["imagePrompt"],
            image_url=data.get("imageUrl"),
            preview_url=data.get("previewUrl"),
        )


# =============================================================================
# Job Types
# =============================================================================


@dataclass
class ComicJobData:
    """Input payload of a comic job."""

    input_type: InputType
    panel_count: int
    panels_per_page: int
    visual_style: VisualStyle
    story_text: Optional[str] = None
    file_path: Optional[str] = None
    original_filename: Optional[str] = None
    mime_type: str = "text/plain"
    file_size: Optional[int] = None
    uploaded_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputType": self.input_type.value,
            "panelCount": self.panel_count,
            "panelsPerPage": self.panels_per_page,
            "visualStyle": self.visual_style.value,
            "storyText": self.story_text,
            "filePath": self.file_path,
            "originalFilename": self.original_filename,
            "mimeType": self.mime_type,
            "fileSize": self.file_size,
            "uploadedAt": self.uploaded_at,
        }


@dataclass
class ComicJobResult:
    """Externally visible result payload of a comic job."""

    summary: Optional[str] = None
    panels: list[PanelResult] = field(default_factory=list)
    preview_url: Optional[str] = None
    download_url: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "panels": [panel.to_dict() for panel in self.panels],
            "previewUrl": self.preview_url,
            "downloadUrl": self.download_url,
            "error": self.error,
        }


@dataclass
class Job:
    """A job record as held by the job store."""

    id: str
    kind: JobKind
    data: ComicJobData
    status: JobStatus = JobStatus.PENDING
    progress: int = 0
    stage: Optional[str] = None
    result: Optional[ComicJobResult] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# Illustration Types
# =============================================================================


@dataclass
class PanelImage:
    """Files produced for one panel by the illustrator."""

    final_image_path: str
    image_url: str
