"""Pydantic models for API requests."""

from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ...config import COMIC_CONSTANTS
from ...core.types import VisualStyle

ALLOWED_STYLES = [style.value for style in VisualStyle]


def _parse_int(value: object) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ComicOptions(BaseModel):
    """Generation options sent alongside the story in the upload form.

    Form fields arrive as strings; missing or unparseable numbers fall back
    to the defaults before the range checks run.
    """

    visual_style: VisualStyle = Field(
        default=VisualStyle.MANGA,
        description="Art style applied to every panel",
    )
    panel_count: int = Field(
        default=COMIC_CONSTANTS["default_panel_count"],
        description="Number of panels to draw",
    )
    panels_per_page: int = Field(
        default=COMIC_CONSTANTS["default_panels_per_page"],
        description="Panels laid out on each PDF page",
    )

    @field_validator("visual_style", mode="before")
    @classmethod
    def check_style(cls, value):
        if value is None:
            return VisualStyle.MANGA
        if value not in ALLOWED_STYLES:
            raise ValueError(f"Invalid visualStyle. Allowed: {', '.join(ALLOWED_STYLES)}")
        return value

    @field_validator("panel_count", mode="before")
    @classmethod
    def check_panel_count(cls, value):
        parsed = _parse_int(value)
        if parsed is None:
            parsed = COMIC_CONSTANTS["default_panel_count"]
        low, high = COMIC_CONSTANTS["min_panel_count"], COMIC_CONSTANTS["max_panel_count"]
        if not low <= parsed <= high:
            raise ValueError(f"panelCount must be between {low} and {high}.")
        return parsed

    @field_validator("panels_per_page", mode="before")
    @classmethod
    def check_panels_per_page(cls, value):
        parsed = _parse_int(value)
        if parsed is None:
            parsed = COMIC_CONSTANTS["default_panels_per_page"]
        options = COMIC_CONSTANTS["panels_per_page_options"]
        if parsed not in options:
            raise ValueError(f"panelsPerPage must be one of: {', '.join(str(n) for n in options)}.")
        return parsed


def first_error_message(error: ValidationError) -> str:
    """The message of the first failed check, without pydantic's prefix."""
    detail = error.errors()[0]
    ctx = detail.get("ctx") or {}
    return str(ctx.get("error", detail["msg"]))
