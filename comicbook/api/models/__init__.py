"""Pydantic models for API requests and responses."""

from .requests import ALLOWED_STYLES, ComicOptions, first_error_message
from .responses import (
    ComicJobResponse,
    ComicResultResponse,
    CreateComicResponse,
    PanelResponse,
)

__all__ = [
    "ALLOWED_STYLES",
    "ComicOptions",
    "first_error_message",
    "ComicJobResponse",
    "ComicResultResponse",
    "CreateComicResponse",
    "PanelResponse",
]
