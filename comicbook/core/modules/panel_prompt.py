"""Builds the image-model prompt for a single comic panel."""

from ..types import VisualStyle
from .visual_styles import get_style_prompt

PANEL_COMPOSITION = "Single comic panel. 16:9 wide shot."

# Dialogue is composited afterwards, never drawn by the model
NEGATIVE_SUFFIX = "No text, no captions, no watermarks."


def build_image_prompt(scene_visual: str, style: VisualStyle) -> str:
    """
    Compose the prompt for one panel.

    Args:
        scene_visual: English visual description from the script
        style: Visual style of the comic

    Returns:
        Prompt string. The same inputs always give the same prompt.
    """
    return f"{get_style_prompt(style)}. {PANEL_COMPOSITION} {scene_visual}. {NEGATIVE_SUFFIX}"
