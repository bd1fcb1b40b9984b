"""
Module for drawing comic panels with FLUX on Replicate.

For each panel the illustrator requests one 16:9 image, downloads it,
cover-fits it to a fixed 1280x720 canvas, and composites the dialogue
bubble on top. Files are named by zero-padded panel index so a sorted
directory listing is in panel order:

    panel-000.raw.png     cover-fitted image, before the bubble
    panel-000.bubble.svg  bubble overlay markup
    panel-000.png         final panel
"""

import asyncio
import logging
from collections.abc import Mapping
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps

from ...config.comic import IMAGE_RETRY
from ...config.image import IMAGE_CONSTANTS, get_image_input
from ..errors import ImageOutputError
from ..interfaces import ByteFetcher, ImageClient, ImageOutput
from ..retry import RetryPolicy, with_retry
from ..types import PanelImage
from .speech_bubble import BubbleLayout, overlay_speech_bubble, wrap_dialogue

logger = logging.getLogger(__name__)


def panel_basename(index: int) -> str:
    """File stem for a panel, e.g. ``panel-007``."""
    return f"panel-{index:03d}"


def normalize_image_output(output: ImageOutput) -> str:
    """
    Reduce an image model response to a single image URL.

    Accepted shapes: a URL string, a list whose first item is a URL string,
    a mapping with a string ``url``, or a mapping with an ``output`` list
    whose first item is a URL string.

    Raises:
        ImageOutputError: If the shape is not recognized or holds no URL
    """
    if isinstance(output, str):
        url = output
    elif isinstance(output, list):
        url = output[0] if output and isinstance(output[0], str) else None
    elif isinstance(output, Mapping):
        nested = output.get("output")
        if isinstance(output.get("url"), str):
            url = output["url"]
        elif isinstance(nested, list) and nested and isinstance(nested[0], str):
            url = nested[0]
        else:
            url = None
    else:
        raise ImageOutputError(f"Unrecognized image output type: {type(output).__name__}")

    if not url:
        raise ImageOutputError("Image model returned no image URL")
    return url


def cover_fit(image_bytes: bytes, width: int, height: int) -> bytes:
    """Scale to cover ``width`` x ``height``, crop the overflow, encode as PNG."""
    with Image.open(BytesIO(image_bytes)) as image:
        fitted = ImageOps.fit(image.convert("RGB"), (width, height), method=Image.LANCZOS)

    buffer = BytesIO()
    fitted.save(buffer, format="PNG")
    return buffer.getvalue()


class PanelIllustrator:
    """
    Generate the finished image for one comic panel.

    Args:
        client: Image-generation client
        fetcher: Downloads the generated image
        model: Image model identifier
        policy: Retry policy for generate-and-download
        font_path: Optional TrueType font for the dialogue
    """

    def __init__(
        self,
        client: ImageClient,
        fetcher: ByteFetcher,
        model: str = IMAGE_CONSTANTS["model"],
        policy: RetryPolicy = IMAGE_RETRY,
        font_path: Optional[str] = None,
    ):
        self.client = client
        self.fetcher = fetcher
        self.model = model
        self.policy = policy
        self.font_path = font_path
        self.width = IMAGE_CONSTANTS["canvas_width"]
        self.height = IMAGE_CONSTANTS["canvas_height"]

    async def _generate_and_fetch(self, image_prompt: str) -> tuple[str, bytes]:
        output = await self.client.generate(self.model, get_image_input(image_prompt))
        url = normalize_image_output(output)
        return url, await self.fetcher.fetch(url)

    async def generate_panel(
        self,
        index: int,
        panels_dir: Path,
        image_prompt: str,
        dialogue: str,
    ) -> PanelImage:
        """
        Draw one panel and write its files into ``panels_dir``.

        Args:
            index: 0-based panel index
            panels_dir: Directory owned by this job
            image_prompt: Prompt from build_image_prompt
            dialogue: Telugu dialogue for the bubble

        Returns:
            PanelImage with the final image path and upstream image URL
        """
        panels_dir = Path(panels_dir)
        base_name = panel_basename(index)
        raw_path = panels_dir / f"{base_name}.raw.png"
        svg_path = panels_dir / f"{base_name}.bubble.svg"
        final_path = panels_dir / f"{base_name}.png"

        image_url, image_bytes = await with_retry(
            lambda: self._generate_and_fetch(image_prompt),
            self.policy,
        )

        resized = await asyncio.to_thread(cover_fit, image_bytes, self.width, self.height)
        await asyncio.to_thread(raw_path.write_bytes, resized)

        layout = BubbleLayout.for_image(self.width, self.height, wrap_dialogue(dialogue))
        await asyncio.to_thread(svg_path.write_text, layout.to_svg(), "utf-8")

        with_bubble = await asyncio.to_thread(overlay_speech_bubble, resized, dialogue, self.font_path)
        await asyncio.to_thread(final_path.write_bytes, with_bubble)

        logger.info(f"Panel {index} written to {final_path}")
        return PanelImage(final_image_path=str(final_path), image_url=image_url)
