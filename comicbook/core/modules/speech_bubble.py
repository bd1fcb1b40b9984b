"""
Speech-bubble compositing for comic panels.

The bubble is a white rounded rectangle with a small tail, anchored across
the bottom of the frame. Dialogue is wrapped by character count (not by
measured pixel width) into at most four lines, and the font size shrinks
as the line count grows so the block fits the bubble.

The overlay is described once as vector geometry (``BubbleLayout``). Pillow
rasterizes it onto a transparent layer that is alpha-composited over the
panel; the same geometry serializes to SVG markup for inspection.
"""

import functools
import logging
import math
import os
from dataclasses import dataclass, field
from io import BytesIO
from typing import Optional

from PIL import Image, ImageDraw, ImageFilter, ImageFont

logger = logging.getLogger(__name__)

MAX_CHARS_PER_LINE = 22
MAX_LINES = 4

MARGIN_RATIO = 0.04
HEIGHT_RATIO = 0.26
MIN_FONT_SIZE = 28
MAX_FONT_SIZE = 44
LINE_HEIGHT = 1.15
CORNER_RADIUS = 26
STROKE_WIDTH = 4

# Fonts with Telugu glyphs; COMIC_FONT_PATH overrides all of them
TELUGU_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/noto/NotoSansTelugu-Regular.ttf",
    "/usr/share/fonts/opentype/noto/NotoSansTelugu-Regular.ttf",
    "/usr/share/fonts/noto/NotoSansTelugu-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Telugu Sangam MN.ttc",
]

# Latin-only fonts used when no Telugu font is installed
FALLBACK_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
]


def wrap_dialogue(
    text: str,
    max_chars: int = MAX_CHARS_PER_LINE,
    max_lines: int = MAX_LINES,
) -> list[str]:
    """
    Greedily pack words into lines of at most ``max_chars`` characters.

    A word longer than ``max_chars`` gets a line of its own and is never
    split. Lines past ``max_lines`` are dropped.
    """
    words = text.split()
    if not words:
        return [""]

    lines = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)

    return lines[:max_lines]


def escape_markup(text: str) -> str:
    """Escape text for embedding in SVG/XML."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


@dataclass
class BubbleLayout:
    """Geometry of a speech bubble on an image, in pixels."""

    image_width: int
    image_height: int
    left: int
    top: int
    width: int
    height: int
    font_size: int
    lines: list[str] = field(default_factory=list)

    @classmethod
    def for_image(cls, image_width: int, image_height: int, lines: list[str]) -> "BubbleLayout":
        margin = math.floor(image_width * MARGIN_RATIO)
        width = image_width - margin * 2
        height = math.floor(image_height * HEIGHT_RATIO)
        font_size = max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, height // (len(lines) + 2)))

        return cls(
            image_width=image_width,
            image_height=image_height,
            left=margin,
            top=image_height - height - margin,
            width=width,
            height=height,
            font_size=font_size,
            lines=list(lines),
        )

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def line_height(self) -> float:
        return self.font_size * LINE_HEIGHT

    def line_centers(self) -> list[tuple[float, float]]:
        """Centre point of each text line; the block is centred in the bubble."""
        block_height = self.font_size + self.line_height * (len(self.lines) - 1)
        first_center = self.top + (self.height - block_height) / 2 + self.font_size / 2
        center_x = self.left + self.width / 2
        return [(center_x, first_center + i * self.line_height) for i in range(len(self.lines))]

    def tail_points(self, inset: float = 0) -> list[tuple[float, float]]:
        """Triangle rising from the bubble's top edge towards the speaker."""
        base_y = self.top + inset
        return [
            (self.left + self.width * 0.20 + inset, base_y),
            (self.left + self.width * 0.30 - inset, base_y),
            (self.left + self.width * 0.16, self.top - self.height * 0.22 + inset * 2),
        ]

    def to_svg(self) -> str:
        """Serialize the overlay as SVG markup over the full image."""
        tail = " ".join(f"{x:.1f},{y:.1f}" for x, y in self.tail_points())
        center_x = self.left + self.width / 2
        texts = "".join(
            f'<text x="{center_x:.1f}" y="{y:.1f}" font-size="{self.font_size}" '
            f'text-anchor="middle" dominant-baseline="central" '
            f'font-family="Noto Sans Telugu, sans-serif" fill="black">{escape_markup(line)}</text>'
            for line, (_, y) in zip(self.lines, self.line_centers())
        )
        return (
            f'<svg width="{self.image_width}" height="{self.image_height}" '
            f'xmlns="http://www.w3.org/2000/svg">'
            f'<defs><filter id="shadow" x="-20%" y="-20%" width="140%" height="140%">'
            f'<feDropShadow dx="0" dy="3" stdDeviation="4" flood-color="rgba(0,0,0,0.35)"/>'
            f"</filter></defs>"
            f'<polygon points="{tail}" fill="white" stroke="black" stroke-width="{STROKE_WIDTH}"/>'
            f'<rect x="{self.left}" y="{self.top}" rx="{CORNER_RADIUS}" ry="{CORNER_RADIUS}" '
            f'width="{self.width}" height="{self.height}" fill="white" stroke="black" '
            f'stroke-width="{STROKE_WIDTH}" filter="url(#shadow)"/>'
            f"{texts}</svg>"
        )


def load_font(size: int, font_path: Optional[str] = None) -> ImageFont.FreeTypeFont:
    """
    Load the dialogue font at ``size``.

    An explicit path (argument or COMIC_FONT_PATH) wins. Otherwise the
    first installed Telugu font is used; without one, dialogue falls back
    to a Latin font and Telugu text renders as empty boxes.
    """
    explicit = font_path or os.getenv("COMIC_FONT_PATH")
    if explicit:
        try:
            return ImageFont.truetype(explicit, size)
        except OSError:
            logger.warning(f"Cannot load font {explicit}, falling back to system fonts")

    for path in TELUGU_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue

    warn_missing_telugu_font()
    for path in FALLBACK_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue

    logger.warning("No TrueType font found, using Pillow's default font")
    return ImageFont.load_default(size=size)


@functools.lru_cache(maxsize=None)
def warn_missing_telugu_font() -> None:
    """Warn once per process that Telugu dialogue cannot be drawn."""
    logger.warning(
        "No Telugu font found; Telugu dialogue will render as empty boxes. "
        "Set COMIC_FONT_PATH to a Telugu TrueType font such as NotoSansTelugu-Regular.ttf"
    )


def render_bubble_layer(layout: BubbleLayout, font_path: Optional[str] = None) -> Image.Image:
    """Rasterize the bubble geometry onto a transparent RGBA layer."""
    size = (layout.image_width, layout.image_height)
    box = (layout.left, layout.top, layout.right, layout.bottom)

    shadow = Image.new("RGBA", size, (0, 0, 0, 0))
    ImageDraw.Draw(shadow).rounded_rectangle(
        (box[0], box[1] + 3, box[2], box[3] + 3),
        radius=CORNER_RADIUS,
        fill=(0, 0, 0, 90),
    )
    layer = shadow.filter(ImageFilter.GaussianBlur(4))

    draw = ImageDraw.Draw(layer)
    draw.polygon(layout.tail_points(), fill="white", outline="black", width=STROKE_WIDTH)
    draw.rounded_rectangle(box, radius=CORNER_RADIUS, fill="white", outline="black", width=STROKE_WIDTH)
    # Merge tail into bubble by painting over the rectangle edge at its base
    draw.polygon(layout.tail_points(inset=STROKE_WIDTH), fill="white")

    font = load_font(layout.font_size, font_path)
    for line, center in zip(layout.lines, layout.line_centers()):
        draw.text(center, line, font=font, fill="black", anchor="mm")

    return layer


def overlay_speech_bubble(
    image_bytes: bytes,
    dialogue: str,
    font_path: Optional[str] = None,
) -> bytes:
    """
    Composite a speech bubble with the wrapped dialogue onto an image.

    Args:
        image_bytes: Encoded source image
        dialogue: Dialogue text for the bubble
        font_path: Optional explicit TrueType font

    Returns:
        Encoded image in the same format as the input
    """
    with Image.open(BytesIO(image_bytes)) as source:
        image_format = source.format or "PNG"
        base = source.convert("RGBA")

    layout = BubbleLayout.for_image(base.width, base.height, wrap_dialogue(dialogue))
    composited = Image.alpha_composite(base, render_bubble_layer(layout, font_path))

    if image_format.upper() in ("JPEG", "JPG"):
        composited = composited.convert("RGB")

    buffer = BytesIO()
    composited.save(buffer, format=image_format)
    return buffer.getvalue()
