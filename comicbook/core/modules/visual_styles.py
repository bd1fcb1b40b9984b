"""
Visual style phrases for panel illustration.

Each style is a fixed lead-in for the image prompt. The mapping must cover
every ``VisualStyle`` member; there is no default style.
"""

from ..types import VisualStyle

STYLE_PROMPTS: dict[VisualStyle, str] = {
    VisualStyle.MANGA: (
        "Japanese manga style, dynamic composition, screentone shading, "
        "crisp ink lines, high contrast"
    ),
    VisualStyle.INDIAN_COMIC: (
        "Indian comic book art style, vibrant colors, bold outlines, "
        "expressive faces, dramatic lighting"
    ),
    VisualStyle.CINEMATIC: (
        "cinematic storyboard frame, realistic lighting, film still composition, "
        "high detail, dramatic mood"
    ),
    VisualStyle.WATERCOLOR: (
        "watercolor illustration, soft washes, painterly texture, "
        "gentle gradients, detailed characters"
    ),
    VisualStyle.NOIR: (
        "noir comic style, high contrast chiaroscuro, gritty atmosphere, "
        "moody shadows, rain and neon"
    ),
}

_missing = set(VisualStyle) - set(STYLE_PROMPTS)
if _missing:
    raise KeyError(f"No style prompt for: {sorted(s.value for s in _missing)}")


def get_style_prompt(style: VisualStyle) -> str:
    """Get the fixed prompt phrase for a style."""
    return STYLE_PROMPTS[VisualStyle(style)]
