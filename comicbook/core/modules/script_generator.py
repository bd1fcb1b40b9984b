"""
Module for turning a story into a panel-by-panel comic script.

The model must answer with strict JSON:

    {"scenes": [{"title": "...", "visual": "...", "dialogue_telugu": "..."}]}

The response is parsed without repair. Scenes missing a string ``visual``
or ``dialogue_telugu`` are dropped, and the remainder must number exactly
``panel_count``.
"""

import json
import logging
import re
from typing import Any, Optional

from ...config.comic import SCRIPT_RETRY
from ..errors import EmptyCompletionError, SceneCountError, ScriptParseError
from ..interfaces import ChatClient
from ..retry import RetryPolicy, with_retry
from ..types import Scene, VisualStyle

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write clear, cinematic comic scripts with safe mature tone and concise Telugu dialogue."
)

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```$")


def build_script_prompt(story_text: str, summary: str, panel_count: int) -> str:
    """Build the user prompt for script generation."""
    return f"""Create a comic script from this story.

Constraints:
- Create exactly {panel_count} scenes/panels.
- Each panel must have:
  1) title (optional)
  2) visual: a vivid visual description for an illustrator (English)
  3) dialogue_telugu: short Telugu dialogue for a speech bubble (max ~20 words), mature but non-explicit.
- Output MUST be valid JSON with this exact shape:
  {{"scenes":[{{"title":"...","visual":"...","dialogue_telugu":"..."}}]}}
- No markdown, no code fences.
- Ensure there is NO explicit sexual content.

Story summary:
{summary}

Full story (for nuance):
{story_text}"""


def parse_json_from_model(text: str) -> Optional[Any]:
    """
    Parse a JSON object out of a model response.

    Strips code fences, then parses the span from the first ``{`` to the
    last ``}``. Returns None if there is no such span or it is not valid JSON.
    """
    cleaned = _LEADING_FENCE.sub("", text.strip())
    cleaned = _TRAILING_FENCE.sub("", cleaned).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None

    try:
        return json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError:
        return None


def extract_scenes(parsed: Any, panel_count: int) -> list[Scene]:
    """
    Validate parsed JSON into exactly ``panel_count`` scenes.

    Raises:
        ScriptParseError: If there is no ``scenes`` list
        SceneCountError: If the usable scene count differs from panel_count
    """
    if not isinstance(parsed, dict) or not isinstance(parsed.get("scenes"), list):
        raise ScriptParseError("Failed to parse JSON from model response for script generation")

    scenes = []
    for raw in parsed["scenes"]:
        if not isinstance(raw, dict):
            continue
        visual = raw.get("visual")
        dialogue = raw.get("dialogue_telugu")
        if not isinstance(visual, str) or not isinstance(dialogue, str):
            continue

        title = raw.get("title")
        scenes.append(
            Scene(
                title=title.strip() if isinstance(title, str) else None,
                visual=visual.strip(),
                dialogue_telugu=dialogue.strip(),
            )
        )
        if len(scenes) == panel_count:
            break

    if len(scenes) != panel_count:
        raise SceneCountError(returned=len(scenes), requested=panel_count)

    return scenes


class ScriptGenerator:
    """Generate a fixed-length comic script with Telugu dialogue."""

    temperature = 0.6
    max_tokens = 1400

    def __init__(self, client: ChatClient, model: str, policy: RetryPolicy = SCRIPT_RETRY):
        self.client = client
        self.model = model
        self.policy = policy

    async def generate(
        self,
        story_text: str,
        summary: str,
        visual_style: VisualStyle,
        panel_count: int,
    ) -> list[Scene]:
        """
        Generate the script.

        Args:
            story_text: Cleaned story text
            summary: Summary from StoryAnalyzer
            visual_style: Style of the comic (carried for logging; the
                style is applied at image-prompt time)
            panel_count: Exact number of scenes required

        Returns:
            Ordered list of exactly ``panel_count`` scenes
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_script_prompt(story_text, summary, panel_count)},
        ]

        content = await with_retry(
            lambda: self.client.complete(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            ),
            self.policy,
        )

        content = (content or "").strip()
        if not content:
            raise EmptyCompletionError("Model returned empty content for script generation")

        scenes = extract_scenes(parse_json_from_model(content), panel_count)
        logger.info(f"Script generated: {len(scenes)} scenes, style={VisualStyle(visual_style).value}")
        return scenes
