"""
Module for summarizing a story into comic beats.

The summary is free text; it is only fed forward into script generation
and shown to the user, never parsed.
"""

import logging

from ...config.comic import ANALYSIS_RETRY
from ..errors import EmptyCompletionError
from ..interfaces import ChatClient
from ..retry import RetryPolicy, with_retry

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional story editor who extracts clear beats for comic adaptation."
)


def build_analysis_prompt(story_text: str, panel_count: int) -> str:
    """Build the user prompt for story analysis."""
    return f"""Analyze the following story and extract the key story beats.

Requirements:
- Return a concise summary in English.
- Include: main characters, setting, central conflict, and a beat-by-beat outline suitable for a {panel_count}-panel comic.
- Keep it PG-16 / mature but non-explicit.

Story:
{story_text}

Return plain text summary (no markdown)."""


class StoryAnalyzer:
    """Summarize a story into characters, setting, conflict and panel beats."""

    temperature = 0.4
    max_tokens = 900

    def __init__(self, client: ChatClient, model: str, policy: RetryPolicy = ANALYSIS_RETRY):
        self.client = client
        self.model = model
        self.policy = policy

    async def analyze(self, story_text: str, panel_count: int) -> str:
        """
        Summarize the story.

        Args:
            story_text: Cleaned story text
            panel_count: Number of panels the beats should be sized for

        Returns:
            Non-empty summary text

        Raises:
            EmptyCompletionError: If the model returned no content
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_analysis_prompt(story_text, panel_count)},
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

        summary = (content or "").strip()
        if not summary:
            raise EmptyCompletionError("Model returned empty summary for story analysis")

        logger.info(f"Story summary: {len(summary)} chars")
        return summary
