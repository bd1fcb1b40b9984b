"""Normalizing and bounding story text before it reaches the models."""

import re

from ..errors import StoryTooLongError

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def count_words(text: str) -> int:
    return len(text.split())


def enforce_word_limit(text: str, max_words: int) -> int:
    """
    Check the word count of ``text``.

    Returns:
        The word count

    Raises:
        StoryTooLongError: If the text has more than ``max_words`` words
    """
    word_count = count_words(text)
    if word_count > max_words:
        raise StoryTooLongError(max_words, word_count)
    return word_count
