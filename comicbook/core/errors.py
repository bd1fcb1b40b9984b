"""Error kinds raised by the comic pipeline.

Every failure the pipeline can report maps to one of these classes. The
message of the exception is what ends up in the job's ``result.error``.
"""

from typing import Optional


class ComicError(Exception):
    """Base class for all comic pipeline errors."""


# Input validation


class InputValidationError(ComicError):
    """The job input cannot be processed."""


class MissingInputError(InputValidationError):
    """Neither usable story text nor a source file was provided."""


class StoryTooLongError(InputValidationError):
    """The cleaned story exceeds the word limit."""

    def __init__(self, max_words: int, word_count: Optional[int] = None):
        self.max_words = max_words
        self.word_count = word_count
        super().__init__(f"Story too long. Max {max_words} words.")


class InvalidJobError(InputValidationError):
    """The job id is unknown or refers to a job of another kind."""


class TextExtractionError(ComicError):
    """Text could not be extracted from an uploaded document."""


# Upstream model failures


class UpstreamModelError(ComicError):
    """A model or image service returned something unusable."""


class EmptyCompletionError(UpstreamModelError):
    """The chat model returned no content."""


class ScriptParseError(UpstreamModelError):
    """The script response was not the expected JSON shape."""


class SceneCountError(UpstreamModelError):
    """The script did not contain exactly the requested number of scenes."""

    def __init__(self, returned: int, requested: int):
        self.returned = returned
        self.requested = requested
        super().__init__(
            f"Model returned {returned} scenes instead of requested {requested} scenes"
        )


class ImageOutputError(UpstreamModelError):
    """The image model response did not contain an image URL."""


class ImageFetchError(UpstreamModelError):
    """Downloading a generated image failed."""

    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Failed to fetch image: {status_code}")


# Timeout


class ComicTimeoutError(ComicError):
    """The whole job exceeded its wall-clock budget."""

    def __init__(self, message: str = "Comic job timeout"):
        super().__init__(message)
