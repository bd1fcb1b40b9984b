"""
Configuration module for the Comic Book Generator.

Re-exports all configuration for convenience.
"""

from .llm import LLM_TIMEOUT, DSPyChatClient, get_chat_client, get_chat_model
from .comic import COMIC_CONSTANTS, ANALYSIS_RETRY, SCRIPT_RETRY, IMAGE_RETRY
from .image import (
    IMAGE_CONSTANTS,
    HttpByteFetcher,
    ReplicateImageClient,
    get_image_client,
    get_image_model,
    get_image_input,
)

__all__ = [
    # LLM
    "LLM_TIMEOUT",
    "DSPyChatClient",
    "get_chat_client",
    "get_chat_model",
    # Comic
    "COMIC_CONSTANTS",
    "ANALYSIS_RETRY",
    "SCRIPT_RETRY",
    "IMAGE_RETRY",
    # Image
    "IMAGE_CONSTANTS",
    "HttpByteFetcher",
    "ReplicateImageClient",
    "get_image_client",
    "get_image_model",
    "get_image_input",
]
