"""Pytest configuration for tests that call real model APIs."""

import os

import pytest
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@pytest.fixture(scope="session")
def llm_api_available():
    """Check if any chat model API key is available."""
    return any([
        os.getenv("OPENAI_API_KEY"),
        os.getenv("ANTHROPIC_API_KEY"),
        os.getenv("GOOGLE_API_KEY"),
    ])


@pytest.fixture(scope="session")
def replicate_api_available():
    """Check if the Replicate token is available."""
    return bool(os.getenv("REPLICATE_API_TOKEN"))


@pytest.fixture(autouse=True)
def skip_if_no_llm_api(request, llm_api_available):
    """Skip tests marked with requires_llm_api if no key set."""
    if request.node.get_closest_marker("requires_llm_api"):
        if not llm_api_available:
            pytest.skip("No LLM API key set")


@pytest.fixture(autouse=True)
def skip_if_no_replicate_api(request, replicate_api_available):
    """Skip tests marked with requires_replicate_api if token not set."""
    if request.node.get_closest_marker("requires_replicate_api"):
        if not replicate_api_available:
            pytest.skip("REPLICATE_API_TOKEN not set")
