"""
LLM configuration for the Comic Book Generator.

Story analysis and script generation both go through a single chat model,
selected by whichever API key is present. Calls are made through DSPy's
LM wrapper (LiteLLM underneath) with a 120s timeout per call. LiteLLM
retries and the DSPy response cache are switched off; retries are handled
by the caller through ``with_retry``.
"""

import asyncio
import os
from typing import Optional

import dspy
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Timeout for LLM calls (seconds)
LLM_TIMEOUT = 120


def get_chat_model() -> tuple[str, str]:
    """
    Get the chat model name and its API key.

    Priority order:
    1. GPT-4o (OPENAI_API_KEY)
    2. Claude Opus 4.5 (ANTHROPIC_API_KEY)
    3. Gemini 3 Pro (GOOGLE_API_KEY)
    """
    if os.getenv("OPENAI_API_KEY"):
        return "openai/gpt-4o", os.getenv("OPENAI_API_KEY")
    elif os.getenv("ANTHROPIC_API_KEY"):
        return "anthropic/claude-opus-4-5-20251101", os.getenv("ANTHROPIC_API_KEY")
    elif os.getenv("GOOGLE_API_KEY"):
        return "gemini/gemini-3-pro-preview", os.getenv("GOOGLE_API_KEY")
    else:
        raise ValueError(
            "No API key found. Set OPENAI_API_KEY, ANTHROPIC_API_KEY, or GOOGLE_API_KEY in .env"
        )


class DSPyChatClient:
    """Chat-completion client backed by ``dspy.LM``."""

    def __init__(self, api_key: str, timeout: int = LLM_TIMEOUT):
        self.api_key = api_key
        self.timeout = timeout

    async def complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Optional[str]:
        lm = dspy.LM(
            model,
            api_key=self.api_key,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=self.timeout,
            # Retries come from with_retry only; no response cache
            num_retries=0,
            cache=False,
        )
        # dspy.LM is synchronous; keep the event loop free while it runs
        outputs = await asyncio.to_thread(lm, messages=messages)
        if not outputs:
            return None

        first = outputs[0]
        if isinstance(first, dict):
            return first.get("text")
        return first


def get_chat_client() -> tuple[DSPyChatClient, str]:
    """Get a configured chat client and the model name to pass to it."""
    model, api_key = get_chat_model()
    return DSPyChatClient(api_key=api_key), model

