"""
Image generation configuration for the Comic Book Generator.

Panels are drawn by FLUX.1 [schnell] on Replicate. The prediction API is
called directly over HTTP and polled until the prediction finishes; its
``output`` holds the image URLs.
"""

import asyncio
import logging
import os
import time
from typing import Any, Optional

import httpx
from dotenv import load_dotenv

from ..core.errors import ImageFetchError, ImageOutputError
from ..core.interfaces import ImageOutput

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Image generation constants
IMAGE_CONSTANTS = {
    "model": "black-forest-labs/flux-schnell",
    "aspect_ratio": "16:9",
    "output_format": "png",
    "output_quality": 90,
    "num_outputs": 1,
    "canvas_width": 1280,
    "canvas_height": 720,
}

REPLICATE_API_URL = "https://api.replicate.com/v1"

# Seconds to wait on Replicate and on image downloads
IMAGE_TIMEOUT = 120

# Seconds between prediction status polls
POLL_INTERVAL = 1.0

# Prediction states that no longer change
TERMINAL_STATUSES = ("succeeded", "failed", "canceled")


class ReplicateImageClient:
    """
    Runs a model on Replicate and returns the finished prediction.

    ``Prefer: wait`` lets short predictions finish inside the create call;
    anything still running when that window closes is polled through its
    ``urls.get`` link until it reaches a terminal status.
    """

    def __init__(
        self,
        api_token: str,
        timeout: float = IMAGE_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_token = api_token
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=REPLICATE_API_URL,
            headers={"Authorization": f"Bearer {self.api_token}"},
            timeout=self.timeout,
            transport=self.transport,
        )

    async def generate(self, model_id: str, input: dict[str, Any]) -> ImageOutput:
        async with self._client() as client:
            response = await client.post(
                f"/models/{model_id}/predictions",
                headers={"Prefer": "wait"},
                json={"input": input},
            )
            response.raise_for_status()
            prediction = await self._wait_for_prediction(client, response.json())

        status = prediction.get("status")
        if status != "succeeded":
            raise ImageOutputError(f"Image prediction {status}: {prediction.get('error')}")
        return prediction

    async def _wait_for_prediction(self, client: httpx.AsyncClient, prediction: dict[str, Any]) -> dict[str, Any]:
        deadline = time.monotonic() + self.timeout
        while prediction.get("status") not in TERMINAL_STATUSES:
            poll_url = (prediction.get("urls") or {}).get("get")
            if not poll_url:
                raise ImageOutputError("Image prediction is still running and has no status URL")
            if time.monotonic() >= deadline:
                raise ImageOutputError(
                    f"Image prediction still {prediction.get('status')} after {self.timeout}s"
                )

            await asyncio.sleep(self.poll_interval)
            response = await client.get(poll_url)
            response.raise_for_status()
            prediction = response.json()
            logger.debug(f"Prediction {prediction.get('id')}: {prediction.get('status')}")

        return prediction


class HttpByteFetcher:
    """Downloads generated images."""

    def __init__(self, timeout: float = IMAGE_TIMEOUT, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            response = await client.get(url)

        if response.status_code < 200 or response.status_code >= 300:
            raise ImageFetchError(response.status_code, url)
        return response.content


def get_image_client() -> ReplicateImageClient:
    """
    Get the Replicate client for panel generation.

    Uses REPLICATE_API_TOKEN from environment.
    """
    api_token = os.getenv("REPLICATE_API_TOKEN")
    if not api_token:
        raise ValueError("REPLICATE_API_TOKEN not found in environment. Set it in .env file.")

    return ReplicateImageClient(api_token=api_token)


def get_image_model() -> str:
    """Get the image model ID."""
    return IMAGE_CONSTANTS["model"]


def get_image_input(prompt: str) -> dict[str, Any]:
    """Get the model input for one panel."""
    return {
        "prompt": prompt,
        "aspect_ratio": IMAGE_CONSTANTS["aspect_ratio"],
        "output_format": IMAGE_CONSTANTS["output_format"],
        "output_quality": IMAGE_CONSTANTS["output_quality"],
        "num_outputs": IMAGE_CONSTANTS["num_outputs"],
    }
