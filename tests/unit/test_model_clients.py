"""Unit tests for the HTTP and chat model clients."""

from unittest.mock import patch

import httpx
import pytest

from comicbook.config.image import HttpByteFetcher, ReplicateImageClient
from comicbook.config.llm import DSPyChatClient
from comicbook.core.errors import ImageFetchError, ImageOutputError
from comicbook.core.modules.panel_illustrator import normalize_image_output
from tests.unit.fakes import make_png

IMAGE_URL = "https://replicate.delivery/panel.png"
POLL_URL = "https://api.replicate.com/v1/predictions/abc123"


def replicate_transport(responses, requests):
    """Transport answering the create call and each poll from ``responses`` in order."""
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=queue.pop(0))

    return httpx.MockTransport(handler)


class TestReplicateImageClient:
    @pytest.mark.asyncio
    async def test_finished_prediction_returned_without_polling(self):
        requests = []
        client = ReplicateImageClient(
            "r8_test",
            transport=replicate_transport([{"status": "succeeded", "output": [IMAGE_URL]}], requests),
        )

        prediction = await client.generate("black-forest-labs/flux-schnell", {"prompt": "harbor"})

        assert normalize_image_output(prediction) == IMAGE_URL
        (create,) = requests
        assert create.method == "POST"
        assert create.url.path == "/v1/models/black-forest-labs/flux-schnell/predictions"
        assert create.headers["Authorization"] == "Bearer r8_test"
        assert create.headers["Prefer"] == "wait"

    @pytest.mark.asyncio
    async def test_running_prediction_is_polled_until_done(self):
        requests = []
        running = {"id": "abc123", "status": "processing", "output": None, "urls": {"get": POLL_URL}}
        client = ReplicateImageClient(
            "r8_test",
            poll_interval=0,
            transport=replicate_transport(
                [
                    {**running, "status": "starting"},
                    running,
                    {"id": "abc123", "status": "succeeded", "output": [IMAGE_URL]},
                ],
                requests,
            ),
        )

        prediction = await client.generate("test/model", {"prompt": "harbor"})

        assert normalize_image_output(prediction) == IMAGE_URL
        assert [r.method for r in requests] == ["POST", "GET", "GET"]
        assert all(str(r.url) == POLL_URL for r in requests[1:])
        assert requests[-1].headers["Authorization"] == "Bearer r8_test"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["failed", "canceled"])
    async def test_unsuccessful_prediction_raises(self, status):
        client = ReplicateImageClient(
            "r8_test",
            transport=replicate_transport([{"status": status, "error": "NSFW content detected"}], []),
        )

        with pytest.raises(ImageOutputError, match=f"{status}: NSFW content detected"):
            await client.generate("test/model", {"prompt": "harbor"})

    @pytest.mark.asyncio
    async def test_running_prediction_without_status_url(self):
        client = ReplicateImageClient(
            "r8_test",
            transport=replicate_transport([{"status": "processing", "output": None}], []),
        )

        with pytest.raises(ImageOutputError, match="no status URL"):
            await client.generate("test/model", {"prompt": "harbor"})

    @pytest.mark.asyncio
    async def test_gives_up_polling_after_timeout(self):
        requests = []
        client = ReplicateImageClient(
            "r8_test",
            timeout=0,
            poll_interval=0,
            transport=replicate_transport(
                [{"status": "processing", "output": None, "urls": {"get": POLL_URL}}],
                requests,
            ),
        )

        with pytest.raises(ImageOutputError, match="still processing"):
            await client.generate("test/model", {"prompt": "harbor"})

        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_http_error_on_create(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(422, json={"detail": "bad input"}))
        client = ReplicateImageClient("r8_test", transport=transport)

        with pytest.raises(httpx.HTTPStatusError):
            await client.generate("test/model", {"prompt": "harbor"})


class TestHttpByteFetcher:
    @pytest.mark.asyncio
    async def test_returns_body(self):
        png = make_png(16, 9)
        fetcher = HttpByteFetcher(transport=httpx.MockTransport(lambda request: httpx.Response(200, content=png)))

        assert await fetcher.fetch(IMAGE_URL) == png

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [404, 500, 503])
    async def test_non_2xx_raises_with_status(self, status_code):
        fetcher = HttpByteFetcher(transport=httpx.MockTransport(lambda request: httpx.Response(status_code)))

        with pytest.raises(ImageFetchError) as exc_info:
            await fetcher.fetch(IMAGE_URL)

        assert exc_info.value.status_code == status_code
        assert exc_info.value.url == IMAGE_URL
        assert str(exc_info.value) == f"Failed to fetch image: {status_code}"


class TestDSPyChatClient:
    MESSAGES = [{"role": "user", "content": "Summarize"}]

    @pytest.mark.asyncio
    async def test_lm_built_without_inner_retries_or_cache(self):
        with patch("comicbook.config.llm.dspy.LM") as lm_class:
            lm_class.return_value.return_value = ["A summary."]

            await DSPyChatClient(api_key="k", timeout=30).complete(
                model="openai/gpt-4o",
                messages=self.MESSAGES,
                temperature=0.3,
                max_tokens=500,
            )

        lm_class.assert_called_once()
        assert lm_class.call_args.args == ("openai/gpt-4o",)
        kwargs = lm_class.call_args.kwargs
        assert kwargs["num_retries"] == 0
        assert kwargs["cache"] is False
        assert kwargs["timeout"] == 30
        assert (kwargs["temperature"], kwargs["max_tokens"], kwargs["api_key"]) == (0.3, 500, "k")
        lm_class.return_value.assert_called_once_with(messages=self.MESSAGES)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "outputs, expected",
        [
            (["plain text"], "plain text"),
            ([{"text": "from dict"}], "from dict"),
            ([{"reasoning_content": "no text key"}], None),
            ([], None),
            (None, None),
        ],
    )
    async def test_output_shapes(self, outputs, expected):
        with patch("comicbook.config.llm.dspy.LM") as lm_class:
            lm_class.return_value.return_value = outputs

            content = await DSPyChatClient(api_key="k").complete(
                model="openai/gpt-4o",
                messages=self.MESSAGES,
                temperature=0.3,
                max_tokens=500,
            )

        assert content == expected
