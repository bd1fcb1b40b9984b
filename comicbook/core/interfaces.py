"""Collaborator contracts the comic pipeline depends on."""

from typing import Any, Optional, Protocol, Union

from .types import ComicJobData, Job, JobKind

# Shapes an image model may answer with: a bare URL, a list of URLs,
# {"url": ...} or {"output": [...]}.
ImageOutput = Union[str, list, dict, None]


class JobStore(Protocol):
    """Create/get/update-by-id store for job records."""

    def create_job(self, kind: JobKind, data: ComicJobData) -> Job: ...

    def get_job(self, job_id: str) -> Optional[Job]: ...

    def update_job(self, job_id: str, **fields: Any) -> Optional[Job]:
        """Shallow-merge the given fields into the job. Returns None if absent."""
        ...


class TextExtractor(Protocol):
    def extract(self, data: bytes) -> str: ...


class ChatClient(Protocol):
    async def complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> Optional[str]: ...


class ImageClient(Protocol):
    async def generate(self, model_id: str, input: dict[str, Any]) -> ImageOutput: ...


class ByteFetcher(Protocol):
    async def fetch(self, url: str) -> bytes:
        """Download a URL. Raises ImageFetchError on a non-success status."""
        ...
