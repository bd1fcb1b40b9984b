"""
Retry helper for external model calls.

Every chat-completion and image-generation call goes through
``with_retry`` so transient failures are absorbed the same way everywhere:
exponential backoff of ``base_delay_ms * 2 ** attempt`` between attempts and
the last error re-raised unchanged once attempts run out.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many extra attempts to make and how long to wait before the first."""

    retries: int
    base_delay_ms: int

    def __post_init__(self):
        if self.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.retries}")
        if self.base_delay_ms <= 0:
            raise ValueError(f"base_delay_ms must be > 0, got {self.base_delay_ms}")

    @property
    def max_attempts(self) -> int:
        return self.retries + 1


async def with_retry(operation: Callable[[], Awaitable[T]], policy: RetryPolicy) -> T:
    """
    Run an async operation, retrying on any exception.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        policy: Retry count and base delay

    Returns:
        The result of the first successful attempt

    Raises:
        The exception from the final attempt, unchanged
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        # tenacity's first retry waits multiplier * 2**0
        wait=wait_exponential(multiplier=policy.base_delay_ms / 1000, exp_base=2, min=0),
        retry=retry_if_exception_type(Exception),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await operation()
