"""
Outbound HTTP with rate-limit aware retry.

Strava answers 429 when the 15-minute or daily quota is used up.
Instead of failing the whole call we back off exponentially:
1s, 2s, 4s, 8s, 16s with the default policy.

Usage:
    http = RetryingHttpClient(httpx.AsyncClient(timeout=10.0))
    response = await http.get(url, headers={"Authorization": "Bearer ..."})

    @with_retry(RetryPolicy(max_retries=3))
    async def post_message() -> httpx.Response:
        ...
"""

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import httpx

from .errors import RetriesExceeded, TransientNetworkError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def is_rate_limited(response: httpx.Response) -> bool:
    """Default retry predicate: HTTP 429 Too Many Requests."""
    return response.status_code == httpx.codes.TOO_MANY_REQUESTS


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff parameters for a retried call."""

    max_retries: int = 5
    initial_backoff: float = 1.0
    multiplier: float = 2.0
    retry_predicate: Callable[[httpx.Response], bool] = field(
        default=is_rate_limited
    )

    def backoff(self, attempt: int) -> float:
        """Delay before retrying after the given 0-based attempt."""
        return self.initial_backoff * self.multiplier ** attempt


def with_retry(policy: RetryPolicy, sleep: Sleep = asyncio.sleep):
    """
    Decorate an async callable returning an httpx.Response with backoff.

    Responses matching policy.retry_predicate are retried after sleeping;
    anything else, success or error, is returned to the caller as is.

    Raises:
        RetriesExceeded: If every attempt matched the retry predicate
        TransientNetworkError: On connection or timeout failures
    """
    def decorator(call: Callable[..., Awaitable[httpx.Response]]):
        @functools.wraps(call)
        async def wrapper(*args, **kwargs) -> httpx.Response:
            for attempt in range(policy.max_retries):
                try:
                    response = await call(*args, **kwargs)
                except httpx.TransportError as e:
                    raise TransientNetworkError(str(e) or type(e).__name__) from e

                if not policy.retry_predicate(response):
                    return response

                delay = policy.backoff(attempt)
                logger.warning(
                    f"Rate limited (attempt {attempt + 1}/{policy.max_retries}), "
                    f"retrying in {delay:g}s"
                )
                await sleep(delay)

            raise RetriesExceeded(policy.max_retries)

        return wrapper

    return decorator


class RetryingHttpClient:
    """
    Thin wrapper over httpx.AsyncClient applying a RetryPolicy to GETs.

    The underlying client is owned by the caller and shared, so connection
    pooling survives across calls.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        policy: Optional[RetryPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def send(
        self,
        request_factory: Callable[[], Awaitable[httpx.Response]]
    ) -> httpx.Response:
        """Run any request coroutine factory under the retry policy."""
        return await with_retry(self.policy, self._sleep)(request_factory)()

    async def get(
        self,
        url: str,
        headers: Optional[dict] = None,
        params: Optional[dict] = None
    ) -> httpx.Response:
        """GET with retry on rate limiting."""
        return await self.send(
            lambda: self.client.get(url, headers=headers, params=params)
        )
