"""
Rate-limited HTTP client shared by the source adapters.

Each source owns one RateLimiter (its requests-per-second budget) and one
RateLimitedClient. Workers of the same source share both; nothing here is
process-wide.
"""
import asyncio
import logging
import time
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from lupa.config.settings import settings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class FetchError(Exception):
    """A GET could not produce a decoded response."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message} ({url})")


class RateLimiter:
    """
    Token bucket limiting how often requests are issued.

    acquire() only gates issuance: once a caller has its token it awaits the
    response without holding anything.
    """

    def __init__(self, rate: float, burst: int = 1):
        if rate <= 0:
            raise ValueError("rate must be positive")
        self.rate = rate
        self.burst = max(1, burst)
        self._tokens = float(self.burst)
        self._updated = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        self._tokens = min(self.burst, self._tokens + (now - self._updated) * self.rate)
        self._updated = now

    async def acquire(self) -> None:
        async with self._lock:
            self._refill()
            if self._tokens < 1:
                await asyncio.sleep((1 - self._tokens) / self.rate)
                self._refill()
            self._tokens -= 1


class RateLimitedClient:
    """
    JSON GET client for one source.

    Usage:
        async with RateLimitedClient(RateLimiter(5)) as client:
            page = await client.get_json(url, DeputyListResponse)
    """

    def __init__(
        self,
        limiter: RateLimiter,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.limiter = limiter
        self.http = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT,
            headers={
                "Accept": "application/json",
                "User-Agent": settings.USER_AGENT,
            },
            follow_redirects=True,
            transport=transport,
        )

    async def get_json(self, url: str, model: Type[M], params: Optional[dict] = None) -> M:
        """
        GET a URL and decode its JSON body into `model`.

        Raises:
            FetchError: transport failure, non-2xx status, or a body that
                does not fit the model
        """
        await self.limiter.acquire()

        try:
            response = await self.http.get(url, params=params)
        except httpx.HTTPError as e:
            raise FetchError(url, f"Request failed: {e}") from e

        if not response.is_success:
            raise FetchError(url, f"HTTP {response.status_code}", response.status_code)

        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise FetchError(url, f"Unexpected response body: {e.error_count()} errors") from e

    async def close(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "RateLimitedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
