"""Async HTTP client with retries and client-side rate limiting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import Retry, RetryTransport

from graphsync.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import HeaderTypes, QueryParamTypes, RequestData, TimeoutTypes, URLTypes

__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_retry",
]

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.attempts,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        backoff_jitter=policy.backoff_jitter,
        respect_retry_after_header=True,
        allowed_methods=sorted(policy.methods),
        status_forcelist=sorted(policy.statuses),
        retry_on_exceptions=policy.exceptions,
    )


class RequestOptions(TypedDict, total=False):
    data: RequestData | None
    headers: HeaderTypes | None
    params: QueryParamTypes | None
    timeout: TimeoutTypes | UseClientDefault


class ResilientClient:
    """Wrap ``httpx.AsyncClient`` so every request is retried and throttled per config."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        limit = config.ratelimit
        self._limiter = AsyncLimiter(limit.max_calls, limit.per_seconds) if limit else None
        self._client = httpx.AsyncClient(
            timeout=config.timeout_seconds,
            headers=dict(config.default_headers or {}),
            transport=RetryTransport(retry=build_retry(config.retry)),
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        async with self._throttle():
            response = await self._client.request(method, url, **kwargs)
        log.debug("[%s] %s %s -> %d", self.config.name, method, url, response.status_code)
        return response

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    @asynccontextmanager
    async def _throttle(self) -> AsyncIterator[None]:
        if self._limiter is None:
            yield
            return
        async with self._limiter:
            yield
