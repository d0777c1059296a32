"""Retry, rate-limit and timeout settings for outbound HTTP calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

import httpx

from .env import float_env_var

if TYPE_CHECKING:
    from collections.abc import Mapping

RETRYABLE_METHODS: Final[frozenset[str]] = frozenset({"GET", "HEAD", "OPTIONS", "POST"})
TRANSIENT_STATUSES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})
DEFAULT_SNAPSHOT_TIMEOUT_SECONDS: Final[float] = 30.0
DEFAULT_SNAPSHOT_CALLS_PER_SECOND: Final[float] = 4.0


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    attempts: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    backoff_jitter: float = 1.0
    methods: frozenset[str] = RETRYABLE_METHODS
    statuses: frozenset[int] = TRANSIENT_STATUSES
    exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: float
    per_seconds: float = 1.0


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Settings for one named HTTP client; ``name`` only appears in logs."""

    name: str
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None


def get_snapshot_resilience_config() -> ResilienceConfig:
    """Build the snapshot client settings.

    ``GRAPHSYNC_HTTP_TIMEOUT`` overrides the timeout in seconds and
    ``GRAPHSYNC_HTTP_RATE_LIMIT`` the calls per second; a rate of 0 disables throttling.
    """

    timeout = float_env_var("GRAPHSYNC_HTTP_TIMEOUT", DEFAULT_SNAPSHOT_TIMEOUT_SECONDS)
    rate = float_env_var("GRAPHSYNC_HTTP_RATE_LIMIT", DEFAULT_SNAPSHOT_CALLS_PER_SECOND)
    return ResilienceConfig(
        name="snapshot",
        timeout_seconds=timeout,
        ratelimit=RateLimit(max_calls=rate) if rate > 0 else None,
    )
