"""HTTP retrieval of raw integration payloads."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from graphsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from graphsync.config.http_resilience import get_snapshot_resilience_config
from graphsync.domain.errors import IdentityError
from graphsync.domain.model import SourceKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from graphsync.domain.model import IntegrationItem
    from graphsync.domain.ports.fetching import SnapshotFetcher, TokenProvider

log = getLogger(__name__)


class SnapshotPayloadError(RuntimeError):
    """Raised when an upstream API returns something other than a JSON object."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpSnapshotFetcher:
    token_provider: TokenProvider | None = None
    resilience: ResilienceConfig = field(default_factory=get_snapshot_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, item: IntegrationItem) -> dict[str, object]:
        if item.kind != SourceKind.HTTP:
            raise IdentityError(f"HTTP fetcher cannot retrieve {item.kind!r} integrations")
        if not item.url:
            raise IdentityError("HTTP integration has no url")
        headers = {"Accept": "application/json"}
        if self.token_provider is not None:
            headers["Authorization"] = f"Bearer {self.token_provider()}"
        return asyncio.run(self._fetch(item.url, headers))

    async def _fetch(self, url: str, headers: dict[str, str]) -> dict[str, object]:
        async with self.client_factory(self.resilience) as client:
            response = await client.get(url, headers=headers)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise SnapshotPayloadError(f"Expected a JSON object from {url}")
        log.info("Fetched snapshot from %s (%d top-level keys)", url, len(payload))
        return payload


if TYPE_CHECKING:
    _fetcher_check: SnapshotFetcher = HttpSnapshotFetcher()
