"""Ports for fetching raw payloads from external sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from graphsync.domain.model import IntegrationItem


@runtime_checkable
class TokenProvider(Protocol):
    """Callable port returning a bearer token for upstream APIs."""

    def __call__(self) -> str: ...


@runtime_checkable
class SnapshotFetcher(Protocol):
    """Callable port retrieving the raw payload described by an integration."""

    def __call__(self, item: IntegrationItem) -> dict[str, object]: ...


__all__ = ["SnapshotFetcher", "TokenProvider"]
