"""Persistence port for committed partition state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from graphsync.domain.model import PartitionKey


@runtime_checkable
class PartitionStatePersistence(Protocol):
    """Durable backing for the partition state store."""

    def load(self, key: PartitionKey) -> Mapping[str, int]:
        """Return the committed ``external_id -> fingerprint`` mapping for ``key``."""
        ...

    def save(
        self,
        key: PartitionKey,
        *,
        upserts: Mapping[str, int],
        deletions: Iterable[str],
    ) -> None:
        """Atomically apply a committed change to the partition ``key``."""
        ...

    def close(self) -> None:
        """Release connections held by the backend."""
        ...


__all__ = ["PartitionStatePersistence"]
