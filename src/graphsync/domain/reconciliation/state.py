"""Partitioned store of committed reconciliation state."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from graphsync.domain.model import PartitionKey
    from graphsync.domain.ports.state import PartitionStatePersistence

    from .fingerprint import Fingerprint

type PartitionState = dict[str, Fingerprint]

log = getLogger(__name__)


@dataclass(slots=True)
class PartitionStateStore:
    """In-memory mapping of partition key to ``external_id -> fingerprint``.

    The store owns no locking; callers run at most one reconcile/commit cycle per
    partition at a time. With a ``persistence`` backend, partitions are loaded on first
    access and every ``apply`` is written through before the in-memory view changes.
    """

    persistence: PartitionStatePersistence | None = None
    _partitions: dict[PartitionKey, PartitionState] = field(
        default_factory=dict, init=False, repr=False
    )

    def partition(self, key: PartitionKey) -> PartitionState:
        """Return the live state of ``key``, creating it on first access."""

        state = self._partitions.get(key)
        if state is None:
            state = {}
            if self.persistence is not None:
                state.update(self.persistence.load(key))
                log.debug("Loaded %d committed entries for %s", len(state), key)
            self._partitions[key] = state
        return state

    def snapshot(self, key: PartitionKey) -> PartitionState:
        """Return an independent copy of the committed state of ``key``."""

        return dict(self.partition(key))

    def apply(
        self,
        key: PartitionKey,
        upserts: Mapping[str, Fingerprint],
        deletions: Iterable[str],
    ) -> None:
        """Upsert and remove entries of ``key``; the only mutating entry point."""

        removed = tuple(deletions)
        state = self.partition(key)
        if self.persistence is not None:
            self.persistence.save(key, upserts=upserts, deletions=removed)
        state.update(upserts)
        for external_id in removed:
            state.pop(external_id, None)

    def close(self) -> None:
        if self.persistence is not None:
            self.persistence.close()

    def keys(self) -> Iterator[PartitionKey]:
        return iter(tuple(self._partitions))

    def __contains__(self, key: object) -> bool:
        return key in self._partitions

    def __len__(self) -> int:
        return len(self._partitions)
