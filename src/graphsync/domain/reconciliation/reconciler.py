"""Change detection between a committed partition and an incoming snapshot.

``reconcile`` is a pure read of committed state: it works on a copy of the partition so
that failing or repeating it has no visible effect. ``commit`` is the only step that
advances state, and callers invoke it only after the downstream write succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, assert_never

from graphsync.domain.errors import DuplicateRecordError
from graphsync.domain.model import OperationCategory, Record, partition_key

from .fingerprint import fingerprint
from .state import PartitionStateStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from graphsync.domain.model import IntegrationItem, Operation, PartitionKey

    from .fingerprint import Fingerprint

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconciliationDelta:
    """Records to upsert and tombstones to delete for one operation."""

    to_create: list[Record] = field(default_factory=list[Record])
    to_delete: list[Record] = field(default_factory=list[Record])

    @property
    def is_empty(self) -> bool:
        return not self.to_create and not self.to_delete


@dataclass(slots=True)
class Reconciler:
    """Compute deltas per partition and commit them once they are durable downstream."""

    store: PartitionStateStore = field(default_factory=PartitionStateStore)
    fingerprint: Callable[[Mapping[str, object]], Fingerprint] = fingerprint

    def reconcile(
        self,
        item: IntegrationItem,
        operation: Operation,
        records: Iterable[Mapping[str, object]],
    ) -> ReconciliationDelta:
        """Return the delta that brings ``operation``'s target in line with ``records``."""

        incoming = [Record.coerce(record) for record in records]
        if operation.category is OperationCategory.APPEND_ONLY_RELATION:
            return ReconciliationDelta(to_create=incoming)
        key = partition_key(item, operation)
        delta = self.reconcile_partition(key, operation.category, incoming)
        log.info(
            "Reconciled %s: incoming=%d, create=%d, delete=%d",
            key,
            len(incoming),
            len(delta.to_create),
            len(delta.to_delete),
        )
        return delta

    def reconcile_partition(
        self,
        key: PartitionKey,
        category: OperationCategory,
        records: Iterable[Mapping[str, object]],
    ) -> ReconciliationDelta:
        incoming = [Record.coerce(record) for record in records]
        if category is OperationCategory.APPEND_ONLY_RELATION:
            return ReconciliationDelta(to_create=incoming)
        if category is not OperationCategory.MUTABLE_ENTITY:
            assert_never(category)

        previous = self.store.snapshot(key)
        seen: set[str] = set()
        to_create: list[Record] = []
        for record in incoming:
            external_id = record.external_id
            if external_id in seen:
                raise DuplicateRecordError(external_id)
            seen.add(external_id)

            current = self.fingerprint(record)
            stored = previous.pop(external_id, None)
            if stored is None:
                to_create.append(record)
            elif stored != current:
                log.debug("Changed %s in %s: %s -> %s", external_id, key, stored, current)
                to_create.append(record)

        to_delete = [Record.tombstone(external_id) for external_id in sorted(previous)]
        return ReconciliationDelta(to_create=to_create, to_delete=to_delete)

    def commit(
        self,
        item: IntegrationItem,
        operation: Operation,
        delta: ReconciliationDelta,
    ) -> None:
        """Advance committed state after ``delta`` was written downstream."""

        if operation.category is OperationCategory.APPEND_ONLY_RELATION:
            return
        key = partition_key(item, operation)
        self.commit_partition(
            key,
            operation.category,
            created=delta.to_create,
            deleted=delta.to_delete,
        )

    def commit_partition(
        self,
        key: PartitionKey,
        category: OperationCategory,
        *,
        created: Iterable[Mapping[str, object]],
        deleted: Iterable[Mapping[str, object]],
    ) -> None:
        if category is OperationCategory.APPEND_ONLY_RELATION:
            return
        if category is not OperationCategory.MUTABLE_ENTITY:
            assert_never(category)

        upserts: dict[str, Fingerprint] = {}
        for record in created:
            typed = Record.coerce(record)
            upserts[typed.external_id] = self.fingerprint(typed)
        deletions = [Record.coerce(record).external_id for record in deleted]

        self.store.apply(key, upserts, deletions)
        log.debug("Committed %s: upserted=%d, deleted=%d", key, len(upserts), len(deletions))
