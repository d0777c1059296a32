"""Application services for synchronising integrations into the graph store."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from graphsync.domain.errors import ConvergenceError
from graphsync.domain.model import OperationCategory, partition_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from graphsync.domain.model import IntegrationItem, Operation, PartitionKey
    from graphsync.domain.ports import GraphSink, RecordTransformer, SnapshotFetcher
    from graphsync.domain.reconciliation import ReconciliationDelta, Reconciler

log = getLogger(__name__)


@dataclass(slots=True)
class OperationSyncResult:
    """Outcome of one operation within a sync run."""

    operation: str
    partition: PartitionKey | None
    created: int
    deleted: int
    written: bool


@dataclass(slots=True)
class SyncResult:
    """Outcome of synchronising one integration."""

    integration: str
    operations: list[OperationSyncResult] = field(default_factory=list[OperationSyncResult])

    @property
    def created(self) -> int:
        return sum(result.created for result in self.operations)

    @property
    def deleted(self) -> int:
        return sum(result.deleted for result in self.operations)


def sync_integration(
    item: IntegrationItem,
    *,
    fetcher: SnapshotFetcher,
    transformer: RecordTransformer,
    sink: GraphSink | None,
    reconciler: Reconciler,
    dry_run: bool = False,
    verify_convergence: bool = False,
) -> SyncResult:
    """Fetch, transform, reconcile, write and commit every operation of ``item``.

    Operations run sequentially, so each partition sees at most one cycle at a time.
    A failed write propagates and leaves the partition's committed state untouched,
    which makes re-running the whole sync safe.
    """

    if sink is None and not dry_run:
        raise ValueError("A graph sink is required unless running in dry-run mode")

    payload = fetcher(item)
    result = SyncResult(integration=item.display_name)

    for operation in item.operations:
        records = transformer(operation, payload)
        delta = reconciler.reconcile(item, operation, records)
        partition = (
            partition_key(item, operation)
            if operation.category is OperationCategory.MUTABLE_ENTITY
            else None
        )

        if not dry_run and sink is not None:
            _write_and_commit(item, operation, delta, sink=sink, reconciler=reconciler)
            if verify_convergence:
                _verify_converged(item, operation, records, reconciler=reconciler)

        result.operations.append(
            OperationSyncResult(
                operation=operation.name,
                partition=partition,
                created=len(delta.to_create),
                deleted=len(delta.to_delete),
                written=not dry_run,
            )
        )

    log.info(
        "Finished sync of %s: operations=%d, created=%d, deleted=%d, dry_run=%s",
        result.integration,
        len(result.operations),
        result.created,
        result.deleted,
        dry_run,
    )
    return result


def sync_integrations(
    items: Iterable[IntegrationItem],
    *,
    fetcher: SnapshotFetcher,
    transformer: RecordTransformer,
    sink: GraphSink | None,
    reconciler: Reconciler,
    dry_run: bool = False,
    verify_convergence: bool = False,
) -> list[SyncResult]:
    return [
        sync_integration(
            item,
            fetcher=fetcher,
            transformer=transformer,
            sink=sink,
            reconciler=reconciler,
            dry_run=dry_run,
            verify_convergence=verify_convergence,
        )
        for item in items
    ]


def _write_and_commit(
    item: IntegrationItem,
    operation: Operation,
    delta: ReconciliationDelta,
    *,
    sink: GraphSink,
    reconciler: Reconciler,
) -> None:
    try:
        sink.write(operation, delta.to_create, delta.to_delete)
    except Exception:
        log.error(
            "Write failed for operation %s of %s; committed state not advanced",
            operation.name,
            item.display_name,
        )
        raise
    reconciler.commit(item, operation, delta)


def _verify_converged(
    item: IntegrationItem,
    operation: Operation,
    records: Iterable[Mapping[str, object]],
    *,
    reconciler: Reconciler,
) -> None:
    if operation.category is not OperationCategory.MUTABLE_ENTITY:
        return
    again = reconciler.reconcile(item, operation, records)
    if not again.is_empty:
        raise ConvergenceError(
            f"Operation {operation.name} did not converge after commit: "
            f"create={len(again.to_create)}, delete={len(again.to_delete)}"
        )
