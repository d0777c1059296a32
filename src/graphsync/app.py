"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from graphsync.adapters.http import ClientCredentialsTokenProvider, HttpSnapshotFetcher
from graphsync.adapters.neo4j import Neo4jGraphSink
from graphsync.adapters.sqlalchemy import SqlAlchemyPartitionStatePersistence
from graphsync.adapters.templates import JinjaRecordTransformer
from graphsync.config import get_neo4j_config, get_state_database_config, load_integrations
from graphsync.domain.data_integration import SyncResult, sync_integrations
from graphsync.domain.ports import GraphSink
from graphsync.domain.reconciliation import PartitionStateStore, Reconciler

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from graphsync.domain.model import IntegrationItem
    from graphsync.domain.ports import RecordTransformer, SnapshotFetcher

SinkFactory = Callable[[], GraphSink]


log = getLogger(__name__)


def build_reconciler(
    *,
    durable_state: bool = False,
    state_database_uri: str | None = None,
) -> Reconciler:
    """Create a reconciler with an in-memory store, optionally backed by a database."""

    if not durable_state and state_database_uri is None:
        return Reconciler(store=PartitionStateStore())
    uri = state_database_uri or get_state_database_config().uri
    log.info("Using durable partition state at %s", uri)
    persistence = SqlAlchemyPartitionStatePersistence.from_uri(uri)
    return Reconciler(store=PartitionStateStore(persistence=persistence))


def _default_sink_factory() -> GraphSink:
    return Neo4jGraphSink(get_neo4j_config())


def sync_graph(
    integrations_path: Path,
    *,
    template_dir: Path | None = None,
    dry_run: bool = False,
    verify_convergence: bool = False,
    durable_state: bool = False,
    state_database_uri: str | None = None,
    fetcher: SnapshotFetcher | None = None,
    transformer: RecordTransformer | None = None,
    sink_factory: SinkFactory | None = None,
    reconciler: Reconciler | None = None,
) -> list[SyncResult]:
    """Synchronise every integration in ``integrations_path`` into the graph store."""

    items = load_integrations(integrations_path)
    effective_fetcher = fetcher or HttpSnapshotFetcher(
        token_provider=ClientCredentialsTokenProvider()
    )
    effective_transformer = transformer or JinjaRecordTransformer(
        template_dir=template_dir or integrations_path.parent
    )
    log.info(
        "Starting graph sync: integrations=%d, dry_run=%s, verify=%s",
        len(items),
        dry_run,
        verify_convergence,
    )
    effective_reconciler = reconciler or build_reconciler(
        durable_state=durable_state,
        state_database_uri=state_database_uri,
    )
    try:
        return _run(
            items,
            fetcher=effective_fetcher,
            transformer=effective_transformer,
            reconciler=effective_reconciler,
            sink_factory=sink_factory,
            dry_run=dry_run,
            verify_convergence=verify_convergence,
        )
    finally:
        # Injected reconcilers stay open for the caller.
        if reconciler is None:
            effective_reconciler.store.close()


def _run(
    items: Sequence[IntegrationItem],
    *,
    fetcher: SnapshotFetcher,
    transformer: RecordTransformer,
    reconciler: Reconciler,
    sink_factory: SinkFactory | None,
    dry_run: bool,
    verify_convergence: bool,
) -> list[SyncResult]:
    if dry_run:
        return sync_integrations(
            items,
            fetcher=fetcher,
            transformer=transformer,
            sink=None,
            reconciler=reconciler,
            dry_run=True,
        )

    sink = (sink_factory or _default_sink_factory)()
    try:
        return sync_integrations(
            items,
            fetcher=fetcher,
            transformer=transformer,
            sink=sink,
            reconciler=reconciler,
            verify_convergence=verify_convergence,
        )
    finally:
        sink.close()
