from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graphsync.domain.model import IntegrationItem, Operation, OperationCategory, Record
from graphsync.domain.reconciliation import PartitionStateStore, Reconciler

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@pytest.fixture
def bucket_operation() -> Operation:
    return Operation(
        name="buckets",
        category=OperationCategory.MUTABLE_ENTITY,
        params=("bucket",),
        transform="transform_bucket.json.j2",
    )


@pytest.fixture
def project_bucket_operation() -> Operation:
    return Operation(
        name="(project)-[has]->(bucket)",
        category=OperationCategory.APPEND_ONLY_RELATION,
        params=("project", "has", "bucket"),
        transform="transform_project_bucket_R.json.j2",
    )


@pytest.fixture
def integration(
    bucket_operation: Operation,
    project_bucket_operation: Operation,
) -> IntegrationItem:
    return IntegrationItem(
        kind="http",
        url="https://api.example.test/buckets",
        operations=(bucket_operation, project_bucket_operation),
        name="packer",
    )


@pytest.fixture
def store() -> PartitionStateStore:
    return PartitionStateStore()


@pytest.fixture
def reconciler(store: PartitionStateStore) -> Reconciler:
    return Reconciler(store=store)


class RecordingSink:
    """Graph sink double that remembers writes and can be told to fail."""

    def __init__(self) -> None:
        self.writes: list[tuple[str, list[Record], list[Record]]] = []
        self.fail_on: set[str] = set()
        self.closed = False

    def write(
        self,
        operation: Operation,
        to_create: Sequence[Record],
        to_delete: Sequence[Record],
    ) -> None:
        if operation.name in self.fail_on:
            raise ConnectionError(f"write refused for {operation.name}")
        self.writes.append((operation.name, list(to_create), list(to_delete)))

    def close(self) -> None:
        self.closed = True


class StaticTransformer:
    """Transformer double returning records keyed by operation name from the payload."""

    def __call__(self, operation: Operation, payload: Mapping[str, object]) -> list[Record]:
        rows = payload.get(operation.name, [])
        assert isinstance(rows, list)
        return [Record(row) for row in rows]


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def static_transformer() -> StaticTransformer:
    return StaticTransformer()
