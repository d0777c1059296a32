from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graphsync.adapters.neo4j import (
    ENTITY_DELETE_QUERY,
    ENTITY_INDEX_QUERY,
    ENTITY_UPSERT_QUERY,
    RELATION_MERGE_QUERY,
    Neo4jGraphSink,
    build_statements,
    entity_label,
)
from graphsync.config import Neo4jConfig
from graphsync.domain.model import Operation, OperationCategory, Record

if TYPE_CHECKING:
    from collections.abc import Callable


class _Summary:
    pass


class _Result:
    def consume(self) -> _Summary:
        return _Summary()


class _FakeTransaction:
    def __init__(self, log: list[tuple[str, dict[str, object]]]) -> None:
        self._log = log

    def run(self, query: str, **parameters: object) -> _Result:
        self._log.append((query, parameters))
        return _Result()


class _FakeSession:
    def __init__(self, driver: _FakeDriver) -> None:
        self._driver = driver

    def __enter__(self) -> _FakeSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def run(self, query: str, **parameters: object) -> _Result:
        self._driver.auto_commit.append((query, parameters))
        return _Result()

    def execute_write(self, work: Callable[..., None], *args: object) -> None:
        if self._driver.fail_writes:
            raise ConnectionError("cluster unavailable")
        staged: list[tuple[str, dict[str, object]]] = []
        work(_FakeTransaction(staged), *args)
        self._driver.transactions.append(staged)


class _FakeDriver:
    def __init__(self) -> None:
        self.auto_commit: list[tuple[str, dict[str, object]]] = []
        self.transactions: list[list[tuple[str, dict[str, object]]]] = []
        self.databases: list[str | None] = []
        self.fail_writes = False
        self.closed = False

    def session(self, database: str | None = None) -> _FakeSession:
        self.databases.append(database)
        return _FakeSession(self)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def driver() -> _FakeDriver:
    return _FakeDriver()


@pytest.fixture
def sink(driver: _FakeDriver) -> Neo4jGraphSink:
    return Neo4jGraphSink(driver=driver, database="graph")  # type: ignore[arg-type]


BUCKETS = Operation(
    name="buckets",
    category=OperationCategory.MUTABLE_ENTITY,
    params=("bucket",),
)
PROJECT_BUCKETS = Operation(
    name="(project)-[has]->(bucket)",
    category=OperationCategory.APPEND_ONLY_RELATION,
    params=("project", "has", "bucket"),
)


def test_entity_statements_merge_and_detach_delete() -> None:
    created = [Record(external_id="b1", name="alpha")]
    deleted = [Record.tombstone("b2")]

    statements = build_statements(BUCKETS, created, deleted)

    assert statements == [
        (ENTITY_UPSERT_QUERY.format(label="bucket"), [{"external_id": "b1", "name": "alpha"}]),
        (ENTITY_DELETE_QUERY.format(label="bucket"), [{"external_id": "b2"}]),
    ]
    assert "MERGE (x:`bucket`" in statements[0][0]
    assert "DETACH DELETE" in statements[1][0]


def test_relation_statements_merge_edges() -> None:
    rows = [Record(a_id="p1", b_id="b1")]

    statements = build_statements(PROJECT_BUCKETS, rows, [])

    query, params = statements[0]
    assert query == RELATION_MERGE_QUERY.format(source="project", relation="has", target="bucket")
    assert "MERGE (a)-[:`has`]->(b)" in query
    assert params == [{"a_id": "p1", "b_id": "b1"}]


def test_empty_delta_builds_no_statements() -> None:
    assert build_statements(BUCKETS, [], []) == []
    assert build_statements(PROJECT_BUCKETS, [], []) == []


@pytest.mark.parametrize(
    "params",
    [(), ("bucket", "extra"), ("bad label",), ("x`) DETACH DELETE (y",)],
)
def test_entity_label_is_validated(params: tuple[str, ...]) -> None:
    operation = Operation(
        name="broken",
        category=OperationCategory.MUTABLE_ENTITY,
        params=params,
    )

    with pytest.raises(ValueError, match="broken|identifier"):
        entity_label(operation)


def test_relation_needs_three_params() -> None:
    operation = Operation(
        name="edge",
        category=OperationCategory.APPEND_ONLY_RELATION,
        params=("project", "has"),
    )

    with pytest.raises(ValueError, match="edge"):
        build_statements(operation, [Record(a_id="p1", b_id="b1")], [])


def test_write_runs_one_transaction(sink: Neo4jGraphSink, driver: _FakeDriver) -> None:
    sink.write(BUCKETS, [Record(external_id="b1")], [Record.tombstone("b2")])

    assert len(driver.transactions) == 1
    queries = [query for query, _params in driver.transactions[0]]
    assert queries == [
        ENTITY_UPSERT_QUERY.format(label="bucket"),
        ENTITY_DELETE_QUERY.format(label="bucket"),
    ]
    assert driver.transactions[0][0][1] == {"list": [{"external_id": "b1"}]}
    assert set(driver.databases) == {"graph"}


def test_write_creates_index_once_per_label(sink: Neo4jGraphSink, driver: _FakeDriver) -> None:
    sink.write(BUCKETS, [Record(external_id="b1")], [])
    sink.write(BUCKETS, [Record(external_id="b2")], [])

    assert driver.auto_commit == [(ENTITY_INDEX_QUERY.format(label="bucket"), {})]


def test_relation_write_skips_index(sink: Neo4jGraphSink, driver: _FakeDriver) -> None:
    sink.write(PROJECT_BUCKETS, [Record(a_id="p1", b_id="b1")], [])

    assert driver.auto_commit == []
    assert len(driver.transactions) == 1


def test_empty_write_opens_no_transaction(sink: Neo4jGraphSink, driver: _FakeDriver) -> None:
    sink.write(PROJECT_BUCKETS, [], [])

    assert driver.transactions == []


def test_write_failure_propagates(sink: Neo4jGraphSink, driver: _FakeDriver) -> None:
    driver.fail_writes = True

    with pytest.raises(ConnectionError):
        sink.write(BUCKETS, [Record(external_id="b1")], [])


def test_context_manager_closes_driver(driver: _FakeDriver) -> None:
    with Neo4jGraphSink(driver=driver):  # type: ignore[arg-type]
        pass

    assert driver.closed


def test_config_builds_driver(monkeypatch: pytest.MonkeyPatch, driver: _FakeDriver) -> None:
    calls: list[tuple[str, tuple[str, str]]] = []

    def fake_driver(uri: str, *, auth: tuple[str, str]) -> _FakeDriver:
        calls.append((uri, auth))
        return driver

    monkeypatch.setattr("graphsync.adapters.neo4j.GraphDatabase.driver", fake_driver)
    config = Neo4jConfig(
        uri="neo4j://localhost:7687",
        username="neo4j",
        password="secret",  # noqa: S106
        database="graph",
    )

    sink = Neo4jGraphSink(config)
    sink.write(BUCKETS, [Record(external_id="b1")], [])
    sink.close()

    assert calls == [("neo4j://localhost:7687", ("neo4j", "secret"))]
    assert driver.databases == ["graph", "graph"]
    assert driver.closed


def test_sink_needs_config_or_driver() -> None:
    with pytest.raises(ValueError, match="config or a driver"):
        Neo4jGraphSink()
