"""Neo4j graph sink executing Cypher for reconciled deltas."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING, Final, assert_never

from neo4j import GraphDatabase

from graphsync.domain.model import OperationCategory

if TYPE_CHECKING:
    from collections.abc import Sequence

    from neo4j import Driver, ManagedTransaction

    from graphsync.config.neo4j import Neo4jConfig
    from graphsync.domain.model import Operation, Record

log = getLogger(__name__)

_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

ENTITY_INDEX_QUERY: Final[str] = "CREATE INDEX IF NOT EXISTS FOR (n:`{label}`) ON (n.external_id)"
ENTITY_UPSERT_QUERY: Final[str] = (
    "UNWIND $list AS item MERGE (x:`{label}` {{external_id: item.external_id}}) SET x = item"
)
ENTITY_DELETE_QUERY: Final[str] = (
    "UNWIND $list AS item MATCH (x:`{label}` {{external_id: item.external_id}}) DETACH DELETE x"
)
RELATION_MERGE_QUERY: Final[str] = (
    "UNWIND $list AS item "
    "MATCH (a:`{source}` {{external_id: item.a_id}}) "
    "MATCH (b:`{target}` {{external_id: item.b_id}}) "
    "MERGE (a)-[:`{relation}`]->(b)"
)


def _identifier(value: str) -> str:
    if not _IDENTIFIER.match(value):
        raise ValueError(f"Invalid Cypher identifier: {value!r}")
    return value


def entity_label(operation: Operation) -> str:
    if len(operation.params) != 1:
        raise ValueError(f"Entity operation {operation.name} needs exactly one label param")
    return _identifier(operation.params[0])


def relation_parts(operation: Operation) -> tuple[str, str, str]:
    if len(operation.params) != 3:  # noqa: PLR2004
        raise ValueError(
            f"Relation operation {operation.name} needs (from_label, relation, to_label) params"
        )
    source, relation, target = (_identifier(param) for param in operation.params)
    return source, relation, target


def build_statements(
    operation: Operation,
    to_create: Sequence[Record],
    to_delete: Sequence[Record],
) -> list[tuple[str, list[dict[str, object]]]]:
    """Return ``(query, rows)`` pairs to run in one write transaction."""

    statements: list[tuple[str, list[dict[str, object]]]] = []
    category = operation.category
    if category is OperationCategory.MUTABLE_ENTITY:
        label = entity_label(operation)
        if to_create:
            statements.append(
                (
                    ENTITY_UPSERT_QUERY.format(label=label),
                    [record.to_dict() for record in to_create],
                )
            )
        if to_delete:
            statements.append(
                (
                    ENTITY_DELETE_QUERY.format(label=label),
                    [{"external_id": record.external_id} for record in to_delete],
                )
            )
    elif category is OperationCategory.APPEND_ONLY_RELATION:
        source, relation, target = relation_parts(operation)
        if to_create:
            statements.append(
                (
                    RELATION_MERGE_QUERY.format(source=source, relation=relation, target=target),
                    [record.to_dict() for record in to_create],
                )
            )
    else:
        assert_never(category)
    return statements


class Neo4jGraphSink:
    """Write deltas to Neo4j; a returned ``write`` means the transaction committed."""

    def __init__(
        self,
        config: Neo4jConfig | None = None,
        *,
        driver: Driver | None = None,
        database: str | None = None,
    ) -> None:
        if driver is None:
            if config is None:
                raise ValueError("Neo4jGraphSink needs a config or a driver")
            driver = GraphDatabase.driver(config.uri, auth=(config.username, config.password))
        self._driver = driver
        if database is None and config is not None:
            database = config.database
        self._database = database
        self._indexed_labels: set[str] = set()

    def __enter__(self) -> Neo4jGraphSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def write(
        self,
        operation: Operation,
        to_create: Sequence[Record],
        to_delete: Sequence[Record],
    ) -> None:
        statements = build_statements(operation, to_create, to_delete)
        if operation.category is OperationCategory.MUTABLE_ENTITY:
            self._ensure_index(entity_label(operation))
        if not statements:
            log.debug("Nothing to write for operation %s", operation.name)
            return

        with self._driver.session(database=self._database) as session:
            session.execute_write(_run_statements, statements)
        log.info(
            "Wrote operation %s: created=%d, deleted=%d",
            operation.name,
            len(to_create),
            len(to_delete),
        )

    def close(self) -> None:
        self._driver.close()

    def _ensure_index(self, label: str) -> None:
        if label in self._indexed_labels:
            return
        with self._driver.session(database=self._database) as session:
            session.run(ENTITY_INDEX_QUERY.format(label=label)).consume()
        self._indexed_labels.add(label)


def _run_statements(
    tx: ManagedTransaction,
    statements: list[tuple[str, list[dict[str, object]]]],
) -> None:
    for query, rows in statements:
        tx.run(query, list=rows).consume()
