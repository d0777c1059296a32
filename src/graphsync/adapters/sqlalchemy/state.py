"""Durable partition state stored in a relational table."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    BigInteger,
    Column,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    insert,
    select,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy.engine import Engine

    from graphsync.domain.model import PartitionKey
    from graphsync.domain.ports.state import PartitionStatePersistence

log = getLogger(__name__)

# Keeps each IN clause below SQLite's bound-parameter limit.
DELETE_CHUNK_SIZE: Final[int] = 500

metadata = MetaData()

partition_state_table = Table(
    "partition_state",
    metadata,
    Column("source", String, primary_key=True),
    Column("operation", String, primary_key=True),
    Column("external_id", String, primary_key=True),
    Column("fingerprint", BigInteger, nullable=False),
)


class SqlAlchemyPartitionStatePersistence:
    """Store ``external_id -> fingerprint`` rows per partition key."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        metadata.create_all(engine, checkfirst=True)

    @classmethod
    def from_uri(cls, database_uri: str) -> SqlAlchemyPartitionStatePersistence:
        return cls(create_engine(database_uri, future=True))

    def load(self, key: PartitionKey) -> dict[str, int]:
        table = partition_state_table
        stmt = select(table.c.external_id, table.c.fingerprint).where(
            table.c.source == key.source,
            table.c.operation == key.operation,
        )
        with self._engine.connect() as connection:
            rows = connection.execute(stmt).all()
        return {external_id: fingerprint for external_id, fingerprint in rows}

    def save(
        self,
        key: PartitionKey,
        *,
        upserts: Mapping[str, int],
        deletions: Iterable[str],
    ) -> None:
        table = partition_state_table
        removed = tuple(deletions)
        touched = sorted(set(upserts) | set(removed))
        if not touched:
            return
        with self._engine.begin() as connection:
            for start in range(0, len(touched), DELETE_CHUNK_SIZE):
                connection.execute(
                    delete(table).where(
                        table.c.source == key.source,
                        table.c.operation == key.operation,
                        table.c.external_id.in_(touched[start : start + DELETE_CHUNK_SIZE]),
                    )
                )
            if upserts:
                connection.execute(
                    insert(table),
                    [
                        {
                            "source": key.source,
                            "operation": key.operation,
                            "external_id": external_id,
                            "fingerprint": fingerprint,
                        }
                        for external_id, fingerprint in upserts.items()
                    ],
                )
        log.debug("Persisted %s: upserted=%d, deleted=%d", key, len(upserts), len(removed))

    def close(self) -> None:
        self._engine.dispose()


if TYPE_CHECKING:
    _persistence_check: PartitionStatePersistence = SqlAlchemyPartitionStatePersistence(
        create_engine("sqlite+pysqlite:///:memory:")
    )
