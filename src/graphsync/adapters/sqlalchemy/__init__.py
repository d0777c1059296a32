"""SQLAlchemy-backed persistence of committed partition state."""

from __future__ import annotations

from .state import (
    DELETE_CHUNK_SIZE,
    SqlAlchemyPartitionStatePersistence,
    metadata,
    partition_state_table,
)

__all__ = [
    "DELETE_CHUNK_SIZE",
    "SqlAlchemyPartitionStatePersistence",
    "metadata",
    "partition_state_table",
]
