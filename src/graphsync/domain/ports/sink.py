"""Port for writing reconciled deltas to the downstream graph store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graphsync.domain.model import Operation, Record


@runtime_checkable
class GraphSink(Protocol):
    """Downstream store accepting upserts and tombstones per operation."""

    def write(
        self,
        operation: Operation,
        to_create: Sequence[Record],
        to_delete: Sequence[Record],
    ) -> None:
        """Apply the delta durably or raise; returning means the write is confirmed."""
        ...

    def close(self) -> None: ...


__all__ = ["GraphSink"]
