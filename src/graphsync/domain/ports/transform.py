"""Port for turning raw payloads into normalized records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from graphsync.domain.model import Operation, Record


@runtime_checkable
class RecordTransformer(Protocol):
    def __call__(self, operation: Operation, payload: Mapping[str, object]) -> list[Record]: ...


__all__ = ["RecordTransformer"]
