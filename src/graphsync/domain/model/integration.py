"""Integration and operation descriptors plus partition identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import assert_never

from graphsync.domain.errors import IdentityError

from .enums import OperationCategory, SourceKind


@dataclass(frozen=True, slots=True)
class Operation:
    """One transform-and-write step applied to an integration's payload.

    ``params`` are interpreted by the graph sink: ``(label,)`` for entities and
    ``(from_label, relation_type, to_label)`` for relations.
    """

    name: str
    category: OperationCategory
    params: tuple[str, ...] = ()
    transform: str | None = None

    @property
    def key(self) -> str:
        return f"{self.category}:{self.name}"


@dataclass(frozen=True, slots=True)
class IntegrationItem:
    """Descriptor of an external data source and the operations fed from it."""

    kind: str
    url: str = ""
    operations: tuple[Operation, ...] = field(default_factory=tuple)
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.url or self.kind

    def source_key(self) -> str:
        try:
            kind = SourceKind(self.kind)
        except ValueError:
            raise IdentityError(f"Unrecognized integration kind: {self.kind!r}") from None
        if kind is SourceKind.HTTP:
            if not self.url:
                raise IdentityError("HTTP integration has no url")
            return f"{kind}:{self.url}"
        assert_never(kind)


@dataclass(frozen=True, slots=True, order=True)
class PartitionKey:
    """Identity of one independent unit of reconciliation state."""

    source: str
    operation: str

    def __str__(self) -> str:
        return f"{self.source}#{self.operation}"


def partition_key(item: IntegrationItem, operation: Operation) -> PartitionKey:
    """Derive the partition key for ``operation`` fed from ``item``."""

    return PartitionKey(source=item.source_key(), operation=operation.key)
