"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class OperationCategory(StrEnum):
    """How an operation's records are tracked between synchronisation runs."""

    MUTABLE_ENTITY = "mutable_entity"
    APPEND_ONLY_RELATION = "append_only_relation"


class SourceKind(StrEnum):
    HTTP = "http"
