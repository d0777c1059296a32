"""Domain model for graph synchronisation."""

from __future__ import annotations

from .enums import OperationCategory, SourceKind
from .integration import IntegrationItem, Operation, PartitionKey, partition_key
from .records import CHANGE_MARKER_FIELDS, EXTERNAL_ID_FIELD, Record

__all__ = [
    "CHANGE_MARKER_FIELDS",
    "EXTERNAL_ID_FIELD",
    "IntegrationItem",
    "Operation",
    "OperationCategory",
    "PartitionKey",
    "Record",
    "SourceKind",
    "partition_key",
]
