"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import SnapshotFetcher, TokenProvider
from .sink import GraphSink
from .state import PartitionStatePersistence
from .transform import RecordTransformer

__all__ = [
    "GraphSink",
    "PartitionStatePersistence",
    "RecordTransformer",
    "SnapshotFetcher",
    "TokenProvider",
]
