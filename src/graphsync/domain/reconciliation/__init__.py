"""Reconciliation core: fingerprints, committed partition state, delta computation."""

from __future__ import annotations

from .fingerprint import CRC32Q_POLYNOMIAL, Fingerprint, canonical_bytes, crc32, fingerprint
from .reconciler import ReconciliationDelta, Reconciler
from .state import PartitionState, PartitionStateStore

__all__ = [
    "CRC32Q_POLYNOMIAL",
    "Fingerprint",
    "PartitionState",
    "PartitionStateStore",
    "ReconciliationDelta",
    "Reconciler",
    "canonical_bytes",
    "crc32",
    "fingerprint",
]
