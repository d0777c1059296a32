"""Deterministic content fingerprints for snapshot records."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Final

from graphsync.domain.errors import SerializationError
from graphsync.domain.model.records import CHANGE_MARKER_FIELDS

if TYPE_CHECKING:
    from collections.abc import Mapping

type Fingerprint = int

# CRC-32Q, LSB-first (reversed) notation of
# x^32 + x^31 + x^24 + x^22 + x^16 + x^14 + x^8 + x^7 + x^5 + x^3 + x + 1
CRC32Q_POLYNOMIAL: Final[int] = 0xD5828281
IEEE_POLYNOMIAL: Final[int] = 0xEDB88320

_TABLES: dict[int, tuple[int, ...]] = {}


def _crc_table(polynomial: int) -> tuple[int, ...]:
    table = _TABLES.get(polynomial)
    if table is None:
        entries: list[int] = []
        for byte in range(256):
            crc = byte
            for _ in range(8):
                crc = (crc >> 1) ^ polynomial if crc & 1 else crc >> 1
            entries.append(crc)
        table = tuple(entries)
        _TABLES[polynomial] = table
    return table


def crc32(data: bytes, *, polynomial: int = CRC32Q_POLYNOMIAL) -> int:
    """Table-driven CRC-32 over ``data`` using a reversed-notation ``polynomial``."""

    table = _crc_table(polynomial)
    crc = 0xFFFFFFFF
    for byte in data:
        crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def canonical_bytes(value: object) -> bytes:
    """Serialize ``value`` as compact JSON with sorted keys at every level."""

    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Record is not serializable: {exc}") from exc


def _text_bytes(value: str) -> bytes:
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise SerializationError(f"Field value is not valid text: {exc}") from exc


def fingerprint(record: Mapping[str, object]) -> Fingerprint:
    """Return the 32-bit fingerprint of ``record``.

    The first non-empty field among ``updated_at``, ``updated-at`` and ``index`` is
    hashed on its own; a record with none of them is hashed through its canonical
    serialization, so reordering fields never changes the result.
    """

    for name in CHANGE_MARKER_FIELDS:
        marker = record.get(name)
        if marker is None or marker == "":
            continue
        data = _text_bytes(marker) if isinstance(marker, str) else canonical_bytes(marker)
        return crc32(data)
    return crc32(canonical_bytes(dict(record)))
