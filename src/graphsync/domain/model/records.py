"""Typed record abstraction for normalized snapshot entries."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Final

from graphsync.domain.errors import FieldTypeError, MissingFieldError

EXTERNAL_ID_FIELD: Final[str] = "external_id"
CHANGE_MARKER_FIELDS: Final[tuple[str, ...]] = ("updated_at", "updated-at", "index")


def _present(value: object) -> bool:
    return value is not None and value != ""


class Record(Mapping[str, object]):
    """Immutable mapping of field name to value with typed accessors.

    Field order is irrelevant; two records are equal when they hold the same items,
    and a record compares equal to any mapping with those items.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, object] | None = None, /, **extra: object) -> None:
        data = dict(fields) if fields is not None else {}
        data.update(extra)
        self._fields: dict[str, object] = data

    @classmethod
    def coerce(cls, value: Mapping[str, object]) -> Record:
        if isinstance(value, Record):
            return value
        return cls(value)

    @classmethod
    def tombstone(cls, external_id: str) -> Record:
        """Return a delete record identified by ``external_id`` alone."""

        return cls({EXTERNAL_ID_FIELD: external_id})

    def __getitem__(self, key: str) -> object:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"

    @property
    def external_id(self) -> str:
        value = self._fields.get(EXTERNAL_ID_FIELD)
        if not _present(value):
            raise MissingFieldError(EXTERNAL_ID_FIELD, record=self)
        if not isinstance(value, str):
            raise FieldTypeError(EXTERNAL_ID_FIELD, str, record=self)
        return value

    @property
    def has_external_id(self) -> bool:
        return _present(self._fields.get(EXTERNAL_ID_FIELD))

    @property
    def updated_at(self) -> object | None:
        for name in ("updated_at", "updated-at"):
            value = self._fields.get(name)
            if _present(value):
                return value
        return None

    @property
    def index(self) -> object | None:
        value = self._fields.get("index")
        return value if _present(value) else None

    @property
    def change_marker(self) -> object | None:
        """First non-empty value among ``updated_at``, ``updated-at`` and ``index``."""

        for name in CHANGE_MARKER_FIELDS:
            value = self._fields.get(name)
            if _present(value):
                return value
        return None

    def to_dict(self) -> dict[str, object]:
        return dict(self._fields)
