from __future__ import annotations

import pytest

from graphsync.domain.errors import FieldTypeError, MissingFieldError
from graphsync.domain.model import Record


def test_record_behaves_like_a_mapping() -> None:
    record = Record({"external_id": "b1", "name": "bucket"})

    assert record["name"] == "bucket"
    assert len(record) == 2
    assert set(record) == {"external_id", "name"}
    assert record == {"name": "bucket", "external_id": "b1"}


def test_record_external_id_accessor() -> None:
    assert Record(external_id="b1").external_id == "b1"
    assert Record(external_id="b1").has_external_id


@pytest.mark.parametrize("value", [42, 4.2, True, ["b1"]])
def test_record_rejects_non_text_external_id(value: object) -> None:
    record = Record(external_id=value)

    assert record.has_external_id
    with pytest.raises(FieldTypeError) as excinfo:
        _ = record.external_id
    assert excinfo.value.field == "external_id"
    assert excinfo.value.expected is str


@pytest.mark.parametrize("fields", [{}, {"external_id": ""}, {"external_id": None}])
def test_record_without_external_id_raises(fields: dict[str, object]) -> None:
    record = Record(fields)

    assert not record.has_external_id
    with pytest.raises(MissingFieldError):
        _ = record.external_id


def test_record_typed_marker_accessors() -> None:
    record = Record({"updated-at": "2024-02-02", "index": "5"})

    assert record.updated_at == "2024-02-02"
    assert record.index == "5"
    assert record.change_marker == "2024-02-02"
    assert Record(index="5").change_marker == "5"
    assert Record(name="x").change_marker is None
    assert Record(updated_at="").updated_at is None


def test_tombstone_only_carries_identity() -> None:
    tombstone = Record.tombstone("b1")

    assert tombstone.to_dict() == {"external_id": "b1"}


def test_record_copies_its_input() -> None:
    source = {"external_id": "b1"}
    record = Record(source)
    source["external_id"] = "changed"
    exported = record.to_dict()
    exported["extra"] = True

    assert record == {"external_id": "b1"}


def test_coerce_reuses_records() -> None:
    record = Record(external_id="b1")

    assert Record.coerce(record) is record
    assert Record.coerce({"external_id": "b1"}) == record
