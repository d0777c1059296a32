"""Error taxonomy of the reconciliation core."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for failures raised by reconciliation and commit."""


class IdentityError(ReconciliationError):
    """Raised when a partition key cannot be derived from a descriptor."""


class MissingFieldError(ReconciliationError):
    """Raised when a record lacks a required field such as ``external_id``."""

    def __init__(self, field: str, *, record: object | None = None) -> None:
        super().__init__(f"Record is missing required field {field!r}")
        self.field = field
        self.record = record


class FieldTypeError(ReconciliationError):
    """Raised when a record field holds a value of the wrong type."""

    def __init__(self, field: str, expected: type, *, record: object | None = None) -> None:
        super().__init__(f"Record field {field!r} must be {expected.__name__}")
        self.field = field
        self.expected = expected
        self.record = record


class SerializationError(ReconciliationError):
    """Raised when a record cannot be canonically serialized for fingerprinting."""


class DuplicateRecordError(ReconciliationError):
    """Raised when a snapshot contains the same ``external_id`` more than once."""

    def __init__(self, external_id: str) -> None:
        super().__init__(f"Duplicate external_id in snapshot: {external_id}")
        self.external_id = external_id


class ConvergenceError(ReconciliationError):
    """Raised when a committed partition does not reconcile to an empty delta."""
