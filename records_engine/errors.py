"""
Domain exceptions for the employee records engine.

Notes
-----
Engine operations never report failures through user-facing I/O. Every expected
failure maps to one of these exceptions, raised before any state is mutated, so
a presentation layer can decide how to surface it.
"""

from __future__ import annotations


class RecordStoreError(RuntimeError):
    """Base exception for all records engine failures."""


class ValidationError(RecordStoreError):
    """
    Raised when candidate employee data is rejected.

    Attributes
    ----------
    reason:
        The single rejection reason (validation does not aggregate errors).
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NotFoundError(RecordStoreError):
    """Raised when an operation references an employee id that does not exist."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"No employee with id {record_id}.")
        self.record_id = record_id


class EmptyCollectionError(RecordStoreError):
    """Raised when exporting a collection that holds no records."""


class StorageError(RecordStoreError):
    """Raised when the key-value backend cannot be written."""
