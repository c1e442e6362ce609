"""
RecordStore: the owned, persisted employee collection.

Responsibilities
----------------
- Assign record ids (max existing id + 1, recomputed on every call).
- Validate candidate input before any mutation.
- Apply add/update/delete and persist the whole collection after each one.
- Track the edit context and the pending-deletion marker used by
  confirm-before-delete.

Notes
-----
There is no persisted id counter. Deleting the record with the highest id
lowers the next id, so that id can be issued again. This is observable
behaviour and is kept as-is.

The store performs no user-facing I/O. Failures are raised as
``records_engine.errors`` exceptions before state changes.

All calls must come from a single writer. The GUI serializes them on one
worker thread; the CLI is single-threaded.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .clock import Clock, SystemClock
from .data_models import Employee, EmployeeInput
from .errors import NotFoundError, ValidationError
from .export import render_delimited
from .key_value_store import KeyValueStore
from .paths import resolve_data_paths
from .query_view import FilterSpec, filter_records
from .settings import DEFAULT_STORAGE_KEY, AppSettings, load_settings, open_key_value_store
from .validation import ValidationOutcome, validate_candidate

logger = logging.getLogger(__name__)


class RecordStore:
    """
    In-memory employee collection synchronized to a key-value backend.

    Parameters
    ----------
    storage:
        Backend that receives the JSON-encoded collection.
    clock:
        Source of creation/update timestamps. Defaults to the system clock.
    storage_key:
        Key under which the collection is stored.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        clock: Clock | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._clock: Clock = clock or SystemClock()
        self._storage_key = storage_key
        self._records: list[Employee] = []
        self._editing_id: int | None = None
        self._pending_delete_id: int | None = None
        self.load()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @property
    def editing_id(self) -> int | None:
        """Id of the record being edited, or None when adding."""
        return self._editing_id

    @property
    def pending_delete_id(self) -> int | None:
        """Id awaiting delete confirmation, or None."""
        return self._pending_delete_id

    def __len__(self) -> int:
        return len(self._records)

    def count(self) -> int:
        return len(self._records)

    def list_records(self) -> tuple[Employee, ...]:
        """Return a snapshot of the collection in insertion order."""
        return tuple(self._records)

    def get(self, record_id: int) -> Employee:
        """
        Return the record with ``record_id``.

        Raises
        ------
        NotFoundError
            If no such record exists.
        """
        index = self._index_of(record_id)
        if index is None:
            raise NotFoundError(record_id)
        return self._records[index]

    def filter(self, spec: FilterSpec) -> tuple[Employee, ...]:
        """Return the records selected by ``spec`` in collection order."""
        return filter_records(self._records, spec)

    def next_id(self) -> int:
        """Return 1 for an empty collection, else the largest id plus one."""
        if not self._records:
            return 1
        return max(r.id for r in self._records) + 1

    def validate(self, candidate: EmployeeInput, exclude_id: int | None = None) -> ValidationOutcome:
        """
        Validate ``candidate`` against the current collection.

        See ``records_engine.validation`` for the rule order.
        """
        return validate_candidate(self._records, candidate, exclude_id=exclude_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, data: EmployeeInput) -> Employee:
        """
        Validate and append a new record, then persist.

        Returns
        -------
        Employee
            The stored record with its assigned id and ``created_at``.

        Raises
        ------
        ValidationError
            If validation rejects ``data``. The collection is unchanged.
        """
        outcome = self.validate(data, exclude_id=None)
        if outcome.reason is not None:
            raise ValidationError(outcome.reason)

        record = Employee.create(self.next_id(), data, created_at=self._clock.now())
        self._commit([*self._records, record])
        logger.info("Added employee %s", record.id, extra={"record_id": record.id})
        return record

    def update(self, record_id: int, data: EmployeeInput) -> Employee:
        """
        Overwrite every editable field of an existing record, then persist.

        Raises
        ------
        NotFoundError
            If ``record_id`` is absent.
        ValidationError
            If validation rejects ``data``. The collection is unchanged.
        """
        index = self._index_of(record_id)
        if index is None:
            raise NotFoundError(record_id)

        outcome = self.validate(data, exclude_id=record_id)
        if outcome.reason is not None:
            raise ValidationError(outcome.reason)

        record = self._records[index].overwrite(data, updated_at=self._clock.now())
        records = list(self._records)
        records[index] = record
        self._commit(records)
        logger.info("Updated employee %s", record_id, extra={"record_id": record_id})
        return record

    def delete(self, record_id: int) -> bool:
        """
        Remove the record with ``record_id`` if present, then persist.

        Deleting an absent id is not an error. The pending-deletion marker is
        cleared either way.

        Returns
        -------
        bool
            True if a record was removed.
        """
        survivors = [r for r in self._records if r.id != record_id]
        removed = len(survivors) != len(self._records)
        self._commit(survivors)
        self._pending_delete_id = None
        if removed:
            logger.info("Deleted employee %s", record_id, extra={"record_id": record_id})
        else:
            logger.debug("Delete ignored, no employee %s", record_id, extra={"record_id": record_id})
        return removed

    def submit(self, data: EmployeeInput) -> Employee:
        """
        Save form input: update the record under edit, or add a new one.

        On success the edit context is cleared. On failure it is kept so the
        user can correct the input.
        """
        if self._editing_id is None:
            record = self.add(data)
        else:
            record = self.update(self._editing_id, data)
        self._editing_id = None
        return record

    # ------------------------------------------------------------------
    # Edit context and delete confirmation
    # ------------------------------------------------------------------

    def begin_edit(self, record_id: int) -> Employee:
        """
        Enter edit mode for ``record_id``.

        Returns
        -------
        Employee
            The record, so a form can be pre-filled.

        Raises
        ------
        NotFoundError
            If ``record_id`` is absent. The edit context is unchanged.
        """
        record = self.get(record_id)
        self._editing_id = record_id
        return record

    def cancel_edit(self) -> None:
        self._editing_id = None

    def request_delete(self, record_id: int) -> None:
        """Mark ``record_id`` for deletion without touching the collection."""
        self._pending_delete_id = record_id

    def confirm_delete(self) -> bool:
        """
        Delete the marked record and clear the marker.

        Returns
        -------
        bool
            True if a record was removed. False if nothing was marked.
        """
        record_id = self._pending_delete_id
        if record_id is None:
            return False
        return self.delete(record_id)

    def cancel_delete(self) -> None:
        self._pending_delete_id = None

    # ------------------------------------------------------------------
    # Persistence and export
    # ------------------------------------------------------------------

    def persist(self) -> None:
        """
        Write the whole collection to the backend under the storage key.

        Raises
        ------
        StorageError
            If the backend cannot be written.
        """
        self._write(self._records)

    def _write(self, records: list[Employee]) -> None:
        payload = json.dumps([r.to_dict() for r in records], ensure_ascii=False)
        self._storage.set_item(self._storage_key, payload)

    def _commit(self, records: list[Employee]) -> None:
        # Memory changes only after the write succeeds.
        self._write(records)
        self._records = records

    def load(self) -> None:
        """
        Replace the in-memory collection with the persisted one.

        A missing key, malformed JSON, a non-array value or any malformed
        record yields an empty collection. This never raises.
        """
        self._records = self._decode(self._storage.get_item(self._storage_key))
        self._editing_id = None
        self._pending_delete_id = None
        logger.debug(
            "Loaded %d employees",
            len(self._records),
            extra={"storage_key": self._storage_key, "count": len(self._records)},
        )

    def _decode(self, raw: str | None) -> list[Employee]:
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning(
                "Stored collection is not valid JSON; starting empty",
                extra={"storage_key": self._storage_key},
            )
            return []
        if not isinstance(payload, list):
            logger.warning(
                "Stored collection is not a JSON array; starting empty",
                extra={"storage_key": self._storage_key},
            )
            return []
        try:
            return [Employee.from_dict(item) for item in payload]
        except (TypeError, ValueError, AttributeError, ArithmeticError) as exc:
            logger.warning(
                "Stored collection has a malformed record (%s); starting empty",
                exc,
                extra={"storage_key": self._storage_key},
            )
            return []

    def export_delimited(self) -> str:
        """
        Render the collection as comma-separated text.

        Raises
        ------
        EmptyCollectionError
            If the collection is empty.
        """
        return render_delimited(self._records)

    def _index_of(self, record_id: int) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None


def open_record_store(
    *,
    data_root: Path | None = None,
    settings: AppSettings | None = None,
    clock: Clock | None = None,
) -> RecordStore:
    """
    Open the RecordStore for a data root using its persisted settings.

    Parameters
    ----------
    data_root:
        Optional override for the data root.
    settings:
        Settings to use instead of the ones stored under ``data_root``.
    clock:
        Optional clock override.

    Returns
    -------
    RecordStore
        A store loaded from the configured backend.
    """
    paths = resolve_data_paths(data_root)
    resolved = settings or load_settings(data_root=paths.data_root)
    storage = open_key_value_store(paths, resolved)
    return RecordStore(storage, clock=clock, storage_key=resolved.storage_key)
