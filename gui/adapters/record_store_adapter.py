"""Qt adapter for the engine RecordStore.

The engine owns the collection. Widgets talk to this adapter via signals/slots
and never touch RecordStore directly.

Threading model
--------------
- A single worker QObject lives on a dedicated QThread.
- The worker owns the RecordStore; every mutation runs on that thread, one at
  a time, which gives the store its single writer.
- The GUI communicates with the worker via queued Qt signals.

After every call that can change what the table shows, the worker re-applies
the current filter and emits ``records_changed``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from records_engine.data_models import EmployeeInput
from records_engine.errors import EmptyCollectionError, NotFoundError, RecordStoreError
from records_engine.export import write_delimited
from records_engine.query_view import FilterSpec, QueryView
from records_engine.record_store import RecordStore, open_record_store


class RecordStoreWorker(QObject):
    """Worker that owns the RecordStore and runs in a background thread."""

    records_changed = Signal(object, int)  # tuple[Employee, ...], total count
    edit_started = Signal(object)  # Employee
    edit_finished = Signal()
    saved = Signal(str)  # message
    deleted = Signal(str)  # message
    delete_pending = Signal(int)  # record id awaiting confirmation
    exported = Signal(str)  # written path
    error = Signal(str, str)  # title, message

    def __init__(self, store: RecordStore) -> None:
        super().__init__()
        self._store = store
        self._view = QueryView(store)
        self._spec = FilterSpec()

    def _publish(self) -> None:
        self.records_changed.emit(self._view.apply(self._spec), self._store.count())

    @Slot()
    def refresh(self) -> None:
        """Emit the current filtered view."""
        self._publish()

    @Slot(object)
    def set_filter(self, spec: object) -> None:
        """Replace the filter and emit the new view."""
        assert isinstance(spec, FilterSpec)
        self._spec = spec
        self._publish()

    @Slot(object)
    def submit(self, payload: object) -> None:
        """Add or update from raw form values, depending on the edit context."""
        assert isinstance(payload, Mapping)
        editing = self._store.editing_id is not None
        try:
            self._store.submit(EmployeeInput.parse(payload))
        except NotFoundError as e:
            self._store.cancel_edit()
            self.edit_finished.emit()
            self.error.emit("Update employee", str(e))
            self._publish()
            return
        except RecordStoreError as e:
            self.error.emit("Invalid employee", str(e))
            return
        self.edit_finished.emit()
        self.saved.emit(
            "Employee updated successfully!" if editing else "Employee added successfully!"
        )
        self._publish()

    @Slot(int)
    def begin_edit(self, record_id: int) -> None:
        """Enter edit mode and emit the record for the form."""
        try:
            record = self._store.begin_edit(record_id)
        except NotFoundError as e:
            self.error.emit("Edit employee", str(e))
            return
        self.edit_started.emit(record)

    @Slot()
    def cancel_edit(self) -> None:
        self._store.cancel_edit()
        self.edit_finished.emit()

    @Slot(int)
    def request_delete(self, record_id: int) -> None:
        """Mark a record for deletion and ask the GUI to confirm."""
        self._store.request_delete(record_id)
        self.delete_pending.emit(record_id)

    @Slot()
    def confirm_delete(self) -> None:
        try:
            removed = self._store.confirm_delete()
        except RecordStoreError as e:
            self.error.emit("Delete employee", str(e))
            return
        if removed:
            self.deleted.emit("Employee deleted successfully!")
        self._publish()

    @Slot()
    def cancel_delete(self) -> None:
        self._store.cancel_delete()

    @Slot(str)
    def export(self, path: str) -> None:
        """Write the collection as CSV to ``path``."""
        try:
            written = write_delimited(Path(path), self._store.export_delimited())
        except EmptyCollectionError as e:
            self.error.emit("Export", str(e))
            return
        except RecordStoreError as e:
            self.error.emit("Export", f"Failed to export: {e}")
            return
        self.exported.emit(str(written))


class RecordStoreAdapter(QObject):
    """Qt adapter that marshals RecordStore calls onto a worker thread."""

    # Requests (GUI emits these; wired as queued connections to worker slots)
    request_refresh = Signal()
    request_set_filter = Signal(object)
    request_submit = Signal(object)
    request_begin_edit = Signal(int)
    request_cancel_edit = Signal()
    request_delete = Signal(int)
    request_confirm_delete = Signal()
    request_cancel_delete = Signal()
    request_export = Signal(str)

    # Results (worker emits; adapter forwards)
    records_changed = Signal(object, int)
    edit_started = Signal(object)
    edit_finished = Signal()
    saved = Signal(str)
    deleted = Signal(str)
    delete_pending = Signal(int)
    exported = Signal(str)
    error = Signal(str, str)

    def __init__(self, data_root: Path | None = None, store: RecordStore | None = None) -> None:
        super().__init__()

        self._thread = QThread()
        self._worker = RecordStoreWorker(store or open_record_store(data_root=data_root))
        self._worker.moveToThread(self._thread)

        queued = Qt.ConnectionType.QueuedConnection
        wiring: tuple[tuple[Any, Any], ...] = (
            (self.request_refresh, self._worker.refresh),
            (self.request_set_filter, self._worker.set_filter),
            (self.request_submit, self._worker.submit),
            (self.request_begin_edit, self._worker.begin_edit),
            (self.request_cancel_edit, self._worker.cancel_edit),
            (self.request_delete, self._worker.request_delete),
            (self.request_confirm_delete, self._worker.confirm_delete),
            (self.request_cancel_delete, self._worker.cancel_delete),
            (self.request_export, self._worker.export),
        )
        for signal, slot in wiring:
            signal.connect(slot, type=queued)

        # Forward results to GUI.
        self._worker.records_changed.connect(self.records_changed)
        self._worker.edit_started.connect(self.edit_started)
        self._worker.edit_finished.connect(self.edit_finished)
        self._worker.saved.connect(self.saved)
        self._worker.deleted.connect(self.deleted)
        self._worker.delete_pending.connect(self.delete_pending)
        self._worker.exported.connect(self.exported)
        self._worker.error.connect(self.error)

        self._thread.start()

    def shutdown(self) -> None:
        """Stop the worker thread cleanly."""
        self._thread.quit()
        self._thread.wait()
