"""
RecordStoreWorker tests.

Slots are called directly on the test thread, so signals are delivered
synchronously and no worker thread or event loop is needed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import QCoreApplication  # noqa: E402

from employee_factory import form_payload, make_store  # noqa: E402
from gui.adapters.record_store_adapter import RecordStoreWorker  # noqa: E402
from records_engine.data_models import Department  # noqa: E402
from records_engine.query_view import FilterSpec  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _qt_app() -> Any:
    return QCoreApplication.instance() or QCoreApplication([])


class _Recorder:
    def __init__(self, worker: RecordStoreWorker) -> None:
        self.views: list[tuple[Any, int]] = []
        self.errors: list[tuple[str, str]] = []
        self.messages: list[str] = []
        self.pending: list[int] = []
        self.edits: list[Any] = []
        self.exports: list[str] = []
        worker.records_changed.connect(lambda records, total: self.views.append((records, total)))
        worker.error.connect(lambda title, message: self.errors.append((title, message)))
        worker.saved.connect(self.messages.append)
        worker.deleted.connect(self.messages.append)
        worker.delete_pending.connect(self.pending.append)
        worker.edit_started.connect(self.edits.append)
        worker.exported.connect(self.exports.append)


def test_submit_adds_and_publishes_view() -> None:
    worker = RecordStoreWorker(make_store())
    rec = _Recorder(worker)

    worker.submit(form_payload())

    assert rec.messages == ["Employee added successfully!"]
    records, total = rec.views[-1]
    assert total == 1
    assert records[0].first_name == "Jane"


def test_invalid_submit_emits_error_without_view() -> None:
    worker = RecordStoreWorker(make_store())
    rec = _Recorder(worker)

    worker.submit(form_payload(email="bad-email"))

    assert rec.errors == [("Invalid employee", "Please enter a valid email address!")]
    assert rec.views == []


def test_edit_then_submit_updates() -> None:
    store = make_store()
    worker = RecordStoreWorker(store)
    rec = _Recorder(worker)
    worker.submit(form_payload())

    worker.begin_edit(1)
    worker.submit(form_payload(position="Manager"))

    assert rec.edits[0].id == 1
    assert rec.messages[-1] == "Employee updated successfully!"
    assert store.get(1).position == "Manager"
    assert store.editing_id is None


def test_filter_applies_to_published_view() -> None:
    worker = RecordStoreWorker(make_store())
    rec = _Recorder(worker)
    worker.submit(form_payload())

    worker.set_filter(FilterSpec(department=Department.SALES))

    records, total = rec.views[-1]
    assert records == ()
    assert total == 1


def test_two_phase_delete() -> None:
    store = make_store()
    worker = RecordStoreWorker(store)
    rec = _Recorder(worker)
    worker.submit(form_payload())

    worker.request_delete(1)
    assert rec.pending == [1]
    assert store.count() == 1

    worker.confirm_delete()
    assert store.count() == 0
    assert rec.messages[-1] == "Employee deleted successfully!"


def test_export_empty_emits_error(tmp_path: Path) -> None:
    worker = RecordStoreWorker(make_store())
    rec = _Recorder(worker)

    worker.export(str(tmp_path / "out.csv"))

    assert rec.errors == [("Export", "No employees to export!")]
    assert rec.exports == []


def test_export_writes_file(tmp_path: Path) -> None:
    worker = RecordStoreWorker(make_store())
    rec = _Recorder(worker)
    worker.submit(form_payload())

    worker.export(str(tmp_path / "out.csv"))

    assert rec.exports == [str(tmp_path / "out.csv")]
    assert (tmp_path / "out.csv").read_text(encoding="utf-8").startswith("ID,First Name")
