"""
Employees tab (engine-backed).

Purpose
-------
- Add and edit employees through a form.
- Search and filter the table by text, department and status.
- Delete with an explicit confirmation step.
- Export the whole collection as CSV.

Notes
-----
- The tab never touches RecordStore directly; it goes through the adapter.
- The table is re-rendered from the adapter's ``records_changed`` signal
  after every mutation.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QDateEdit,
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from gui.adapters.record_store_adapter import RecordStoreAdapter
from records_engine.data_models import Department, Employee, EmploymentStatus
from records_engine.export import EXPORT_FILE_NAME
from records_engine.query_view import FilterSpec
from records_engine.settings import load_settings

_TABLE_HEADERS = (
    "ID",
    "Name",
    "Email",
    "Phone",
    "Position",
    "Department",
    "Salary",
    "Hire Date",
    "Status",
)


def _format_salary(value: float) -> str:
    if value.is_integer():
        return f"${value:,.0f}"
    return f"${value:,.2f}"


class EmployeesTab(QWidget):
    """
    Form-and-table view over the employee collection.

    Responsibilities
    ----------------
    - Collect raw form values and forward them to the adapter for validation.
    - Reflect the edit context (form title, button labels, cancel button).
    - Surface engine errors as message boxes.
    """

    def __init__(self, data_root: Path | None = None) -> None:
        super().__init__()

        self._export_dir = load_settings(data_root=data_root).export_dir or Path.home()
        self._store = RecordStoreAdapter(data_root=data_root)
        self._store.records_changed.connect(self._on_records_changed)
        self._store.edit_started.connect(self._on_edit_started)
        self._store.edit_finished.connect(self._reset_form)
        self._store.saved.connect(self._on_info)
        self._store.deleted.connect(self._on_info)
        self._store.delete_pending.connect(self._on_delete_pending)
        self._store.exported.connect(self._on_exported)
        self._store.error.connect(self._on_error)

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)

        root.addWidget(self._build_form())
        root.addWidget(self._build_filters())

        self.table = QTableWidget(0, len(_TABLE_HEADERS) + 1)
        self.table.setHorizontalHeaderLabels([*_TABLE_HEADERS, "Actions"])
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setStretchLastSection(True)
        root.addWidget(self.table, 1)

        footer = QHBoxLayout()
        self.total_label = QLabel("Total Employees: 0")
        self.btn_export = QPushButton("Export CSV…")
        self.btn_export.clicked.connect(self._export)
        footer.addWidget(self.total_label)
        footer.addStretch(1)
        footer.addWidget(self.btn_export)
        root.addLayout(footer)

        self._store.request_refresh.emit()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_form(self) -> QGroupBox:
        self.form_box = QGroupBox("Add New Employee")
        form = QFormLayout(self.form_box)

        self.first_name_edit = QLineEdit()
        self.last_name_edit = QLineEdit()
        self.email_edit = QLineEdit()
        self.phone_edit = QLineEdit()
        self.phone_edit.setPlaceholderText("+1 (555) 123-4567")
        self.position_edit = QLineEdit()

        self.department_combo = QComboBox()
        self.department_combo.addItem("Select department", "")
        for d in Department:
            self.department_combo.addItem(d.value, d.value)

        self.salary_spin = QDoubleSpinBox()
        self.salary_spin.setRange(-1_000_000_000.0, 1_000_000_000.0)
        self.salary_spin.setDecimals(2)
        self.salary_spin.setSingleStep(1000.0)

        self.hire_date_edit = QDateEdit()
        self.hire_date_edit.setCalendarPopup(True)
        self.hire_date_edit.setDisplayFormat("yyyy-MM-dd")
        self.hire_date_edit.setDate(QDate.currentDate())

        self.status_combo = QComboBox()
        for s in EmploymentStatus:
            self.status_combo.addItem(s.value, s.value)

        form.addRow("First name:", self.first_name_edit)
        form.addRow("Last name:", self.last_name_edit)
        form.addRow("Email:", self.email_edit)
        form.addRow("Phone:", self.phone_edit)
        form.addRow("Position:", self.position_edit)
        form.addRow("Department:", self.department_combo)
        form.addRow("Salary:", self.salary_spin)
        form.addRow("Hire date:", self.hire_date_edit)
        form.addRow("Status:", self.status_combo)

        buttons = QHBoxLayout()
        self.btn_submit = QPushButton("Add Employee")
        self.btn_submit.clicked.connect(self._submit)
        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(lambda: self._store.request_cancel_edit.emit())
        self.btn_cancel.setVisible(False)
        buttons.addWidget(self.btn_submit)
        buttons.addWidget(self.btn_cancel)
        buttons.addStretch(1)
        form.addRow(buttons)
        return self.form_box

    def _build_filters(self) -> QWidget:
        bar = QWidget()
        layout = QHBoxLayout(bar)
        layout.setContentsMargins(0, 0, 0, 0)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search by name, email, position or phone")
        self.search_edit.textChanged.connect(self._filter_changed)

        self.department_filter = QComboBox()
        self.department_filter.addItem("All departments", "")
        for d in Department:
            self.department_filter.addItem(d.value, d.value)
        self.department_filter.currentIndexChanged.connect(self._filter_changed)

        self.status_filter = QComboBox()
        self.status_filter.addItem("All statuses", "")
        for s in EmploymentStatus:
            self.status_filter.addItem(s.value, s.value)
        self.status_filter.currentIndexChanged.connect(self._filter_changed)

        layout.addWidget(self.search_edit, 1)
        layout.addWidget(self.department_filter)
        layout.addWidget(self.status_filter)
        return bar

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def _form_payload(self) -> dict[str, Any]:
        return {
            "firstName": self.first_name_edit.text(),
            "lastName": self.last_name_edit.text(),
            "email": self.email_edit.text(),
            "phone": self.phone_edit.text(),
            "position": self.position_edit.text(),
            "department": self.department_combo.currentData(),
            "salary": self.salary_spin.value(),
            "hireDate": self.hire_date_edit.date().toString("yyyy-MM-dd"),
            "status": self.status_combo.currentData(),
        }

    def _submit(self) -> None:
        self._store.request_submit.emit(self._form_payload())

    def _filter_changed(self) -> None:
        department = self.department_filter.currentData()
        status = self.status_filter.currentData()
        spec = FilterSpec(
            search_text=self.search_edit.text(),
            department=Department(department) if department else None,
            status=EmploymentStatus(status) if status else None,
        )
        self._store.request_set_filter.emit(spec)

    def _export(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Export employees", str(self._export_dir / EXPORT_FILE_NAME), "CSV files (*.csv)"
        )
        if path:
            self._store.request_export.emit(path)

    # ------------------------------------------------------------------
    # Adapter results
    # ------------------------------------------------------------------

    def _on_records_changed(self, records: object, total: int) -> None:
        assert isinstance(records, tuple)
        self.total_label.setText(f"Total Employees: {total}")
        self.table.setRowCount(0)
        if not records:
            self.table.setRowCount(1)
            self.table.setSpan(0, 0, 1, self.table.columnCount())
            self.table.setItem(0, 0, QTableWidgetItem("No employees found"))
            return
        self.table.clearSpans()
        self.table.setRowCount(len(records))
        for row, record in enumerate(records):
            self._fill_row(row, record)

    def _fill_row(self, row: int, record: Employee) -> None:
        cells = (
            str(record.id),
            record.full_name,
            record.email,
            record.phone,
            record.position,
            record.department.value,
            _format_salary(record.salary),
            record.hire_date.strftime("%x"),
            record.status.value,
        )
        for col, text in enumerate(cells):
            self.table.setItem(row, col, QTableWidgetItem(text))

        actions = QWidget()
        actions_layout = QHBoxLayout(actions)
        actions_layout.setContentsMargins(0, 0, 0, 0)
        btn_edit = QPushButton("Edit")
        btn_edit.clicked.connect(lambda: self._store.request_begin_edit.emit(record.id))
        btn_delete = QPushButton("Delete")
        btn_delete.clicked.connect(lambda: self._store.request_delete.emit(record.id))
        actions_layout.addWidget(btn_edit)
        actions_layout.addWidget(btn_delete)
        self.table.setCellWidget(row, len(cells), actions)

    def _on_edit_started(self, record: object) -> None:
        assert isinstance(record, Employee)
        self.first_name_edit.setText(record.first_name)
        self.last_name_edit.setText(record.last_name)
        self.email_edit.setText(record.email)
        self.phone_edit.setText(record.phone)
        self.position_edit.setText(record.position)
        self._select_combo_by_data(self.department_combo, record.department.value)
        self.salary_spin.setValue(record.salary)
        self.hire_date_edit.setDate(_qdate(record.hire_date))
        self._select_combo_by_data(self.status_combo, record.status.value)

        self.form_box.setTitle("Edit Employee")
        self.btn_submit.setText("Update Employee")
        self.btn_cancel.setVisible(True)

    def _reset_form(self) -> None:
        for edit in (
            self.first_name_edit,
            self.last_name_edit,
            self.email_edit,
            self.phone_edit,
            self.position_edit,
        ):
            edit.clear()
        self.department_combo.setCurrentIndex(0)
        self.status_combo.setCurrentIndex(0)
        self.salary_spin.setValue(0.0)
        self.hire_date_edit.setDate(QDate.currentDate())

        self.form_box.setTitle("Add New Employee")
        self.btn_submit.setText("Add Employee")
        self.btn_cancel.setVisible(False)

    def _on_delete_pending(self, record_id: int) -> None:
        answer = QMessageBox.question(
            self,
            "Delete employee",
            f"Are you sure you want to delete employee {record_id}?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if answer == QMessageBox.Yes:
            self._store.request_confirm_delete.emit()
        else:
            self._store.request_cancel_delete.emit()

    def _on_exported(self, path: str) -> None:
        QMessageBox.information(self, "Export", f"Exported to {path}")

    def _on_info(self, message: str) -> None:
        QMessageBox.information(self, "Employees", message)

    def _on_error(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    @staticmethod
    def _select_combo_by_data(combo: QComboBox, value: str) -> None:
        for i in range(combo.count()):
            if str(combo.itemData(i)) == value:
                combo.setCurrentIndex(i)
                return

    def shutdown(self) -> None:
        """Stop the adapter's worker thread."""
        self._store.shutdown()


def _qdate(value: date) -> QDate:
    return QDate(value.year, value.month, value.day)
