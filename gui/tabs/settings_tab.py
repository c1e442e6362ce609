from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from records_engine.errors import StorageError
from records_engine.paths import resolve_data_paths
from records_engine.settings import AppSettings, load_settings, save_settings


class SettingsTab(QWidget):
    """
    Settings tab for the employee records GUI.

    Responsibilities
    ----------------
    - Configure storage backend, storage key, log level and export folder.
    - Persist settings to ``settings.json`` under the data root.

    Storage changes take effect the next time the application starts.
    """

    def __init__(self, data_root: Path | None = None) -> None:
        super().__init__()

        self._data_root = data_root
        self._settings = load_settings(data_root=data_root)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)

        box = QGroupBox("Defaults")
        box_layout = QVBoxLayout(box)

        paths = resolve_data_paths(data_root)
        data_root_label = QLabel(f"Data root: {paths.data_root}")
        data_root_label.setStyleSheet("color: #666;")
        box_layout.addWidget(data_root_label)

        # Storage backend
        self.backend_combo = QComboBox()
        self.backend_combo.addItem("JSON file", "json")
        self.backend_combo.addItem("SQLite", "sqlite")

        row = QHBoxLayout()
        row.addWidget(QLabel("Storage backend:"))
        row.addWidget(self.backend_combo, 1)
        box_layout.addLayout(row)

        # Storage key
        self.storage_key_edit = QLineEdit()

        row2 = QHBoxLayout()
        row2.addWidget(QLabel("Storage key:"))
        row2.addWidget(self.storage_key_edit, 1)
        box_layout.addLayout(row2)

        # Log level
        self.log_level_combo = QComboBox()
        for level in ("DEBUG", "INFO", "WARNING", "ERROR"):
            self.log_level_combo.addItem(level, level)

        row3 = QHBoxLayout()
        row3.addWidget(QLabel("Log level:"))
        row3.addWidget(self.log_level_combo, 1)
        box_layout.addLayout(row3)

        # Export folder (optional)
        self.export_dir_edit = QLineEdit()
        self.export_dir_edit.setPlaceholderText("Export folder (blank = home folder)")

        btn_export_dir = QPushButton("Browse…")
        btn_export_dir.clicked.connect(self._browse_export_dir)

        row4 = QHBoxLayout()
        row4.addWidget(QLabel("Export folder:"))
        row4.addWidget(self.export_dir_edit, 1)
        row4.addWidget(btn_export_dir)
        box_layout.addLayout(row4)

        btn_save = QPushButton("Save Settings")
        btn_save.clicked.connect(self._save)
        box_layout.addWidget(btn_save)

        layout.addWidget(box)
        layout.addStretch(1)

        self._load_into_widgets()

    def _load_into_widgets(self) -> None:
        s = self._settings
        self._select_combo_by_data(self.backend_combo, s.storage_backend)
        self.storage_key_edit.setText(s.storage_key)
        self._select_combo_by_data(self.log_level_combo, s.log_level)
        self.export_dir_edit.setText("" if s.export_dir is None else str(s.export_dir))

    @staticmethod
    def _select_combo_by_data(combo: QComboBox, value: str) -> None:
        for i in range(combo.count()):
            if str(combo.itemData(i)) == value:
                combo.setCurrentIndex(i)
                return

    def _browse_export_dir(self) -> None:
        start_dir = self.export_dir_edit.text().strip() or str(Path.home())
        directory = QFileDialog.getExistingDirectory(self, "Select export folder", start_dir)
        if directory:
            self.export_dir_edit.setText(directory)

    def _save(self) -> None:
        export_dir_text = self.export_dir_edit.text().strip()
        storage_key = self.storage_key_edit.text().strip() or self._settings.storage_key

        settings = AppSettings(
            storage_backend=str(self.backend_combo.currentData()),
            storage_key=storage_key,
            log_level=str(self.log_level_combo.currentData()),
            log_format=self._settings.log_format,
            export_dir=Path(export_dir_text) if export_dir_text else None,
        )

        try:
            save_settings(data_root=self._data_root, settings=settings)
        except StorageError as exc:
            QMessageBox.critical(self, "Settings", str(exc))
            return

        self._settings = settings
        QMessageBox.information(self, "Settings", "Saved. Storage changes apply after restart.")
