"""
Employee records GUI app.

Tabbed window backed by the records engine (RecordStore via a Qt adapter).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QHBoxLayout, QLabel, QTabWidget, QVBoxLayout, QWidget

from gui.tabs.employees_tab import EmployeesTab
from gui.tabs.settings_tab import SettingsTab
from records_engine.observability import setup_logging
from records_engine.settings import load_settings


class AppWindow(QWidget):
    """
    Main window for the employee records GUI.

    Responsibilities
    ----------------
    - Host the tabbed interface (Employees, Settings)
    - Shut down the record store worker thread on close
    """

    def __init__(self, data_root: Path | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Employee Management System")
        self.resize(1180, 760)

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(8, 8, 8, 8)

        title = QLabel("Employee Management System")
        f = title.font()
        f.setPointSize(16)
        f.setBold(True)
        title.setFont(f)

        subtitle = QLabel("Records are stored locally on this machine")
        subtitle.setStyleSheet("color: #666;")

        header_layout.addWidget(title)
        header_layout.addSpacing(10)
        header_layout.addWidget(subtitle)
        header_layout.addStretch(1)

        root.addWidget(header)

        tabs = QTabWidget()

        self.employees_tab = EmployeesTab(data_root=data_root)
        tabs.addTab(self.employees_tab, "Employees")

        self.settings_tab = SettingsTab(data_root=data_root)
        tabs.addTab(self.settings_tab, "Settings")

        root.addWidget(tabs, 1)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """
        Handle window close by stopping the store worker.

        Parameters
        ----------
        event:
            Qt close event.
        """
        try:
            self.employees_tab.shutdown()
        finally:
            super().closeEvent(event)


def main(argv: list[str] | None = None) -> int:
    """
    Run the GUI application.

    Returns
    -------
    int
        Qt application exit code.
    """
    parser = argparse.ArgumentParser(prog="ems-gui", description="Employee records manager (GUI)")
    parser.add_argument("--data-root", default=None, help="Override the data root.")
    args, qt_args = parser.parse_known_args(argv)
    data_root = Path(args.data_root) if args.data_root else None

    settings = load_settings(data_root=data_root)
    setup_logging(settings.log_level, settings.log_format)

    app = QApplication([sys.argv[0], *qt_args])
    w = AppWindow(data_root=data_root)
    w.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
