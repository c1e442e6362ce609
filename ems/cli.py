"""
Command-line interface for the employee records manager.

Notes
-----
The CLI is a thin presentation layer. It parses arguments, forwards them to a
RecordStore and prints the results. All validation happens in the engine;
engine errors are printed as ``ERROR: ...`` and mapped to exit code 2.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from records_engine.data_models import Department, EmployeeInput, EmploymentStatus
from records_engine.errors import RecordStoreError
from records_engine.export import EXPORT_FILE_NAME, write_delimited
from records_engine.observability import setup_logging
from records_engine.paths import data_paths_as_text, resolve_data_paths
from records_engine.query_view import FilterSpec
from records_engine.record_store import RecordStore, open_record_store
from records_engine.render import render_record_detail, render_records_text
from records_engine.settings import AppSettings, load_settings

_DEPARTMENTS = [d.value for d in Department]
_STATUSES = [s.value for s in EmploymentStatus]


def _add_employee_fields(p: argparse.ArgumentParser) -> None:
    p.add_argument("--first-name", required=True)
    p.add_argument("--last-name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--phone", required=True)
    p.add_argument("--position", required=True)
    p.add_argument("--department", required=True, choices=_DEPARTMENTS)
    p.add_argument("--salary", required=True, help="Annual salary (must not be negative)")
    p.add_argument("--hire-date", required=True, help="Hire date as YYYY-MM-DD")
    p.add_argument("--status", required=True, choices=_STATUSES)


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="ems",
        description="Employee records manager",
    )
    parser.add_argument(
        "--data-root",
        default=None,
        help="Override the data root (primarily for testing). If omitted, defaults are used.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_p = sub.add_parser("list", help="List employees, optionally filtered")
    list_p.add_argument("--search", default="", help="Match name, email, position or phone")
    list_p.add_argument("--department", default=None, choices=_DEPARTMENTS)
    list_p.add_argument("--status", default=None, choices=_STATUSES)

    show_p = sub.add_parser("show", help="Show one employee")
    show_p.add_argument("--id", type=int, required=True)

    add_p = sub.add_parser("add", help="Add an employee")
    _add_employee_fields(add_p)

    update_p = sub.add_parser("update", help="Replace all editable fields of an employee")
    update_p.add_argument("--id", type=int, required=True)
    _add_employee_fields(update_p)

    delete_p = sub.add_parser("delete", help="Delete an employee (asks for confirmation)")
    delete_p.add_argument("--id", type=int, required=True)
    delete_p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    export_p = sub.add_parser("export", help=f"Export all employees to {EXPORT_FILE_NAME}")
    export_p.add_argument(
        "--output",
        type=Path,
        default=None,
        help=f"Output file or folder. Defaults to the configured export folder or ./{EXPORT_FILE_NAME}.",
    )

    sub.add_parser("settings", help="Print resolved settings and data paths")

    return parser


def _employee_payload(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "firstName": args.first_name,
        "lastName": args.last_name,
        "email": args.email,
        "phone": args.phone,
        "position": args.position,
        "department": args.department,
        "salary": args.salary,
        "hireDate": args.hire_date,
        "status": args.status,
    }


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _run_command(args: argparse.Namespace, store: RecordStore, settings: AppSettings) -> int:
    if args.command == "list":
        spec = FilterSpec(
            search_text=args.search,
            department=Department(args.department) if args.department else None,
            status=EmploymentStatus(args.status) if args.status else None,
        )
        print(render_records_text(store.filter(spec), total=store.count()))
        return 0

    if args.command == "show":
        print(render_record_detail(store.get(args.id)))
        return 0

    if args.command == "add":
        record = store.add(EmployeeInput.parse(_employee_payload(args)))
        print(f"Employee added successfully! (id {record.id})")
        return 0

    if args.command == "update":
        store.update(args.id, EmployeeInput.parse(_employee_payload(args)))
        print("Employee updated successfully!")
        return 0

    if args.command == "delete":
        store.request_delete(args.id)
        if not args.yes and not _confirm(f"Delete employee {args.id}? [y/N] "):
            store.cancel_delete()
            print("Cancelled.")
            return 0
        if store.confirm_delete():
            print("Employee deleted successfully!")
        else:
            print(f"Nothing to delete: no employee with id {args.id}.")
        return 0

    if args.command == "export":
        text = store.export_delimited()
        if args.output is not None:
            output = args.output
        else:
            output = (settings.export_dir or Path.cwd()) / EXPORT_FILE_NAME
        written = write_delimited(output, text)
        print(f"Exported {store.count()} employees to {written}")
        return 0

    return 2


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    data_root = Path(args.data_root) if args.data_root else None
    settings = load_settings(data_root=data_root).with_overrides(log_level=args.log_level)

    if args.command == "settings":
        print(data_paths_as_text(resolve_data_paths(data_root)))
        print(f"storage_backend: {settings.storage_backend}")
        print(f"storage_key: {settings.storage_key}")
        print(f"log_level: {settings.log_level}")
        print(f"log_format: {settings.log_format}")
        print(f"export_dir: {settings.export_dir or '-'}")
        return 0

    handler = setup_logging(settings.log_level, settings.log_format)
    try:
        store = open_record_store(data_root=data_root, settings=settings)
        return _run_command(args, store, settings)
    except RecordStoreError as exc:
        print(f"ERROR: {exc}")
        return 2
    finally:
        logging.root.removeHandler(handler)


if __name__ == "__main__":
    raise SystemExit(main())
