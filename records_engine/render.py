"""
Plain-text rendering of employee records for terminal output.
"""

from __future__ import annotations

from typing import Sequence

from .data_models import Employee
from .export import format_number

_COLUMNS: tuple[tuple[str, int], ...] = (
    ("ID", 4),
    ("Name", 24),
    ("Email", 28),
    ("Phone", 18),
    ("Position", 20),
    ("Department", 12),
    ("Salary", 10),
    ("Hire Date", 10),
    ("Status", 10),
)


def _cells(record: Employee) -> tuple[str, ...]:
    return (
        str(record.id),
        record.full_name,
        record.email,
        record.phone,
        record.position,
        record.department.value,
        format_number(record.salary),
        record.hire_date.isoformat(),
        record.status.value,
    )


def render_records_text(records: Sequence[Employee], *, total: int) -> str:
    """
    Render records as a fixed-width table.

    Parameters
    ----------
    records:
        Records to show, already filtered.
    total:
        Size of the whole collection, shown in the footer.

    Returns
    -------
    str
        Deterministic table text.
    """
    lines: list[str] = []
    lines.append("  ".join(name.ljust(width) for name, width in _COLUMNS).rstrip())
    lines.append("  ".join("-" * width for _, width in _COLUMNS))
    if not records:
        lines.append("No employees found")
    for record in records:
        cells = _cells(record)
        lines.append(
            "  ".join(cell.ljust(width) for cell, (_, width) in zip(cells, _COLUMNS)).rstrip()
        )
    lines.append("")
    lines.append(f"Total Employees: {total}")
    return "\n".join(lines)


def render_record_detail(record: Employee) -> str:
    """Render one record as ``label: value`` lines."""
    updated = record.updated_at.isoformat() if record.updated_at else "-"
    return "\n".join(
        [
            f"ID: {record.id}",
            f"Name: {record.full_name}",
            f"Email: {record.email}",
            f"Phone: {record.phone}",
            f"Position: {record.position}",
            f"Department: {record.department.value}",
            f"Salary: {format_number(record.salary)}",
            f"Hire Date: {record.hire_date.isoformat()}",
            f"Status: {record.status.value}",
            f"Created: {record.created_at.isoformat()}",
            f"Updated: {updated}",
        ]
    )
