"""
Comma-separated export of the record collection.

Known limitation
----------------
Fields are joined with ``,`` as-is. Values containing commas, quotes or
newlines are not quoted or escaped, so such rows will not parse back into the
same columns. Consumers that need round-trippable output must not rely on this
format.
"""

from __future__ import annotations

import math
import os
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from .data_models import Employee
from .errors import EmptyCollectionError, StorageError

EXPORT_FILE_NAME = "employees.csv"
EXPORT_HEADER: tuple[str, ...] = (
    "ID",
    "First Name",
    "Last Name",
    "Email",
    "Phone",
    "Position",
    "Department",
    "Salary",
    "Hire Date",
    "Status",
)


def format_number(value: float) -> str:
    """
    Render a number the way JavaScript's ``Number.prototype.toString`` would.

    Integral values drop the fraction (``75000``), other values use the
    shortest round-tripping digits (``75000.5``). Magnitudes of ``1e21`` and
    above, or below ``1e-6``, use exponent form with an explicit sign
    (``1e+21``, ``1.5e-7``); everything in between is written out in full.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    magnitude = abs(value)
    if magnitude >= 1e21 or magnitude < 1e-6:
        mantissa, _, exponent = repr(value).partition("e")
        return f"{mantissa}e{int(exponent):+d}"
    text = repr(value)
    if "e" in text:
        return format(Decimal(text), "f")
    if value.is_integer():
        return str(int(value))
    return text


def _row(record: Employee) -> str:
    return ",".join(
        [
            str(record.id),
            record.first_name,
            record.last_name,
            record.email,
            record.phone,
            record.position,
            record.department.value,
            format_number(record.salary),
            record.hire_date.isoformat(),
            record.status.value,
        ]
    )


def render_delimited(records: Sequence[Employee]) -> str:
    """
    Render records as header plus one line per record.

    Returns
    -------
    str
        Lines joined with ``\\n``, without a trailing newline.

    Raises
    ------
    EmptyCollectionError
        If ``records`` is empty. Nothing is produced in that case.
    """
    if not records:
        raise EmptyCollectionError("No employees to export!")
    lines = [",".join(EXPORT_HEADER)]
    lines.extend(_row(r) for r in records)
    return "\n".join(lines)


def write_delimited(path: Path, text: str) -> Path:
    """
    Atomically write export text as UTF-8.

    Parameters
    ----------
    path:
        Target file, or a directory to receive ``employees.csv``.

    Returns
    -------
    pathlib.Path
        The file that was written.
    """
    target = path / EXPORT_FILE_NAME if path.is_dir() else path
    temp_path = target.with_suffix(target.suffix + ".tmp")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with temp_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(temp_path, target)
    except OSError as exc:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise StorageError(f"Failed to write export: {target} ({exc!s})") from exc
    return target
