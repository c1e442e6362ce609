"""
Search and filter views over the record collection.

A view is derived on demand and never mutates its source. Matching rules:

- search text (case-insensitive) is a substring of first name, last name,
  email or position, or a raw substring of phone; any one field suffices
- department, when given, must match exactly
- status, when given, must match exactly

Empty filter fields impose no constraint. Result order is collection order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from .data_models import Department, Employee, EmploymentStatus


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Current filter inputs. ``None`` (or empty search text) means no constraint."""

    search_text: str = ""
    department: Department | None = None
    status: EmploymentStatus | None = None


def matches_search(record: Employee, search_text: str) -> bool:
    """Return True if ``search_text`` matches any searchable field of ``record``."""
    term = search_text.lower()
    return (
        term in record.first_name.lower()
        or term in record.last_name.lower()
        or term in record.email.lower()
        or term in record.position.lower()
        or term in record.phone
    )


def filter_records(records: Iterable[Employee], spec: FilterSpec) -> tuple[Employee, ...]:
    """
    Return the ordered subsequence of ``records`` selected by ``spec``.

    Parameters
    ----------
    records:
        Records in collection order.
    spec:
        Filter inputs.

    Returns
    -------
    tuple[Employee, ...]
        Matching records, order preserved.
    """
    out: list[Employee] = []
    for record in records:
        if spec.search_text and not matches_search(record, spec.search_text):
            continue
        if spec.department is not None and record.department != spec.department:
            continue
        if spec.status is not None and record.status != spec.status:
            continue
        out.append(record)
    return tuple(out)


class RecordSource(Protocol):
    """Anything that can hand out a snapshot of the collection."""

    def list_records(self) -> Sequence[Employee]:
        ...


class QueryView:
    """Filtered, read-only view bound to a record source."""

    def __init__(self, source: RecordSource) -> None:
        self._source = source

    def apply(self, spec: FilterSpec | None = None) -> tuple[Employee, ...]:
        """Evaluate ``spec`` against the source's current records."""
        records = self._source.list_records()
        if spec is None:
            return tuple(records)
        return filter_records(records, spec)
