"""Data models for the employee records engine.

This module defines the canonical, typed representation of an employee record
and of the editable input a user submits. Persisted payloads use the camelCase
field names of the stored JSON array; Python attributes use snake_case.

The models are standard-library-only (dataclasses and enums).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Self

from .errors import ValidationError


class Department(str, Enum):
    """Department categories an employee can belong to."""

    ENGINEERING = "Engineering"
    MARKETING = "Marketing"
    SALES = "Sales"
    HR = "HR"
    FINANCE = "Finance"
    OPERATIONS = "Operations"


class EmploymentStatus(str, Enum):
    """Employment status values."""

    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    TERMINATED = "Terminated"


def datetime_to_iso_utc(dt: datetime) -> str:
    """Serialize a datetime as ISO-8601 UTC with millisecond precision.

    Parameters
    ----------
    dt
        A timezone-aware datetime.

    Returns
    -------
    str
        Timestamp such as ``2025-01-01T09:30:00.000Z``.

    Raises
    ------
    ValueError
        If `dt` is naive.
    """

    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    text = dt.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def datetime_from_iso_utc(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as an aware UTC datetime.

    Naive timestamps are interpreted as UTC.
    """

    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _require_keys(payload: Mapping[str, Any], keys: set[str], *, context: str) -> None:
    missing = keys.difference(payload.keys())
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ValueError(f"Missing required keys in {context}: {missing_str}")


_TEXT_FIELDS: tuple[tuple[str, str], ...] = (
    ("firstName", "First name"),
    ("lastName", "Last name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("position", "Position"),
)


@dataclass(frozen=True, slots=True)
class EmployeeInput:
    """
    Editable employee fields as submitted by a form or command.

    Attributes
    ----------
    first_name, last_name, email, phone, position:
        Trimmed text fields.
    department:
        Department category.
    salary:
        Annual salary. Business validation rejects negative values.
    hire_date:
        Date of hire.
    status:
        Employment status.
    """

    first_name: str
    last_name: str
    email: str
    phone: str
    position: str
    department: Department
    salary: float
    hire_date: date
    status: EmploymentStatus

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> Self:
        """
        Build an input from raw form values keyed by camelCase field name.

        Notes
        -----
        This is a structural gate only (presence, types, enum membership).
        Uniqueness and format rules are applied by ``validate_candidate``.

        Raises
        ------
        ValidationError
            If a required field is missing, blank or unparseable.
        """
        text: dict[str, str] = {}
        for key, label in _TEXT_FIELDS:
            value = str(payload.get(key) or "").strip()
            if not value:
                raise ValidationError(f"{label} is required.")
            text[key] = value

        return cls(
            first_name=text["firstName"],
            last_name=text["lastName"],
            email=text["email"],
            phone=text["phone"],
            position=text["position"],
            department=_parse_department(payload.get("department")),
            salary=_parse_salary(payload.get("salary")),
            hire_date=_parse_hire_date(payload.get("hireDate")),
            status=_parse_status(payload.get("status")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase payload used by forms and storage."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "position": self.position,
            "department": self.department.value,
            "salary": self.salary,
            "hireDate": self.hire_date.isoformat(),
            "status": self.status.value,
        }


def _parse_department(value: object) -> Department:
    if isinstance(value, Department):
        return value
    try:
        return Department(str(value or "").strip())
    except ValueError:
        raise ValidationError("Please select a valid department!") from None


def _parse_status(value: object) -> EmploymentStatus:
    if isinstance(value, EmploymentStatus):
        return value
    try:
        return EmploymentStatus(str(value or "").strip())
    except ValueError:
        raise ValidationError("Please select a valid status!") from None


def _parse_salary(value: object) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError("Salary is required.")
    try:
        salary = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError("Salary must be a number.") from None
    if not math.isfinite(salary):
        raise ValidationError("Salary must be a number.")
    return salary


def _parse_hire_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValidationError("Hire date is required.")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Hire date is not a valid date: {text!r}") from None


@dataclass(frozen=True, slots=True)
class Employee:
    """
    A stored employee record.

    ``id`` and ``created_at`` never change after creation; ``updated_at`` is
    ``None`` until the first update.
    """

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    position: str
    department: Department
    salary: float
    hire_date: date
    status: EmploymentStatus
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(cls, record_id: int, data: EmployeeInput, *, created_at: datetime) -> Self:
        """Build a new record from validated input."""
        return cls(
            id=record_id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            position=data.position,
            department=data.department,
            salary=data.salary,
            hire_date=data.hire_date,
            status=data.status,
            created_at=created_at,
        )

    def overwrite(self, data: EmployeeInput, *, updated_at: datetime) -> Self:
        """
        Return a copy with every editable field replaced by ``data``.

        Identity (``id``, ``created_at``) is carried over unchanged.
        """
        return type(self)(
            id=self.id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            position=data.position,
            department=data.department,
            salary=data.salary,
            hire_date=data.hire_date,
            status=data.status,
            created_at=self.created_at,
            updated_at=updated_at,
        )

    def editable_fields(self) -> EmployeeInput:
        """Return the editable portion of this record (used to pre-fill forms)."""
        return EmployeeInput(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone,
            position=self.position,
            department=self.department,
            salary=self.salary,
            hire_date=self.hire_date,
            status=self.status,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Self:
        """Construct an :class:`Employee` from a persisted mapping.

        Raises
        ------
        ValueError
            If required keys are missing or values cannot be parsed.
        """

        _require_keys(
            payload,
            {
                "id",
                "firstName",
                "lastName",
                "email",
                "phone",
                "position",
                "department",
                "salary",
                "hireDate",
                "status",
                "createdAt",
            },
            context="employee",
        )
        raw_id = payload["id"]
        if not isinstance(raw_id, int) or isinstance(raw_id, bool):
            raise ValueError(f"employee id must be an integer, got {raw_id!r}")
        updated_at = payload.get("updatedAt")
        return cls(
            id=raw_id,
            first_name=str(payload["firstName"]),
            last_name=str(payload["lastName"]),
            email=str(payload["email"]),
            phone=str(payload["phone"]),
            position=str(payload["position"]),
            department=Department(str(payload["department"])),
            salary=float(payload["salary"]),
            hire_date=date.fromisoformat(str(payload["hireDate"])),
            status=EmploymentStatus(str(payload["status"])),
            created_at=datetime_from_iso_utc(str(payload["createdAt"])),
            updated_at=datetime_from_iso_utc(str(updated_at)) if updated_at else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert this record to a JSON-serializable dict."""

        payload: dict[str, Any] = {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "position": self.position,
            "department": self.department.value,
            "salary": self.salary,
            "hireDate": self.hire_date.isoformat(),
            "status": self.status.value,
            "createdAt": datetime_to_iso_utc(self.created_at),
        }
        if self.updated_at is not None:
            payload["updatedAt"] = datetime_to_iso_utc(self.updated_at)
        return payload
