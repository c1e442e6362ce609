"""
Business validation for employee input.

Rules are evaluated in a fixed order and evaluation stops at the first failure:

1. email is unique (case-insensitive) among records other than ``exclude_id``
2. email matches ``local@domain.tld``
3. phone contains only digits, spaces, ``+``, ``-``, ``(`` and ``)``
4. salary is not negative

Only one reason is ever reported. Callers and tests rely on that ordering.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .data_models import Employee, EmployeeInput
PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$", re.ASCII)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$")

DUPLICATE_EMAIL_REASON = "An employee with this email already exists!"
INVALID_EMAIL_REASON = "Please enter a valid email address!"
INVALID_PHONE_REASON = "Please enter a valid phone number!"
NEGATIVE_SALARY_REASON = "Salary cannot be negative!"


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """
    Result of validating one candidate.

    Attributes
    ----------
    reason:
        ``None`` when the candidate passed, otherwise the first failing reason.
    """

    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


ACCEPTED = ValidationOutcome()


def email_in_use(records: Iterable[Employee], email: str, *, exclude_id: int | None) -> bool:
    """Return True if another record already uses ``email`` (case-insensitive)."""
    needle = email.lower()
    return any(r.email.lower() == needle and r.id != exclude_id for r in records)


def validate_candidate(
    records: Iterable[Employee],
    candidate: EmployeeInput,
    *,
    exclude_id: int | None = None,
) -> ValidationOutcome:
    """
    Validate candidate input against the current collection.

    Parameters
    ----------
    records:
        Current collection.
    candidate:
        Input being added or saved.
    exclude_id:
        Id of the record being edited, so re-saving an unchanged email does not
        conflict with itself. ``None`` when adding.

    Returns
    -------
    ValidationOutcome
        ``ACCEPTED`` or an outcome carrying the first failing reason.
    """
    if email_in_use(records, candidate.email, exclude_id=exclude_id):
        return ValidationOutcome(DUPLICATE_EMAIL_REASON)
    if not EMAIL_PATTERN.fullmatch(candidate.email):
        return ValidationOutcome(INVALID_EMAIL_REASON)
    if not PHONE_PATTERN.fullmatch(candidate.phone):
        return ValidationOutcome(INVALID_PHONE_REASON)
    if candidate.salary < 0:
        return ValidationOutcome(NEGATIVE_SALARY_REASON)
    return ACCEPTED
