from __future__ import annotations

import pytest

from employee_factory import make_input, make_store
from records_engine.validation import (
    DUPLICATE_EMAIL_REASON,
    INVALID_EMAIL_REASON,
    INVALID_PHONE_REASON,
    NEGATIVE_SALARY_REASON,
    validate_candidate,
)


@pytest.mark.parametrize("email", ["bad-email", "a@b", "a b@c.co", "@b.co", "a@b.co\n"])
def test_rejects_malformed_email(email: str) -> None:
    outcome = validate_candidate([], make_input(email=email))
    assert outcome.reason == INVALID_EMAIL_REASON
    assert not outcome.ok


def test_accepts_minimal_email() -> None:
    assert validate_candidate([], make_input(email="a@b.co")).ok


def test_phone_character_class() -> None:
    assert validate_candidate([], make_input(phone="call me")).reason == INVALID_PHONE_REASON
    assert validate_candidate([], make_input(phone="+1 (555) 123-4567")).ok
    assert validate_candidate([], make_input(phone="١٢٣")).reason == INVALID_PHONE_REASON
    assert validate_candidate([], make_input(phone="５５５ ０１００")).reason == INVALID_PHONE_REASON


def test_salary_must_not_be_negative() -> None:
    assert validate_candidate([], make_input(salary=-1.0)).reason == NEGATIVE_SALARY_REASON
    assert validate_candidate([], make_input(salary=0.0)).ok


def test_reports_only_the_first_failure_in_rule_order() -> None:
    store = make_store()
    store.add(make_input(email="taken@example.com"))

    everything_wrong = make_input(email="TAKEN@example.com", phone="call me", salary=-5.0)
    assert store.validate(everything_wrong).reason == DUPLICATE_EMAIL_REASON

    bad_format_and_phone = make_input(email="nope", phone="call me", salary=-5.0)
    assert store.validate(bad_format_and_phone).reason == INVALID_EMAIL_REASON

    bad_phone_and_salary = make_input(email="ok@example.com", phone="call me", salary=-5.0)
    assert store.validate(bad_phone_and_salary).reason == INVALID_PHONE_REASON


def test_duplicate_check_excludes_record_being_edited() -> None:
    store = make_store()
    record = store.add(make_input(email="jane@example.com"))

    assert store.validate(make_input(email="JANE@example.com")).reason == DUPLICATE_EMAIL_REASON
    assert store.validate(make_input(email="JANE@example.com"), exclude_id=record.id).ok
