from __future__ import annotations

from employee_factory import make_input, make_store
from records_engine.data_models import Department, EmploymentStatus
from records_engine.query_view import FilterSpec, QueryView, filter_records
from records_engine.record_store import RecordStore


def _seeded() -> RecordStore:
    store = make_store()
    store.add(make_input(first_name="Jane", last_name="Smith", email="jane@example.com"))
    store.add(
        make_input(
            first_name="Will",
            last_name="Smithers",
            email="will@example.com",
            department=Department.SALES,
            phone="555-0199",
        )
    )
    store.add(
        make_input(
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            position="Principal Engineer",
            status=EmploymentStatus.ON_LEAVE,
        )
    )
    return store


def test_search_is_case_insensitive_on_names() -> None:
    result = filter_records(_seeded().list_records(), FilterSpec(search_text="smith"))
    assert [r.last_name for r in result] == ["Smith", "Smithers"]


def test_search_combined_with_department_is_intersection() -> None:
    spec = FilterSpec(search_text="smith", department=Department.ENGINEERING)
    result = filter_records(_seeded().list_records(), spec)
    assert [r.last_name for r in result] == ["Smith"]


def test_search_matches_email_position_and_phone() -> None:
    records = _seeded().list_records()
    assert [r.id for r in filter_records(records, FilterSpec(search_text="ADA@"))] == [3]
    assert [r.id for r in filter_records(records, FilterSpec(search_text="principal"))] == [3]
    assert [r.id for r in filter_records(records, FilterSpec(search_text="0199"))] == [2]


def test_status_filter_is_exact() -> None:
    spec = FilterSpec(status=EmploymentStatus.ON_LEAVE)
    assert [r.id for r in filter_records(_seeded().list_records(), spec)] == [3]


def test_empty_spec_returns_everything_in_order() -> None:
    store = _seeded()
    assert filter_records(store.list_records(), FilterSpec()) == store.list_records()


def test_no_match_returns_empty_tuple() -> None:
    assert filter_records(_seeded().list_records(), FilterSpec(search_text="zzz")) == ()


def test_query_view_reads_current_store_state() -> None:
    store = _seeded()
    view = QueryView(store)
    spec = FilterSpec(department=Department.SALES)

    assert [r.id for r in view.apply(spec)] == [2]
    store.delete(2)
    assert view.apply(spec) == ()
    assert len(view.apply()) == 2


def test_filtering_does_not_mutate_store() -> None:
    store = _seeded()
    before = store.list_records()
    store.filter(FilterSpec(search_text="smith", status=EmploymentStatus.TERMINATED))
    assert store.list_records() == before
