from __future__ import annotations

import json

import pytest

from employee_factory import T0, make_input, make_store
from records_engine.data_models import Department, EmploymentStatus
from records_engine.errors import NotFoundError, StorageError, ValidationError
from records_engine.key_value_store import InMemoryKeyValueStore
from records_engine.record_store import RecordStore


def test_next_id_is_one_for_empty_store() -> None:
    assert make_store().next_id() == 1


def test_add_appends_one_record_with_next_id() -> None:
    store = make_store()
    first = store.add(make_input(email="a@example.com"))
    before = len(store.list_records())

    second = store.add(make_input(email="b@example.com"))

    assert first.id == 1
    assert second.id == 2
    assert len(store.list_records()) == before + 1
    assert store.list_records()[-1] == second
    assert second.created_at > first.created_at
    assert second.updated_at is None


def test_add_persists_collection() -> None:
    storage = InMemoryKeyValueStore()
    store = make_store(storage)
    store.add(make_input())

    payload = json.loads(storage.items["employees"])
    assert [item["id"] for item in payload] == [1]
    assert payload[0]["firstName"] == "Jane"
    assert payload[0]["createdAt"] == "2025-01-01T09:00:00.000Z"


def test_add_rejects_case_insensitive_duplicate_email() -> None:
    store = make_store()
    store.add(make_input(email="Jane.Smith@Example.com"))

    with pytest.raises(ValidationError) as excinfo:
        store.add(make_input(email="jane.smith@example.com"))

    assert "already exists" in excinfo.value.reason
    assert store.count() == 1


def test_update_overwrites_fields_and_keeps_identity() -> None:
    store = make_store()
    original = store.add(make_input())
    data = make_input(
        first_name="Janet",
        position="Staff Engineer",
        department=Department.OPERATIONS,
        salary=120000.0,
        status=EmploymentStatus.ON_LEAVE,
    )

    updated = store.update(original.id, data)

    assert store.get(original.id) == updated
    assert updated.editable_fields() == data
    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert updated.updated_at is not None
    assert updated.updated_at >= original.created_at


def test_update_refreshes_updated_at_on_each_save() -> None:
    store = make_store()
    record = store.add(make_input())
    first = store.update(record.id, make_input(salary=1.0))
    second = store.update(record.id, make_input(salary=2.0))

    assert first.updated_at is not None and second.updated_at is not None
    assert second.updated_at >= first.updated_at


def test_update_with_own_unchanged_email_succeeds() -> None:
    store = make_store()
    record = store.add(make_input(email="jane@example.com"))

    updated = store.update(record.id, make_input(email="jane@example.com", salary=1.0))

    assert updated.salary == 1.0


def test_update_rejects_email_of_another_record() -> None:
    store = make_store()
    store.add(make_input(email="a@example.com"))
    second = store.add(make_input(email="b@example.com"))

    with pytest.raises(ValidationError):
        store.update(second.id, make_input(email="A@example.com"))
    assert store.get(second.id).email == "b@example.com"


def test_update_missing_id_raises_not_found() -> None:
    store = make_store()
    with pytest.raises(NotFoundError) as excinfo:
        store.update(42, make_input())
    assert excinfo.value.record_id == 42


def test_delete_preserves_order_of_survivors() -> None:
    store = make_store()
    for i in range(4):
        store.add(make_input(email=f"e{i}@example.com"))

    assert store.delete(2) is True
    assert [r.id for r in store.list_records()] == [1, 3, 4]


def test_delete_missing_id_is_a_no_op() -> None:
    store = make_store()
    store.add(make_input())
    before = store.list_records()

    assert store.delete(99) is False
    assert store.list_records() == before


def test_next_id_is_recomputed_after_deleting_highest_id() -> None:
    store = make_store()
    store.add(make_input(email="a@example.com"))
    store.add(make_input(email="b@example.com"))
    store.delete(2)

    reissued = store.add(make_input(email="c@example.com"))

    assert reissued.id == 2


def test_list_records_is_a_snapshot() -> None:
    store = make_store()
    snapshot = store.list_records()
    store.add(make_input())

    assert snapshot == ()
    assert isinstance(store.list_records(), tuple)


class _FailingStorage(InMemoryKeyValueStore):
    def set_item(self, key: str, value: str) -> None:
        raise StorageError("disk full")


def test_failed_write_leaves_collection_unchanged() -> None:
    store = RecordStore(_FailingStorage(), clock=None)

    with pytest.raises(StorageError):
        store.add(make_input())

    assert store.count() == 0


def test_get_missing_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        make_store().get(1)


def test_fixed_start_time_is_used_for_created_at() -> None:
    store = make_store()
    assert store.add(make_input()).created_at == T0
