from __future__ import annotations

import json
from pathlib import Path

import pytest

from employee_factory import make_input, make_store
from records_engine.data_models import Employee
from records_engine.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
)
from records_engine.record_store import RecordStore

BROWSER_RECORD = {
    "id": 7,
    "firstName": "John",
    "lastName": "Doe",
    "email": "john@example.com",
    "phone": "555-0100",
    "position": "Accountant",
    "department": "Finance",
    "salary": 64000,
    "hireDate": "2019-06-01",
    "status": "Active",
    "createdAt": "2024-02-03T10:11:12.345Z",
    "updatedAt": "2024-03-01T08:00:00.000Z",
}


def _stored(**overrides: object) -> str:
    return json.dumps([{**BROWSER_RECORD, **overrides}])


def _populate(store: RecordStore) -> None:
    store.add(make_input(email="a@example.com", first_name="Ann"))
    store.add(make_input(email="b@example.com", first_name="Bob", salary=70500.5))
    store.update(1, make_input(email="a@example.com", first_name="Anna"))


@pytest.mark.parametrize("backend", ["memory", "json", "sqlite"])
def test_persist_then_load_reproduces_collection(backend: str, tmp_path: Path) -> None:
    storage: KeyValueStore
    if backend == "json":
        storage = JsonFileKeyValueStore(path=tmp_path / "storage.json")
    elif backend == "sqlite":
        storage = SqliteKeyValueStore(db_path=tmp_path / "storage.sqlite")
    else:
        storage = InMemoryKeyValueStore()

    store = make_store(storage)  # type: ignore[arg-type]
    _populate(store)
    store.persist()

    fresh = RecordStore(storage)

    assert fresh.list_records() == store.list_records()


def test_load_missing_key_yields_empty_collection() -> None:
    assert RecordStore(InMemoryKeyValueStore()).list_records() == ()


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"id": 1}',
        "42",
        '[{"id": 1}]',
        "[1, 2]",
        pytest.param("[" * 100_000 + "]" * 100_000, id="deeply-nested"),
        pytest.param(_stored(id=float("inf")), id="id-infinity"),
        pytest.param(_stored().replace('"id": 7', '"id": 1e400'), id="id-1e400"),
        pytest.param(_stored(createdAt="0001-01-01T00:00:00+01:00"), id="created-before-year-1-utc"),
        pytest.param(_stored(id=1.7), id="id-fraction"),
        pytest.param(_stored(id=True), id="id-bool"),
        pytest.param(_stored(id="7"), id="id-string"),
    ],
)
def test_load_fails_closed_to_empty(raw: str) -> None:
    storage = InMemoryKeyValueStore(items={"employees": raw})
    assert RecordStore(storage).list_records() == ()


@pytest.mark.parametrize("bad_id", [1.7, True, 7.0, "7", None])
def test_from_dict_rejects_non_integer_ids(bad_id: object) -> None:
    with pytest.raises(ValueError):
        Employee.from_dict({**BROWSER_RECORD, "id": bad_id})


def test_load_reads_records_written_by_browser_app() -> None:
    raw = _stored()
    store = RecordStore(InMemoryKeyValueStore(items={"employees": raw}))

    (record,) = store.list_records()
    assert record.id == 7
    assert record.created_at.microsecond == 345000
    assert store.next_id() == 8
    assert record.to_dict()["createdAt"] == "2024-02-03T10:11:12.345Z"


def test_load_resets_edit_and_delete_state() -> None:
    store = make_store()
    record = store.add(make_input())
    store.begin_edit(record.id)
    store.request_delete(record.id)

    store.load()

    assert store.editing_id is None
    assert store.pending_delete_id is None
    assert store.count() == 1


def test_custom_storage_key_is_used() -> None:
    storage = InMemoryKeyValueStore()
    store = RecordStore(storage, storage_key="staff")
    store.add(make_input())

    assert set(storage.items) == {"staff"}


def test_json_file_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("garbage", encoding="utf-8")
    storage = JsonFileKeyValueStore(path=path)

    assert storage.get_item("employees") is None
    storage.set_item("employees", "[]")
    assert json.loads(path.read_text(encoding="utf-8")) == {"employees": "[]"}


def test_key_value_backends_remove_item(tmp_path: Path) -> None:
    for storage in (
        JsonFileKeyValueStore(path=tmp_path / "kv.json"),
        SqliteKeyValueStore(db_path=tmp_path / "kv.sqlite"),
    ):
        storage.set_item("k", "v")
        storage.remove_item("k")
        assert storage.get_item("k") is None


def test_json_file_store_ignores_deeply_nested_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[" * 100_000 + "]" * 100_000, encoding="utf-8")

    assert JsonFileKeyValueStore(path=path).get_item("employees") is None
