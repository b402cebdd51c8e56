from __future__ import annotations

import json
from pathlib import Path

import pytest

from pylocalstate import (
    JsonFileStore,
    LocalStateConfig,
    MemoryStore,
    NamespacedStore,
    ReactiveBinding,
    SqliteStore,
    StoreError,
    open_store,
)


def test_memory_store_basic_operations() -> None:
    store = MemoryStore({"a": "1"})
    store.set("b", "2")
    store.remove("a")
    store.remove("missing")

    assert store.get("a") is None
    assert store.get("b") == "2"
    assert store.keys() == ["b"]
    assert len(store) == 1


def test_memory_store_capacity_counts_replaced_record_once() -> None:
    store = MemoryStore(capacity=10)
    store.set("k", "12345")
    store.set("k", "123456789")

    with pytest.raises(StoreError) as exc_info:
        store.set("k2", "x")

    assert exc_info.value.key == "k2"
    assert store.get("k") == "123456789"


def test_memory_store_rejects_non_string_records() -> None:
    with pytest.raises(StoreError):
        MemoryStore().set("k", 1)  # type: ignore[arg-type]


def test_json_file_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    ReactiveBinding(JsonFileStore(path), "name", "Test1").set("New Test1")

    reopened = ReactiveBinding(JsonFileStore(path), "name", "ignored")

    assert reopened.value == "New Test1"
    assert json.loads(path.read_text(encoding="utf-8")) == {"name": '"New Test1"'}


def test_json_file_store_remove_and_missing_file(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "nested" / "state.json")
    assert store.get("x") is None
    store.remove("x")
    assert not store.path.exists()

    store.set("x", "1")
    store.set("y", "2")
    store.remove("x")

    assert store.keys() == ["y"]
    assert list(tmp_path.joinpath("nested").glob("*.tmp")) == []


def test_json_file_store_handles_see_each_other(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    first, second = JsonFileStore(path), JsonFileStore(path)

    first.set("a", "1")
    second.set("b", "2")

    assert first.get("b") == "2"
    assert second.get("a") == "1"


@pytest.mark.parametrize("content", ["{broken", "[1, 2]", '{"k": 1}'])
def test_json_file_store_corrupt_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "state.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StoreError) as exc_info:
        JsonFileStore(path).get("k")

    assert exc_info.value.operation == "get"
    assert path.read_text(encoding="utf-8") == content


def test_sqlite_store_persists_across_connections(tmp_path: Path) -> None:
    path = tmp_path / "state.sqlite3"
    with SqliteStore(path) as store:
        binding = ReactiveBinding(store, "todos", [])
        binding.update(lambda items: [*items, "write tests"])

    with SqliteStore(path) as store:
        assert ReactiveBinding(store, "todos", ["ignored"]).value == ["write tests"]
        assert store.keys() == ["todos"]


def test_sqlite_store_overwrite_and_remove() -> None:
    with SqliteStore() as store:
        store.set("k", "1")
        store.set("k", "2")
        assert store.get("k") == "2"
        store.remove("k")
        store.remove("k")
        assert store.get("k") is None


def test_sqlite_store_closed_raises() -> None:
    store = SqliteStore()
    store.close()
    with pytest.raises(StoreError) as exc_info:
        store.get("k")
    assert exc_info.value.operation == "get"


def test_namespaced_store_isolates_keys() -> None:
    shared = MemoryStore()
    app_a = NamespacedStore(shared, "app-a")
    app_b = NamespacedStore(shared, "app-b")

    ReactiveBinding(app_a, "name", "A")
    ReactiveBinding(app_b, "name", "B")

    assert shared.get("app-a:name") == '"A"'
    assert shared.get("app-b:name") == '"B"'
    assert app_a.keys() == ["name"]


def test_namespaced_store_requires_enumerable_inner_for_keys() -> None:
    class _Opaque:
        def get(self, key: str) -> str | None:
            return None

        def set(self, key: str, value: str) -> None:
            pass

        def remove(self, key: str) -> None:
            pass

    with pytest.raises(StoreError):
        NamespacedStore(_Opaque(), "ns").keys()


def test_open_store_builds_configured_backend(tmp_path: Path) -> None:
    assert isinstance(open_store(LocalStateConfig(backend="memory")), MemoryStore)

    file_store = open_store(LocalStateConfig(backend="file", path=str(tmp_path / "s.json")))
    assert isinstance(file_store, JsonFileStore)

    sqlite_store = open_store(LocalStateConfig(backend="sqlite", path=str(tmp_path / "s.db"), namespace="ns"))
    assert isinstance(sqlite_store, NamespacedStore)
    assert isinstance(sqlite_store.inner, SqliteStore)
    sqlite_store.close()
