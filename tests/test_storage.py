"""Tests for key-value stores."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from nutriai.adapters.file_store import JsonFileKeyValueStore
from nutriai.adapters.supabase_store import SupabaseKeyValueStore
from nutriai.services.storage import InMemoryKeyValueStore, load_json, save_json


def test_in_memory_store_round_trip() -> None:
    store = InMemoryKeyValueStore()

    store.set("language", "en")
    assert store.get("language") == "en"
    store.remove("language")
    store.remove("language")
    assert store.get("language") is None


def test_json_helpers_tolerate_corrupt_values() -> None:
    store = InMemoryKeyValueStore({"prefs": "{not json"})

    assert load_json(store, "prefs", {"email": True}) == {"email": True}
    assert load_json(store, "missing") is None
    save_json(store, "prefs", {"email": False})
    assert load_json(store, "prefs") == {"email": False}


def test_file_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "store.json"
    JsonFileKeyValueStore(path).set("token", "abc")

    reopened = JsonFileKeyValueStore(path)

    assert reopened.get("token") == "abc"
    reopened.remove("token")
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_file_store_ignores_corrupt_document(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("[1, 2", encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    assert store.get("token") is None
    store.set("token", "abc")
    assert store.get("token") == "abc"


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    rows: dict[str, dict[str, object]] = field(default_factory=dict)
    filters: list[tuple[str, object]] = field(default_factory=list)
    last_upsert: dict[str, object] | None = None
    on_conflict: str | None = None
    _action: str = "select"

    def select(self, *_args) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "select"
        self.filters = []
        return self

    def upsert(
        self, payload: dict[str, object], on_conflict: str | None = None
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_upsert = payload
        self.on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        self.filters = []
        return self

    def eq(self, column: str, value: object) -> "FakeTable":
        self.filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self._action == "upsert" and self.last_upsert is not None:
            self.rows[str(self.last_upsert["key"])] = self.last_upsert
            return FakeResponse([self.last_upsert])
        keys = [str(value) for column, value in self.filters if column == "key"]
        matched = [self.rows[key] for key in keys if key in self.rows]
        if self._action == "delete":
            for key in keys:
                self.rows.pop(key, None)
        return FakeResponse(matched)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        return self.tables.setdefault(name, FakeTable(name))


def test_supabase_store_upserts_and_reads() -> None:
    client = FakeSupabaseClient()
    store = SupabaseKeyValueStore(client, "prefs")  # type: ignore[arg-type]

    assert store.get("language") is None
    store.set("language", "de")

    table = client.tables["prefs"]
    assert table.on_conflict == "key"
    assert table.last_upsert is not None
    assert table.last_upsert["value"] == "de"
    assert "updated_at" in table.last_upsert
    assert store.get("language") == "de"
    store.remove("language")
    assert store.get("language") is None
