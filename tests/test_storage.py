import json

import pytest

from assistant_admin.errors import CacheUnavailable
from assistant_admin.settings import DEFAULT_SETTINGS, SettingsRecord
from assistant_admin.storage import (
    SETTINGS_CACHE_KEY,
    JsonFileStore,
    LocalCache,
    MemoryKeyValueStore,
    SessionFlag,
)

from conftest import BrokenStore


def test_json_file_store_roundtrip(tmp_path):
    store = JsonFileStore(tmp_path / "nested" / "cache.json")
    assert store.get("k") is None
    store.set("k", "v")
    store.set("other", "w")
    assert JsonFileStore(tmp_path / "nested" / "cache.json").get("k") == "v"
    store.remove("k")
    assert store.get("k") is None
    assert store.get("other") == "w"


def test_json_file_store_corrupt_file_raises_on_read(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)
    with pytest.raises(CacheUnavailable):
        store.get("k")
    # writes replace the corrupt file
    store.set("k", "v")
    assert store.get("k") == "v"


def test_local_cache_write_through_and_read(cache, kv):
    record = SettingsRecord(model="gpt-x")
    assert cache.refresh_cache(record) is True
    assert json.loads(kv.get(SETTINGS_CACHE_KEY)) == record.to_dict()
    assert cache.read() == record.to_dict()


def test_local_cache_ignores_unparseable_entry(kv):
    kv.set(SETTINGS_CACHE_KEY, "{{{")
    assert LocalCache(kv).read() is None


def test_local_cache_swallows_unavailable_storage():
    cache = LocalCache(BrokenStore())
    assert cache.read() is None
    assert cache.refresh_cache(DEFAULT_SETTINGS) is False
    assert cache.best_effort_persist(DEFAULT_SETTINGS) is False


def test_session_flag_lifecycle():
    store = MemoryKeyValueStore()
    flag = SessionFlag(store)
    assert not flag.is_set()
    flag.set()
    assert store.get("admin_token") == "ok"
    assert SessionFlag(store).is_set()
    flag.clear()
    assert not flag.is_set()


def test_session_flag_with_broken_store():
    flag = SessionFlag(BrokenStore())
    flag.set()
    flag.clear()
    assert not flag.is_set()
