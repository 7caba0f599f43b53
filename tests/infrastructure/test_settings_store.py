from __future__ import annotations

import json

import pytest

from mealcycle.application.exceptions import SettingsStoreError
from mealcycle.application.settings_service import SettingsResolver
from mealcycle.domain.configuration import DEFAULT_CYCLE_CONFIG, CycleConfig
from mealcycle.infrastructure.settings_store import InMemorySettingsStore, JsonFileSettingsStore


def test_json_store_missing_file_reads_as_absent(tmp_path):
    store = JsonFileSettingsStore(tmp_path / "settings.json")

    assert store.read_settings("ana") is None


def test_json_store_round_trip_keeps_other_users(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = JsonFileSettingsStore(path)

    store.save_settings("ana", {"cycle_length_days": 10, "start_weekday": 2, "quota_limit": 1})
    store.save_settings("bob", {"cycle_length_days": 7, "start_weekday": 1, "quota_limit": 3})

    assert store.read_settings("ana") == {"cycle_length_days": 10, "start_weekday": 2, "quota_limit": 1}
    assert set(json.loads(path.read_text(encoding="utf-8"))) == {"ana", "bob"}


def test_json_store_corrupt_file_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SettingsStoreError):
        JsonFileSettingsStore(path).read_settings("ana")


def test_json_store_rejects_non_object_document(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(SettingsStoreError):
        JsonFileSettingsStore(path).read_settings("ana")


def test_json_store_ignores_malformed_row(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"ana": "weekly"}), encoding="utf-8")

    assert JsonFileSettingsStore(path).read_settings("ana") is None


def test_resolver_over_corrupt_file_uses_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert SettingsResolver(JsonFileSettingsStore(path)).resolve("ana") == DEFAULT_CYCLE_CONFIG


def test_resolver_reads_legacy_columns_from_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"ana": {"cycle_duration": 14, "cycle_start_day": 6, "sweet_dessert_limit": 2}}),
        encoding="utf-8",
    )

    assert SettingsResolver(JsonFileSettingsStore(path)).resolve("ana") == CycleConfig(14, 6, 2)


def test_in_memory_store_returns_copies():
    store = InMemorySettingsStore({"ana": {"quota_limit": 1}})

    row = store.read_settings("ana")
    row["quota_limit"] = 9

    assert store.read_settings("ana") == {"quota_limit": 1}
    assert store.reads == 2
