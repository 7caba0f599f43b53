import json

import pytest
from typer.testing import CliRunner

import mealcycle.cli.main as cli_main
from mealcycle.cli.main import app
from mealcycle.domain.repositories import MealRepository
from mealcycle.domain.settings_store import SettingsStore
from mealcycle.infrastructure.di_container import build_container
from mealcycle.infrastructure.meal_store import JsonFileMealStore
from mealcycle.infrastructure.settings_store import InMemorySettingsStore

runner = CliRunner()


@pytest.fixture
def settings_store(monkeypatch):
    store = InMemorySettingsStore({"sun": {"cycle_length_days": 7, "start_weekday": 0, "quota_limit": 2}})
    container = build_container({SettingsStore: store})
    monkeypatch.setattr(cli_main, "_container", lambda: container)
    return store


@pytest.fixture
def meals_file(tmp_path):
    rows = [
        {"id": "1", "meal_type": "desayuno", "created_at": "2024-01-01T08:00:00"},
        {"id": "2", "meal_type": "postre1", "created_at": "2024-01-09T14:00:00"},
        {"id": "3", "meal_type": "postre1", "created_at": "2024-01-10T14:00:00"},
        {"id": "4", "meal_type": "postre1", "created_at": "2024-01-11T14:00:00"},
        {"id": "5", "meal_type": "cena", "created_at": "not a date"},
    ]
    path = tmp_path / "meals.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path


def test_history_lists_non_empty_cycles(settings_store, meals_file):
    result = runner.invoke(app, ["history", str(meals_file), "--as-of", "2024-01-12"])

    assert result.exit_code == 0
    assert "Ciclo 1: 8 ene - 14 ene (3 meals)" in result.stdout
    assert "Ciclo 2: 1 ene - 7 ene (1 meals)" in result.stdout


def test_history_respects_user_settings(settings_store, meals_file):
    result = runner.invoke(app, ["history", str(meals_file), "--user", "sun", "--as-of", "2024-01-12"])

    assert result.exit_code == 0
    assert "Ciclo 1: 7 ene - 13 ene (3 meals)" in result.stdout
    assert "Ciclo 2: 31 dic - 6 ene (1 meals)" in result.stdout


def test_history_without_meals(settings_store, tmp_path):
    path = tmp_path / "meals.json"
    path.write_text("[]", encoding="utf-8")

    result = runner.invoke(app, ["history", str(path)])

    assert result.exit_code == 0
    assert "No meals logged yet." in result.stdout


def test_history_rejects_bad_date(settings_store, meals_file):
    result = runner.invoke(app, ["history", str(meals_file), "--as-of", "12/01/2024"])

    assert result.exit_code == 2


def test_history_missing_file_fails(settings_store, tmp_path):
    result = runner.invoke(app, ["history", str(tmp_path / "absent.json")])

    assert result.exit_code == 1


def test_today_banner(settings_store):
    result = runner.invoke(app, ["today", "--on", "2024-01-10"])

    assert result.exit_code == 0
    assert "Day 3 of 7 (2024-01-08 to 2024-01-14), 5 days left." in result.stdout


def test_today_on_last_day(settings_store):
    result = runner.invoke(app, ["today", "--on", "2024-01-14"])

    assert "1 day left." in result.stdout


def test_quota_limit_reached_exits_non_zero(settings_store, meals_file):
    result = runner.invoke(app, ["quota", str(meals_file), "--on", "2024-01-12"])

    assert result.exit_code == 1
    assert "Sweet desserts: 3/3 used, 0 remaining." in result.stdout
    assert "Limit reached" in result.stdout


def test_quota_with_room_left(settings_store, meals_file):
    result = runner.invoke(app, ["quota", str(meals_file), "--on", "2024-01-16"])

    assert result.exit_code == 0
    assert "Sweet desserts: 0/3 used, 3 remaining." in result.stdout


def test_settings_show_defaults_and_stored(settings_store):
    default = runner.invoke(app, ["settings", "show", "--user", "nobody"])
    stored = runner.invoke(app, ["settings", "show", "--user", "sun"])

    assert "Cycle length: 7 days" in default.stdout
    assert "Cycle start: Lunes (1)" in default.stdout
    assert "Cycle start: Domingo (0)" in stored.stdout
    assert "Sweet dessert limit: 2" in stored.stdout


def test_settings_set_clamps_and_is_visible_immediately(settings_store):
    runner.invoke(app, ["settings", "show", "--user", "ana"])

    result = runner.invoke(app, ["settings", "set", "--user", "ana", "--start-day", "9", "--limit", "20"])

    assert result.exit_code == 0
    assert "Saved: 7-day cycles starting Sábado, limit 10." in result.stdout
    assert settings_store.read_settings("ana") == {"cycle_length_days": 7, "start_weekday": 6, "quota_limit": 10}
    shown = runner.invoke(app, ["settings", "show", "--user", "ana"])
    assert "Cycle start: Sábado (6)" in shown.stdout


def test_settings_reset_reloads_from_store(settings_store):
    runner.invoke(app, ["settings", "show", "--user", "sun"])
    settings_store.save_settings("sun", {"cycle_length_days": 14, "start_weekday": 0, "quota_limit": 2})

    reset = runner.invoke(app, ["settings", "reset", "--user", "sun"])
    shown = runner.invoke(app, ["settings", "show", "--user", "sun"])

    assert reset.exit_code == 0
    assert "Cycle length: 14 days" in shown.stdout


def test_history_reads_configured_meal_store(monkeypatch, meals_file):
    container = build_container({SettingsStore: InMemorySettingsStore(), MealRepository: JsonFileMealStore(meals_file)})
    monkeypatch.setattr(cli_main, "_container", lambda: container)

    history = runner.invoke(app, ["history", "--as-of", "2024-01-12"])
    quota = runner.invoke(app, ["quota", "--on", "2024-01-16"])

    assert history.exit_code == 0
    assert "Ciclo 1: 8 ene - 14 ene (3 meals)" in history.stdout
    assert "Sweet desserts: 0/3 used, 3 remaining." in quota.stdout


def test_history_without_file_or_meal_store_fails(settings_store):
    result = runner.invoke(app, ["history"])

    assert result.exit_code == 1
    assert "No meal store configured." in result.output
