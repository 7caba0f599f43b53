from __future__ import annotations

import pytest

from mealcycle.domain.configuration import DEFAULT_CYCLE_CONFIG, CycleConfig, sanitize_config


def test_defaults():
    assert DEFAULT_CYCLE_CONFIG == CycleConfig(cycle_length_days=7, start_weekday=1, quota_limit=3)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (CycleConfig(7, 9, 3), CycleConfig(7, 6, 3)),
        (CycleConfig(0, -1, -5), CycleConfig(1, 0, 0)),
        (CycleConfig(45, 3, 11), CycleConfig(30, 3, 10)),
        (CycleConfig(14, 0, 0), CycleConfig(14, 0, 0)),
        (CycleConfig("10", "2", "4"), CycleConfig(10, 2, 4)),
        (CycleConfig(7.9, 2.2, 1.0), CycleConfig(7, 2, 1)),
        (CycleConfig(None, None, None), DEFAULT_CYCLE_CONFIG),
        (CycleConfig("weekly", "monday", "lots"), DEFAULT_CYCLE_CONFIG),
    ],
)
def test_sanitize_clamps_every_field(raw, expected):
    assert sanitize_config(raw) == expected


def test_sanitize_accepts_rows_and_none():
    assert sanitize_config(None) == DEFAULT_CYCLE_CONFIG
    assert sanitize_config({"cycle_duration": 40, "cycle_start_day": 0}) == CycleConfig(30, 0, 3)


def test_sanitize_is_idempotent():
    once = sanitize_config(CycleConfig(99, 99, 99))
    assert sanitize_config(once) == once


def test_from_mapping_reads_canonical_and_legacy_keys():
    canonical = CycleConfig.from_mapping({"cycle_length_days": 10, "start_weekday": 0, "quota_limit": 1})
    legacy = CycleConfig.from_mapping({"cycle_duration": 10, "cycle_start_day": 0, "sweet_dessert_limit": 1})

    assert canonical == legacy == CycleConfig(10, 0, 1)


def test_from_mapping_keeps_stored_values_and_defaults_missing_ones():
    config = CycleConfig.from_mapping({"cycle_duration": 50, "cycle_start_day": None, "username": "ana"})

    assert config == CycleConfig(cycle_length_days=50, start_weekday=1, quota_limit=3)


def test_to_mapping_round_trips():
    config = CycleConfig(12, 4, 2)
    assert CycleConfig.from_mapping(config.to_mapping()) == config
