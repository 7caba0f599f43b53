"""Cycle configuration value object and the single sanitising step.

Values read back from storage may be out of range (older rows, manual edits,
partially migrated schemas). They are never rejected: every public entry point
runs :func:`sanitize_config` first and works on clamped values.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mealcycle.utils.converters import to_int

CYCLE_LENGTH_RANGE: tuple[int, int] = (1, 30)
START_WEEKDAY_RANGE: tuple[int, int] = (0, 6)
QUOTA_LIMIT_RANGE: tuple[int, int] = (0, 10)

# Legacy backend column names mapped onto the canonical field names.
_LEGACY_KEYS = {
    "cycle_duration": "cycle_length_days",
    "cycle_start_day": "start_weekday",
    "sweet_dessert_limit": "quota_limit",
}


@dataclass(frozen=True)
class CycleConfig:
    """A user's effective cycle configuration.

    ``start_weekday`` uses ``0`` = Sunday ... ``6`` = Saturday.
    """

    cycle_length_days: int = 7
    start_weekday: int = 1
    quota_limit: int = 3

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "CycleConfig":
        """Build a config from a persisted settings row.

        Missing keys take the defaults. Values are kept as stored, so the
        result may still need :func:`sanitize_config`.
        """

        values: dict[str, Any] = {}
        for key, value in row.items():
            field_name = _LEGACY_KEYS.get(key, key)
            if field_name in ("cycle_length_days", "start_weekday", "quota_limit") and value is not None:
                values[field_name] = value
        return cls(**values)

    def to_mapping(self) -> dict[str, int]:
        return {
            "cycle_length_days": self.cycle_length_days,
            "start_weekday": self.start_weekday,
            "quota_limit": self.quota_limit,
        }


DEFAULT_CYCLE_CONFIG = CycleConfig()


def _clamp(value: Any, bounds: tuple[int, int], default: int) -> int:
    number = to_int(value)
    if number is None:
        return default
    low, high = bounds
    return max(low, min(high, number))


def sanitize_config(config: CycleConfig | Mapping[str, Any] | None) -> CycleConfig:
    """Return ``config`` with every value clamped to its domain.

    Non-numeric or missing values fall back to the default for that field.
    Never raises.
    """

    if config is None:
        return DEFAULT_CYCLE_CONFIG
    if isinstance(config, Mapping):
        config = CycleConfig.from_mapping(config)

    defaults = DEFAULT_CYCLE_CONFIG
    return CycleConfig(
        cycle_length_days=_clamp(
            getattr(config, "cycle_length_days", None), CYCLE_LENGTH_RANGE, defaults.cycle_length_days
        ),
        start_weekday=_clamp(
            getattr(config, "start_weekday", None), START_WEEKDAY_RANGE, defaults.start_weekday
        ),
        quota_limit=_clamp(getattr(config, "quota_limit", None), QUOTA_LIMIT_RANGE, defaults.quota_limit),
    )


__all__ = [
    "CYCLE_LENGTH_RANGE",
    "CycleConfig",
    "DEFAULT_CYCLE_CONFIG",
    "QUOTA_LIMIT_RANGE",
    "START_WEEKDAY_RANGE",
    "sanitize_config",
]
