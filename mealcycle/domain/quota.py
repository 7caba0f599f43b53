"""Per-cycle quota counting (e.g. sweet desserts per cycle)."""
from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Any, Callable, Iterable, Optional

from mealcycle.domain.calendar import to_local_date
from mealcycle.domain.configuration import CycleConfig, sanitize_config
from mealcycle.domain.cycle_service import locate_current_cycle
from mealcycle.domain.entities import MealRecord, QuotaStatus


def count_in_current_cycle(
    records: Iterable[MealRecord],
    config: CycleConfig,
    predicate: Callable[[MealRecord], Any],
    now: date | datetime | str,
    *,
    tz: Optional[tzinfo] = None,
) -> QuotaStatus:
    """Count records matching ``predicate`` inside the cycle containing ``now``.

    The window is the weekday-anchored cycle from :func:`locate_current_cycle`,
    the same window the history view shows as cycle 1. Records with
    unparseable timestamps are skipped. Nothing is cached between calls.
    """
    config = sanitize_config(config)
    current = locate_current_cycle(config, now, tz=tz)

    used = 0
    for record in records:
        if not predicate(record):
            continue
        day = to_local_date(record.timestamp, tz)
        if day is not None and current.cycle_start <= day <= current.cycle_end:
            used += 1

    return QuotaStatus(used=used, limit=config.quota_limit)


__all__ = ["count_in_current_cycle"]
