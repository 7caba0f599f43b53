"""Domain service partitioning meal history into weekday-anchored cycles."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from mealcycle.domain import logging as domain_logging
from mealcycle.domain.calendar import current_cycle_start, to_local_date, to_local_datetime
from mealcycle.domain.configuration import CycleConfig, sanitize_config
from mealcycle.domain.entities import (
    CurrentCycleInfo,
    CycleDay,
    CycleWindow,
    MealRecord,
    QuotaStatus,
)


@dataclass(frozen=True)
class PartitionReport:
    """Partition result plus the records that could not be placed.

    ``cycles_spanned`` counts every window the partition walked through,
    including the empty ones that are not returned.
    """

    windows: Tuple[CycleWindow, ...]
    cycles_spanned: int = 0
    excluded_unparseable: int = 0
    excluded_after_reference: int = 0

    @property
    def excluded(self) -> int:
        return self.excluded_unparseable + self.excluded_after_reference


def partition_with_report(
    records: Iterable[MealRecord],
    config: CycleConfig,
    *,
    reference: date | datetime | str | None,
    tz: Optional[tzinfo] = None,
) -> PartitionReport:
    """Split ``records`` into contiguous cycle windows, newest first.

    Args:
        records: Unordered meal records. They are never mutated.
        config: Cycle configuration; clamped before use.
        reference: Instant the newest window is anchored to. ``None`` anchors
            on the newest record instead. Records dated after the newest
            window are left out and counted in the report.
        tz: Zone used to turn aware timestamps into local days.

    Returns:
        A :class:`PartitionReport` whose ``windows`` only contains cycles with
        at least one record. Cycle numbers still count every window, empty or
        not, so they reflect the distance from the newest cycle.
    """
    config = sanitize_config(config)
    length = config.cycle_length_days

    dated: List[Tuple[datetime, MealRecord]] = []
    unparseable = 0
    for record in records:
        local = to_local_datetime(record.timestamp, tz)
        if local is None:
            unparseable += 1
            continue
        dated.append((local, record))

    if not dated:
        return PartitionReport(windows=(), excluded_unparseable=unparseable)

    reference_day = to_local_date(reference, tz) if reference is not None else None
    if reference is not None and reference_day is None:
        domain_logging.warn(f"Ignoring unparseable partition reference {reference!r}; anchoring on newest record.")
    newest = reference_day or max(local.date() for local, _ in dated)

    latest_start = current_cycle_start(newest, config)
    latest_end = latest_start + timedelta(days=length - 1)

    # Chronological within a day; sort is stable so equal instants keep input order.
    dated.sort(key=lambda item: item[0])

    in_range = [(local.date(), record) for local, record in dated if local.date() <= latest_end]
    after_reference = len(dated) - len(in_range)
    if not in_range:
        return PartitionReport(
            windows=(),
            excluded_unparseable=unparseable,
            excluded_after_reference=after_reference,
        )

    oldest = in_range[0][0]
    num_cycles = max(1, math.ceil((latest_start - oldest).days / length) + 1)

    buckets: Dict[date, List[MealRecord]] = {}
    for day, record in in_range:
        buckets.setdefault(day, []).append(record)

    windows: List[CycleWindow] = []
    for index in range(num_cycles):
        start = latest_start - timedelta(days=index * length)
        end = start + timedelta(days=length - 1)
        days = tuple(
            CycleDay(date=day, records=tuple(buckets.get(day, ())))
            for day in (end - timedelta(days=offset) for offset in range(length))
        )
        window = CycleWindow(cycle_number=index + 1, start_date=start, end_date=end, days=days)
        if window.record_count:
            windows.append(window)

    return PartitionReport(
        windows=tuple(windows),
        cycles_spanned=num_cycles,
        excluded_unparseable=unparseable,
        excluded_after_reference=after_reference,
    )


def partition_by_cycle(
    records: Iterable[MealRecord],
    config: CycleConfig,
    *,
    reference: date | datetime | str | None,
    tz: Optional[tzinfo] = None,
) -> List[CycleWindow]:
    """Return the non-empty cycle windows for ``records``, newest first."""

    return list(partition_with_report(records, config, reference=reference, tz=tz).windows)


def locate_current_cycle(
    config: CycleConfig,
    now: date | datetime | str,
    *,
    tz: Optional[tzinfo] = None,
) -> CurrentCycleInfo:
    """Locate ``now`` inside its cycle using calendar arithmetic only.

    Raises:
        ValueError: ``now`` cannot be interpreted as a date.
    """
    config = sanitize_config(config)
    today = to_local_date(now, tz)
    if today is None:
        raise ValueError(f"Cannot locate cycle for unparseable instant {now!r}")

    length = config.cycle_length_days
    start = current_cycle_start(today, config)
    day_index = (today - start).days
    return CurrentCycleInfo(
        cycle_start=start,
        cycle_end=start + timedelta(days=length - 1),
        day_in_cycle=min(day_index + 1, length),
        days_left=length - day_index,
        cycle_length_days=length,
    )


class CycleService:
    """Binds the cycle functions to one local timezone for the application layer."""

    def __init__(self, *, tz: Optional[tzinfo] = None) -> None:
        self._tz = tz

    @property
    def tz(self) -> Optional[tzinfo]:
        return self._tz

    def partition(
        self,
        records: Iterable[MealRecord],
        config: CycleConfig,
        *,
        reference: date | datetime | str | None,
    ) -> PartitionReport:
        return partition_with_report(records, config, reference=reference, tz=self._tz)

    def locate(self, config: CycleConfig, now: date | datetime | str) -> CurrentCycleInfo:
        return locate_current_cycle(config, now, tz=self._tz)

    def count(
        self,
        records: Iterable[MealRecord],
        config: CycleConfig,
        predicate: Callable[[MealRecord], Any],
        now: date | datetime | str,
    ) -> QuotaStatus:
        from mealcycle.domain.quota import count_in_current_cycle

        return count_in_current_cycle(records, config, predicate, now, tz=self._tz)


__all__ = [
    "CycleService",
    "PartitionReport",
    "locate_current_cycle",
    "partition_by_cycle",
    "partition_with_report",
]
