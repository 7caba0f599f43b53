"""Calendar arithmetic shared by the cycle partitioner, locator and quota counter."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

from mealcycle.domain.configuration import CYCLE_LENGTH_RANGE, CycleConfig
from mealcycle.utils.converters import to_datetime

# Days too close to the ends of the calendar for a whole window to fit around
# them are treated as unparseable.
_WINDOW_MARGIN = timedelta(days=CYCLE_LENGTH_RANGE[1] + 7)
_EARLIEST_DAY = date.min + _WINDOW_MARGIN
_LATEST_DAY = date.max - _WINDOW_MARGIN


def weekday_index(day: date) -> int:
    """Return the weekday of ``day`` with ``0`` = Sunday ... ``6`` = Saturday."""

    return day.isoweekday() % 7


def to_local_datetime(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Normalise a timestamp to a naive local datetime.

    Aware datetimes are converted to ``tz`` (the system zone when ``tz`` is
    ``None``). Naive datetimes are already local and plain dates map to local
    midnight. Returns ``None`` when ``value`` cannot be parsed or falls so
    close to ``date.min``/``date.max`` that its cycle window would overflow.
    """

    parsed = to_datetime(value)
    if parsed is None:
        return None
    if isinstance(parsed, datetime):
        if parsed.tzinfo is not None and parsed.utcoffset() is not None:
            try:
                parsed = parsed.astimezone(tz)
            except (OverflowError, ValueError):
                return None
        local = parsed.replace(tzinfo=None)
    else:
        local = datetime.combine(parsed, time.min)
    if not _EARLIEST_DAY <= local.date() <= _LATEST_DAY:
        return None
    return local


def to_local_date(value: Any, tz: Optional[tzinfo] = None) -> Optional[date]:
    """Return the local calendar day of ``value`` or ``None`` when unparseable."""

    local = to_local_datetime(value, tz)
    return local.date() if local is not None else None


def days_since_anchor(day: date, start_weekday: int) -> int:
    """Days between ``day`` and the most recent ``start_weekday`` on or before it."""

    return (weekday_index(day) - start_weekday + 7) % 7


def current_cycle_start(reference_day: date, config: CycleConfig) -> date:
    """Return the first day of the cycle window containing ``reference_day``.

    The anchor is the most recent ``start_weekday`` on or before the
    reference day. Cycles shorter than a week step forward from the anchor in
    whole cycle lengths so the window always contains the reference day.
    ``config`` must already be sanitised.
    """

    offset = days_since_anchor(reference_day, config.start_weekday)
    anchor = reference_day - timedelta(days=offset)
    whole_cycles = offset // config.cycle_length_days
    return anchor + timedelta(days=whole_cycles * config.cycle_length_days)


__all__ = [
    "current_cycle_start",
    "days_since_anchor",
    "to_local_date",
    "to_local_datetime",
    "weekday_index",
]
