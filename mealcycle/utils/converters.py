"""Type conversion helpers used across the mealcycle codebase."""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional


def to_int(value: Any) -> Optional[int]:
    """Safely convert ``value`` to ``int`` where possible.

    Floats are truncated towards zero; booleans, blanks and non-numeric
    strings give ``None``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return int(stripped)
        except ValueError:
            try:
                return to_int(float(stripped))
            except ValueError:
                return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def to_datetime(value: Any) -> Optional[datetime | date]:
    """Best-effort conversion of timestamp representations.

    Returns a ``datetime`` for instants, a plain ``date`` for date-only
    values and ``None`` when the value cannot be parsed.
    """

    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped:
        return None
    if stripped.endswith(("Z", "z")):
        stripped = f"{stripped[:-1]}+00:00"
    if len(stripped) == 10:
        try:
            return date.fromisoformat(stripped)
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(stripped)
    except ValueError:
        return None


def to_date(value: Any) -> Optional[date]:
    """Best-effort conversion of common date representations to ``date``."""

    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return date.fromisoformat(stripped[:10])
        except ValueError:
            return None
    return None
