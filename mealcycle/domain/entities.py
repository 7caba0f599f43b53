"""Domain entities: meal records and the views derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Iterator, Mapping, Optional

from mealcycle.utils import formatters


class MealType(str, Enum):
    """Meal slots offered by the logging form."""

    DESAYUNO = "desayuno"
    COLACION1 = "colacion1"
    ALMUERZO = "almuerzo"
    POSTRE1 = "postre1"
    MERIENDA = "merienda"
    COLACION2 = "colacion2"
    CENA = "cena"
    POSTRE2 = "postre2"


# The lunch dessert slot is the one limited per cycle.
SWEET_DESSERT = MealType.POSTRE1


@dataclass(frozen=True)
class MealRecord:
    """A logged meal.

    ``timestamp`` is kept exactly as supplied (datetime, date or ISO string);
    unparseable values are tolerated and simply excluded from cycle views.
    """

    timestamp: Any
    category: str = ""
    id: Optional[str] = None
    description: str = ""
    notes: Optional[str] = None
    photo_url: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "MealRecord":
        """Build a record from a backend meal row."""

        timestamp = row.get("date") or row.get("created_at") or row.get("timestamp")
        category = row.get("meal_type") or row.get("category") or ""
        record_id = row.get("id")
        return cls(
            timestamp=timestamp,
            category=str(category),
            id=str(record_id) if record_id is not None else None,
            description=row.get("description") or "",
            notes=row.get("notes"),
            photo_url=row.get("photo_url"),
        )


def is_sweet_dessert(record: MealRecord) -> bool:
    """Default quota predicate."""

    return record.category == SWEET_DESSERT.value


@dataclass(frozen=True)
class CycleDay:
    """All records logged on one calendar day, chronological; equal instants keep input order."""

    date: date
    records: tuple[MealRecord, ...] = ()

    @property
    def label(self) -> str:
        return formatters.day_label(self.date)


@dataclass(frozen=True)
class CycleWindow:
    """One cycle of the partitioned history.

    ``cycle_number`` counts backwards from the newest window (1 = newest).
    ``days`` holds every calendar day of the window, newest first, including
    days without records.
    """

    cycle_number: int
    start_date: date
    end_date: date
    days: tuple[CycleDay, ...] = field(default_factory=tuple)

    @property
    def record_count(self) -> int:
        return sum(len(day.records) for day in self.days)

    @property
    def length_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def label(self) -> str:
        return formatters.cycle_range_label(self.cycle_number, self.start_date, self.end_date)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def iter_records(self) -> Iterator[MealRecord]:
        for day in self.days:
            yield from day.records


@dataclass(frozen=True)
class CurrentCycleInfo:
    """Where "now" falls in the active cycle."""

    cycle_start: date
    cycle_end: date
    day_in_cycle: int
    days_left: int
    cycle_length_days: int

    @property
    def progress(self) -> float:
        """Fraction of the cycle reached, counting today."""
        return self.day_in_cycle / self.cycle_length_days


@dataclass(frozen=True)
class QuotaStatus:
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @property
    def is_limit_reached(self) -> bool:
        return self.used >= self.limit

    def as_dict(self) -> dict[str, Any]:
        return {
            "used": self.used,
            "limit": self.limit,
            "remaining": self.remaining,
            "is_limit_reached": self.is_limit_reached,
        }


__all__ = [
    "CurrentCycleInfo",
    "CycleDay",
    "CycleWindow",
    "MealRecord",
    "MealType",
    "QuotaStatus",
    "SWEET_DESSERT",
    "is_sweet_dessert",
]
