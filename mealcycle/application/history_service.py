"""Application facade consumed by the history, logging and sharing views."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Iterable, List, Optional

from mealcycle.application.exceptions import MealStoreError
from mealcycle.application.settings_service import SettingsResolver
from mealcycle.domain.cycle_service import CycleService
from mealcycle.domain.entities import (
    SWEET_DESSERT,
    CurrentCycleInfo,
    CycleWindow,
    MealRecord,
    QuotaStatus,
    is_sweet_dessert,
)
from mealcycle.domain.repositories import MealRepository
from mealcycle.infrastructure import log_utils

Instant = date | datetime | str


class MealHistoryService:
    """Combine resolved settings with the cycle engine for one user at a time."""

    def __init__(
        self,
        resolver: SettingsResolver,
        meal_store: Optional[MealRepository] = None,
        cycle_service: Optional[CycleService] = None,
    ) -> None:
        self._resolver = resolver
        self._meal_store = meal_store
        self._cycles = cycle_service or CycleService()

    @property
    def resolver(self) -> SettingsResolver:
        return self._resolver

    def load_records(self, user_id: str) -> List[MealRecord]:
        if self._meal_store is None:
            raise MealStoreError("No meal store configured.")
        return list(self._meal_store.list_meals(user_id))

    def cycle_history(
        self,
        user_id: str,
        records: Iterable[MealRecord],
        reference: Optional[Instant],
    ) -> List[CycleWindow]:
        """Non-empty cycles for ``records``, newest first.

        ``reference`` fixes the "as of" instant used by shared and exported
        views; ``None`` anchors on the newest record.
        """
        config = self._resolver.resolve(user_id)
        report = self._cycles.partition(records, config, reference=reference)
        if report.excluded_unparseable:
            log_utils.warn(
                f"Excluded {report.excluded_unparseable} meals with unparseable dates "
                f"from the history of user {user_id}.",
                tag="CYCLE",
            )
        if report.excluded_after_reference:
            log_utils.info(
                f"Left out {report.excluded_after_reference} meals dated after {reference} "
                f"for user {user_id}.",
                tag="CYCLE",
            )
        return list(report.windows)

    def current_cycle(self, user_id: str, now: Instant) -> CurrentCycleInfo:
        return self._cycles.locate(self._resolver.resolve(user_id), now)

    def quota_status(
        self,
        user_id: str,
        records: Iterable[MealRecord],
        now: Instant,
        predicate: Callable[[MealRecord], Any] = is_sweet_dessert,
    ) -> QuotaStatus:
        return self._cycles.count(records, self._resolver.resolve(user_id), predicate, now)

    def is_option_available(
        self,
        user_id: str,
        meal_type: str,
        records: Iterable[MealRecord],
        now: Instant,
    ) -> bool:
        """Whether the logging form should offer ``meal_type`` right now."""

        if meal_type != SWEET_DESSERT.value:
            return True
        return not self.quota_status(user_id, records, now).is_limit_reached


__all__ = ["MealHistoryService"]
