"""Read meal records from a JSON export of the hosted meal table."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

from mealcycle.application.exceptions import MealStoreError
from mealcycle.domain.entities import MealRecord
from mealcycle.domain.repositories import MealRepository
from mealcycle.infrastructure.log_utils import log_message


def _rows_to_records(rows: Any, source: Path) -> List[MealRecord]:
    if not isinstance(rows, list):
        raise MealStoreError(f"Expected a list of meals in {source}.")
    records: List[MealRecord] = []
    skipped = 0
    for row in rows:
        if not isinstance(row, dict):
            skipped += 1
            continue
        records.append(MealRecord.from_mapping(row))
    if skipped:
        log_message(f"Skipped {skipped} non-object meal rows in {source}", "WARN", tag="STORE")
    return records


class JsonFileMealStore(MealRepository):
    """Meals stored as JSON.

    The document is either a flat list of meal rows (a single user's export)
    or an object mapping user ids to lists of rows.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def _load(self) -> Any:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError as exc:
            raise MealStoreError(f"Meal file {self._path} not found.") from exc
        except (OSError, ValueError) as exc:
            raise MealStoreError(f"Failed to read meals from {self._path}: {exc}") from exc

    def list_meals(self, user_id: Optional[str] = None) -> List[MealRecord]:
        payload = self._load()
        if isinstance(payload, dict):
            if user_id is None:
                raise MealStoreError(f"{self._path} holds several users; a user id is required.")
            rows = payload.get(user_id, [])
        elif isinstance(payload, list) and user_id is not None:
            # Rows without a user_id belong to whoever exported the file.
            rows = [
                row for row in payload if not isinstance(row, dict) or row.get("user_id") in (None, user_id)
            ]
        else:
            rows = payload
        return _rows_to_records(rows, self._path)


def load_meal_records(path: Path | str, user_id: Optional[str] = None) -> List[MealRecord]:
    """Convenience wrapper around :class:`JsonFileMealStore`."""

    return JsonFileMealStore(path).list_meals(user_id)


__all__ = ["JsonFileMealStore", "load_meal_records"]
