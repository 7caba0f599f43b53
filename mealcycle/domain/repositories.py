from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from mealcycle.domain.entities import MealRecord


class MealRepository(ABC):
    """Abstract interface for reading a user's logged meals."""

    @abstractmethod
    def list_meals(self, user_id: str) -> List[MealRecord]:
        """Return every meal recorded for ``user_id``, in no particular order."""
