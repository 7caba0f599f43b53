"""Custom exception hierarchy for the mealcycle application layer."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for application-level failures."""


class SettingsStoreError(ApplicationError):
    """Raised when user settings cannot be read from or written to the store."""


class MealStoreError(ApplicationError):
    """Raised when the meal export cannot be loaded."""


__all__ = [
    "ApplicationError",
    "SettingsStoreError",
    "MealStoreError",
]
