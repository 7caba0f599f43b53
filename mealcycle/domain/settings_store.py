"""Domain-level protocol for reading and writing per-user cycle settings."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class SettingsStore(Protocol):
    """Abstraction over the persisted ``user_settings`` rows."""

    def read_settings(self, user_id: str) -> Optional[Mapping[str, Any]]:
        """Return the persisted row for ``user_id`` or ``None`` when absent."""

    def save_settings(self, user_id: str, row: Mapping[str, Any]) -> None:
        """Persist ``row`` for ``user_id``, replacing any previous value."""


__all__ = ["SettingsStore"]
