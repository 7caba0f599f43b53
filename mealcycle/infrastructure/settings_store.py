"""Infrastructure implementations of user settings persistence."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from mealcycle.application.exceptions import SettingsStoreError
from mealcycle.domain.settings_store import SettingsStore
from mealcycle.infrastructure.log_utils import log_message


class InMemorySettingsStore(SettingsStore):
    """Keep settings rows in a dictionary; used by tests and the CLI defaults."""

    def __init__(self, rows: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._rows: Dict[str, Dict[str, Any]] = {key: dict(value) for key, value in (rows or {}).items()}
        self.reads = 0

    def read_settings(self, user_id: str) -> Optional[Mapping[str, Any]]:
        self.reads += 1
        row = self._rows.get(user_id)
        return dict(row) if row is not None else None

    def save_settings(self, user_id: str, row: Mapping[str, Any]) -> None:
        self._rows[user_id] = dict(row)


class JsonFileSettingsStore(SettingsStore):
    """Persist every user's settings row in one JSON document keyed by user id."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, Dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            raise SettingsStoreError(f"Failed to read settings from {self._path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise SettingsStoreError(f"Settings file {self._path} does not contain an object.")
        return payload

    def read_settings(self, user_id: str) -> Optional[Mapping[str, Any]]:
        with self._lock:
            row = self._read_all().get(user_id)
        if row is not None and not isinstance(row, dict):
            log_message(f"Ignoring malformed settings row for user {user_id} in {self._path}", "WARN", tag="SETTINGS")
            return None
        return row

    def save_settings(self, user_id: str, row: Mapping[str, Any]) -> None:
        with self._lock:
            payload = self._read_all()
            payload[user_id] = dict(row)
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._path.open("w", encoding="utf-8") as handle:
                    json.dump(payload, handle, indent=2, sort_keys=True)
            except OSError as exc:
                raise SettingsStoreError(f"Failed to write settings to {self._path}: {exc}") from exc


__all__ = ["InMemorySettingsStore", "JsonFileSettingsStore"]
