"""Resolution and caching of per-user cycle settings."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional, Tuple

from mealcycle.application.exceptions import SettingsStoreError
from mealcycle.config import settings as app_settings
from mealcycle.domain.configuration import DEFAULT_CYCLE_CONFIG, CycleConfig, sanitize_config
from mealcycle.domain.settings_store import SettingsStore
from mealcycle.infrastructure import log_utils

DEFAULT_TTL_SECONDS = 5 * 60


class SettingsCache:
    """In-memory cache of resolved configs keyed by user id.

    Entries older than ``ttl_seconds`` are treated as missing. A single lock
    guards the map so concurrent sessions read and write whole entries.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, CycleConfig]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, user_id: str) -> Optional[CycleConfig]:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            stored_at, config = entry
            if self._clock() - stored_at >= self._ttl:
                del self._entries[user_id]
                return None
            return config

    def set(self, user_id: str, config: CycleConfig) -> None:
        with self._lock:
            self._entries[user_id] = (self._clock(), config)

    def invalidate(self, user_id: str) -> None:
        with self._lock:
            self._entries.pop(user_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SettingsResolver:
    """Resolves a user's effective :class:`CycleConfig`.

    Resolution always produces a usable config: a store failure or a missing
    row falls back to the defaults without raising. The resolved value is
    cached until it expires or :meth:`invalidate` is called.
    """

    def __init__(self, store: SettingsStore, cache: Optional[SettingsCache] = None) -> None:
        self._store = store
        self._cache = cache if cache is not None else SettingsCache(app_settings.SETTINGS_CACHE_TTL_SECONDS)

    @property
    def cache(self) -> SettingsCache:
        return self._cache

    def resolve(self, user_id: str) -> CycleConfig:
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        try:
            row = self._store.read_settings(user_id)
        except Exception as exc:
            log_utils.warn(
                f"Settings lookup failed for user {user_id}: {exc}; using defaults.",
                tag="SETTINGS",
            )
            row = None

        if row:
            config = sanitize_config(CycleConfig.from_mapping(row))
        else:
            log_utils.debug(f"No stored settings for user {user_id}; using defaults.", tag="SETTINGS")
            config = DEFAULT_CYCLE_CONFIG

        self._cache.set(user_id, config)
        return config

    def invalidate(self, user_id: str) -> None:
        """Drop the cached config so the next resolve reads the store again."""
        self._cache.invalidate(user_id)

    def save(self, user_id: str, config: CycleConfig) -> CycleConfig:
        """Clamp ``config``, write it through the store and drop the cache entry.

        Raises:
            SettingsStoreError: the store rejected the write.
        """
        clamped = sanitize_config(config)
        try:
            self._store.save_settings(user_id, clamped.to_mapping())
        except SettingsStoreError:
            raise
        except Exception as exc:
            raise SettingsStoreError(f"Could not save settings for user {user_id}: {exc}") from exc
        finally:
            self.invalidate(user_id)

        log_utils.info(
            f"Saved settings for user {user_id}: {clamped.cycle_length_days}-day cycles "
            f"starting on weekday {clamped.start_weekday}, quota {clamped.quota_limit}.",
            tag="SETTINGS",
        )
        return clamped

    # Names used by the settings screen.
    resolve_settings = resolve
    invalidate_settings = invalidate


__all__ = ["DEFAULT_TTL_SECONDS", "SettingsCache", "SettingsResolver"]
