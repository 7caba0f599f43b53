"""
Centralised config for the meal cycle engine.

This module consolidates all configuration settings, loading values from
environment variables (or a ``.env`` file) and providing typed, validated
access to them through a singleton `settings` object.
"""

import os
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE = Path(__file__).resolve()


def _discover_project_root(config_file: Path) -> tuple[Path, Path]:
    """Return a project root and env file path without assuming ``.env`` exists.

    Deployments keep a ``.env`` file alongside the repository, but it is absent
    in development and CI. Walk the parents looking for one and fall back to
    the repository root (detected via common project markers) when missing.
    """

    parents = list(config_file.parents)

    for parent in parents:
        env_file = parent / ".env"
        if env_file.exists():
            return parent, env_file

    for marker in ("pyproject.toml", ".git"):
        for parent in parents:
            if (parent / marker).exists():
                return parent, parent / ".env"

    fallback_root = parents[1] if len(parents) > 1 else parents[0]
    return fallback_root, fallback_root / ".env"


PROJECT_ROOT, ENV_FILE_PATH = _discover_project_root(CONFIG_FILE)


T = TypeVar("T")


class Settings(BaseSettings):
    """
    Centralised and validated application settings.
    """
    model_config = SettingsConfigDict(
        env_file=ENV_FILE_PATH, env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # --- CORE APP SETTINGS ---
    PROJECT_ROOT: Path = PROJECT_ROOT
    ENVIRONMENT: str = "development"

    # --- LOGGING ---
    MEALCYCLE_LOG_LEVEL: str = "INFO"
    MEALCYCLE_LOG_TO_CONSOLE: bool = True
    MEALCYCLE_LOG_DIR: Optional[Path] = None

    # --- SETTINGS RESOLVER ---
    SETTINGS_CACHE_TTL_SECONDS: float = Field(300.0, ge=0)

    # --- LOCAL STORES (JSON exports of the hosted backend) ---
    SETTINGS_STORE_PATH: Path = Path.home() / ".mealcycle" / "user_settings.json"
    MEALS_STORE_PATH: Optional[Path] = None

    # --- CALENDAR ---
    LOCAL_TIMEZONE: Optional[str] = None

    @field_validator("LOCAL_TIMEZONE")
    @classmethod
    def _check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value in (None, ""):
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value

    @property
    def timezone(self) -> Optional[ZoneInfo]:
        """Zone used to turn aware timestamps into local calendar days."""
        if not self.LOCAL_TIMEZONE:
            return None
        return ZoneInfo(self.LOCAL_TIMEZONE)

    # --- DYNAMIC FILE PATHS ---
    @property
    def log_path(self) -> Path:
        """
        Path for the main application log file.

        Fail-safe: if the configured directory is not writable, fall back to a
        local user directory and never raise.
        """
        try:
            log_dir = self.MEALCYCLE_LOG_DIR or Path("/var/log/mealcycle")
            if log_dir.exists() and os.access(log_dir, os.W_OK):
                return log_dir / "mealcycle.log"
            raise PermissionError(f"No access to {log_dir}")
        except Exception as e:
            fallback_dir = Path.home() / "mealcycle_logs"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback_path = fallback_dir / "mealcycle.log"
            print(f"[mealcycle] Falling back to {fallback_path} due to: {e}")
            return fallback_path


# Create a single, importable instance of the settings for the entire application.
settings = Settings()


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _coerce_type(raw: str, template: Any) -> Any:
    if isinstance(template, bool):
        return _to_bool(raw)
    if isinstance(template, int) and not isinstance(template, bool):
        return int(raw)
    if isinstance(template, float):
        return float(raw)
    if isinstance(template, Path):
        return Path(raw)
    return raw


def get_env(
    name: str,
    default: T | None = None,
    *,
    parser: Callable[[str], T] | None = None,
) -> T | Any | None:
    """Return a configuration value resolving environment overrides consistently.

    The resolution order is:

    1. Explicit environment variable overrides at runtime.
    2. Typed values provided by the Pydantic ``settings`` object.
    3. The supplied ``default`` value.

    When an override is read directly from :mod:`os.environ`, ``parser`` (or the
    inferred type from ``settings``) is used to coerce the string into the
    expected type.
    """

    if name in os.environ:
        raw_value = os.environ[name]
        if parser is not None:
            return parser(raw_value)
        if hasattr(settings, name):
            template = getattr(settings, name)
            try:
                return _coerce_type(raw_value, template)
            except (TypeError, ValueError):
                return template
        return raw_value

    if hasattr(settings, name):
        value = getattr(settings, name)
        return default if value is None else value

    return default
