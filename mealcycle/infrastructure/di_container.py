# mealcycle/infrastructure/di_container.py
"""Dependency injection container for mealcycle services."""
from __future__ import annotations

import inspect
from functools import lru_cache
from typing import Any, Callable, Dict, Type

from mealcycle.application.history_service import MealHistoryService
from mealcycle.application.settings_service import SettingsCache, SettingsResolver
from mealcycle.config import settings as app_settings
from mealcycle.domain.cycle_service import CycleService
from mealcycle.domain.repositories import MealRepository
from mealcycle.domain.settings_store import SettingsStore
from mealcycle.infrastructure.meal_store import JsonFileMealStore
from mealcycle.infrastructure.settings_store import JsonFileSettingsStore

ServiceType = Type[Any]
Factory = Callable[["Container"], Any]


class Container:
    """Minimal service container supporting factories and instances."""

    def __init__(self) -> None:
        self._factories: Dict[ServiceType, Factory] = {}
        self._instances: Dict[ServiceType, Any] = {}

    def register(
        self,
        service: ServiceType,
        *,
        factory: Factory | None = None,
        instance: Any | None = None,
        singleton: bool = False,
    ) -> None:
        if instance is not None:
            self._instances[service] = instance
            self._factories.pop(service, None)
            return
        if factory is None:
            raise ValueError("Either factory or instance must be provided.")
        if singleton:
            factory = _memoize(service, factory)
        self._factories[service] = factory
        self._instances.pop(service, None)

    def resolve(self, service: ServiceType) -> Any:
        if service in self._instances:
            return self._instances[service]
        try:
            factory = self._factories[service]
        except KeyError as exc:
            raise KeyError(f"No provider registered for {service!r}") from exc
        return factory(self)


def _memoize(service: ServiceType, factory: Factory) -> Factory:
    def _build_once(container: Container) -> Any:
        value = factory(container)
        container.register(service, instance=value)
        return value

    return _build_once


def _register_defaults(container: Container) -> None:
    """Register the production service graph with the container."""
    container.register(
        SettingsStore,
        factory=lambda _c: JsonFileSettingsStore(app_settings.SETTINGS_STORE_PATH),
        singleton=True,
    )
    # One cache per container so every resolver built from it shares entries.
    container.register(
        SettingsCache,
        factory=lambda _c: SettingsCache(app_settings.SETTINGS_CACHE_TTL_SECONDS),
        singleton=True,
    )
    container.register(
        SettingsResolver,
        factory=lambda c: SettingsResolver(c.resolve(SettingsStore), c.resolve(SettingsCache)),
        singleton=True,
    )
    container.register(CycleService, factory=lambda _c: CycleService(tz=app_settings.timezone))
    if app_settings.MEALS_STORE_PATH is not None:
        container.register(
            MealRepository,
            factory=lambda _c: JsonFileMealStore(app_settings.MEALS_STORE_PATH),
        )
    container.register(
        MealHistoryService,
        factory=lambda c: MealHistoryService(
            resolver=c.resolve(SettingsResolver),
            meal_store=_optional(c, MealRepository),
            cycle_service=c.resolve(CycleService),
        ),
    )


def _optional(container: Container, service: ServiceType) -> Any:
    try:
        return container.resolve(service)
    except KeyError:
        return None


def _wrap_override(provider: Any) -> Factory:
    if inspect.isfunction(provider) or inspect.ismethod(provider):
        signature = inspect.signature(provider)
        if len(signature.parameters) == 0:
            return lambda _c, fn=provider: fn()
        return lambda c, fn=provider: fn(c)
    if isinstance(provider, type):
        return lambda _c, cls=provider: cls()
    return lambda _c, value=provider: value


def build_container(overrides: Dict[ServiceType, Any] | None = None) -> Container:
    """Create a new container with optional dependency overrides."""
    container = Container()
    _register_defaults(container)

    if overrides:
        for service, provider in overrides.items():
            factory = _wrap_override(provider)
            if isinstance(provider, type) or inspect.isfunction(provider) or inspect.ismethod(provider):
                container.register(service, factory=factory)
            else:
                container.register(service, instance=factory(container))

    return container


@lru_cache(maxsize=1)
def get_container() -> Container:
    """Return a cached container instance for application use."""
    return build_container()


__all__ = ["Container", "build_container", "get_container"]
