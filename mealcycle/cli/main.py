# (Functional) **Command-line interface** (Typer app) exposing the cycle engine.

"""
Main command-line interface for mealcycle.

Reads a JSON export of logged meals and shows the cycle history, where today
falls in the current cycle, and the remaining sweet-dessert quota. The
``settings`` sub-commands edit the per-user cycle configuration.
"""
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.table import Table
from typer import Argument, Option
from typing_extensions import Annotated

from mealcycle.application.exceptions import ApplicationError
from mealcycle.domain.configuration import CycleConfig
from mealcycle.infrastructure import log_utils
from mealcycle.infrastructure.meal_store import load_meal_records
from mealcycle.utils import converters
from mealcycle.utils.formatters import weekday_name

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from mealcycle.infrastructure.di_container import Container

DEFAULT_USER = "local"

console = Console()

app = typer.Typer(
    name="mealcycle",
    help="Cycle history and per-cycle quotas for logged meals.",
    add_completion=False,
)
settings_app = typer.Typer(help="Show or edit a user's cycle settings.", add_completion=False)
app.add_typer(settings_app, name="settings")


def _container() -> "Container":
    """Lazy import helper so importing the CLI never touches the stores."""
    from mealcycle.infrastructure.di_container import get_container

    return get_container()


def _history_service():
    from mealcycle.application.history_service import MealHistoryService

    return _container().resolve(MealHistoryService)


def _resolver():
    from mealcycle.application.settings_service import SettingsResolver

    return _container().resolve(SettingsResolver)


def _parse_day(value: Optional[str], option_name: str) -> Optional[date]:
    if value is None:
        return None
    parsed = converters.to_date(value)
    if parsed is None:
        typer.echo(f"Invalid {option_name} '{value}'. Use YYYY-MM-DD.", err=True)
        raise typer.Exit(code=2)
    return parsed


def _load(service, meals_file: Optional[Path], user: str):
    """Read meals from ``meals_file``, or from the configured meal store when omitted."""
    try:
        if meals_file is None:
            return service.load_records(user)
        return load_meal_records(meals_file, user)
    except ApplicationError as exc:
        log_utils.log_message(f"Could not load meals: {exc}", "ERROR", tag="CLI")
        typer.echo(f"Could not load meals: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command()
def history(
    meals_file: Annotated[
        Optional[Path], Argument(help="JSON export of logged meals. Defaults to MEALS_STORE_PATH.")
    ] = None,
    user: Annotated[str, Option("--user", help="User id whose settings apply.")] = DEFAULT_USER,
    as_of: Annotated[Optional[str], Option("--as-of", help="Partition as of this date (YYYY-MM-DD).")] = None,
) -> None:
    """Show every cycle that contains at least one meal, newest first."""
    reference = _parse_day(as_of, "--as-of")
    service = _history_service()
    records = _load(service, meals_file, user)
    windows = service.cycle_history(user, records, reference)

    if not windows:
        typer.echo("No meals logged yet.")
        raise typer.Exit(code=0)

    for window in windows:
        typer.echo(f"{window.label} ({window.record_count} meals)")
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Day")
        table.add_column("Meals")
        for day in window.days:
            if not day.records:
                continue
            table.add_row(day.label, ", ".join(record.category or "?" for record in day.records))
        console.print(table)


@app.command()
def today(
    user: Annotated[str, Option("--user", help="User id whose settings apply.")] = DEFAULT_USER,
    on: Annotated[Optional[str], Option("--on", help="Evaluate for this date instead of today.")] = None,
) -> None:
    """Show where today falls in the current cycle."""
    now = _parse_day(on, "--on") or date.today()
    info = _history_service().current_cycle(user, now)
    typer.echo(
        f"Day {info.day_in_cycle} of {info.cycle_length_days} "
        f"({info.cycle_start.isoformat()} to {info.cycle_end.isoformat()}), "
        f"{info.days_left} day{'s' if info.days_left != 1 else ''} left."
    )


@app.command()
def quota(
    meals_file: Annotated[
        Optional[Path], Argument(help="JSON export of logged meals. Defaults to MEALS_STORE_PATH.")
    ] = None,
    user: Annotated[str, Option("--user", help="User id whose settings apply.")] = DEFAULT_USER,
    on: Annotated[Optional[str], Option("--on", help="Evaluate for this date instead of today.")] = None,
) -> None:
    """Show sweet desserts used in the current cycle. Exits 1 when the limit is reached."""
    now = _parse_day(on, "--on") or date.today()
    service = _history_service()
    records = _load(service, meals_file, user)
    status = service.quota_status(user, records, now)
    typer.echo(f"Sweet desserts: {status.used}/{status.limit} used, {status.remaining} remaining.")
    if status.is_limit_reached:
        typer.echo("Limit reached for this cycle.")
        raise typer.Exit(code=1)


@settings_app.command("show")
def settings_show(
    user: Annotated[str, Option("--user", help="User id.")] = DEFAULT_USER,
) -> None:
    """Print the effective settings for a user."""
    config = _resolver().resolve(user)
    typer.echo(
        f"Cycle length: {config.cycle_length_days} days\n"
        f"Cycle start: {weekday_name(config.start_weekday)} ({config.start_weekday})\n"
        f"Sweet dessert limit: {config.quota_limit}"
    )


@settings_app.command("set")
def settings_set(
    user: Annotated[str, Option("--user", help="User id.")] = DEFAULT_USER,
    length: Annotated[Optional[int], Option("--length", help="Cycle length in days (1-30).")] = None,
    start_day: Annotated[Optional[int], Option("--start-day", help="Cycle start weekday, 0=Sunday.")] = None,
    limit: Annotated[Optional[int], Option("--limit", help="Sweet desserts per cycle (0-10).")] = None,
) -> None:
    """Save new settings; out-of-range values are clamped."""
    resolver = _resolver()
    current = resolver.resolve(user)
    requested = CycleConfig(
        cycle_length_days=current.cycle_length_days if length is None else length,
        start_weekday=current.start_weekday if start_day is None else start_day,
        quota_limit=current.quota_limit if limit is None else limit,
    )
    try:
        saved = resolver.save(user, requested)
    except ApplicationError as exc:
        log_utils.log_message(f"Saving settings failed: {exc}", "ERROR", tag="CLI")
        typer.echo(f"Could not save settings: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(
        f"Saved: {saved.cycle_length_days}-day cycles starting {weekday_name(saved.start_weekday)}, "
        f"limit {saved.quota_limit}."
    )


@settings_app.command("reset")
def settings_reset(
    user: Annotated[str, Option("--user", help="User id.")] = DEFAULT_USER,
) -> None:
    """Drop the cached settings so the next command reads the store again."""
    _resolver().invalidate(user)
    typer.echo(f"Settings cache cleared for {user}.")


if __name__ == "__main__":
    app()
