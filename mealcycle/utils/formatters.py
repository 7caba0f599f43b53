"""Display helpers for cycle headings and day labels (Spanish locale)."""

from __future__ import annotations

from datetime import date

DAYS_ES = ["Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"]
MONTHS_ES = [
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
]
MONTHS_SHORT_ES = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]


def weekday_name(index: int) -> str:
    """Return the weekday name for ``index`` (0 = Sunday), ``Lunes`` when out of range."""

    if isinstance(index, int) and 0 <= index < len(DAYS_ES):
        return DAYS_ES[index]
    return "Lunes"


def short_date(day: date) -> str:
    return f"{day.day} {MONTHS_SHORT_ES[day.month - 1]}"


def day_label(day: date) -> str:
    """``Lunes 8 enero`` style heading for a day bucket."""

    return f"{weekday_name(day.isoweekday() % 7)} {day.day} {MONTHS_ES[day.month - 1]}"


def cycle_range_label(cycle_number: int, start: date, end: date) -> str:
    return f"Ciclo {cycle_number}: {short_date(start)} - {short_date(end)}"
