"""Formatos de fecha estables (sin depender del locale del sistema)."""

from __future__ import annotations

from datetime import date, datetime

from battery_log.model import Reading

DATE_FORMAT_VERSION = 1

EXPORT_PREFIX = "battery-log-"

_MONTHS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def month_day(value: date) -> str:
    """Return e.g. 'Oct 19'."""
    return f"{_MONTHS[value.month - 1]} {value.day}"


def short_date(value: date) -> str:
    """Return the export date, e.g. 'Oct 19, 2026'."""
    return f"{month_day(value)}, {value.year}"


def chart_label(reading: Reading) -> str:
    """Etiqueta del grafico: fecha corta + momento del dia."""
    return f"{month_day(reading.timestamp)} {reading.time_of_day.value}"


def export_filename(day: date | datetime, suffix: str = ".csv") -> str:
    """Nombre del archivo exportado: battery-log-YYYY-MM-DD.csv."""
    return f"{EXPORT_PREFIX}{day.strftime('%Y-%m-%d')}{suffix}"
