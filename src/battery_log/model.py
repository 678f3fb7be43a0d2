"""Modelos tipados para lecturas de bateria y resumenes derivados."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NamedTuple


class TimeOfDay(str, Enum):
    """Moment of the day a reading belongs to (chosen by the user)."""

    MORNING = "morning"
    EVENING = "evening"


@dataclass(frozen=True)
class Reading:
    """One battery percentage measurement (timestamped)."""

    id: int
    timestamp: datetime
    time_of_day: TimeOfDay
    level: int


@dataclass(frozen=True)
class Summary:
    """Rolling statistics computed from the whole log."""

    total_entries: int
    average_battery: int
    last_week_average: int
    lowest_recorded: int
    missing_entries: int


class ChartPoint(NamedTuple):
    """Chart-ready point: label and battery level."""

    label: str
    level: int
