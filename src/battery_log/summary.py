"""Derivaciones puras del registro: resumen, serie para grafico y exportacion."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import pandas as pd
from dateutil import tz

from battery_log.formatting import chart_label, short_date
from battery_log.model import ChartPoint, Reading, Summary

EXPORT_HEADER: tuple[str, ...] = ("Date", "Time of Day", "Battery Level")

CADENCE = timedelta(hours=12)
LAST_WEEK = timedelta(days=7)
DEFAULT_CHART_POINTS = 14

_LOCAL_TZ = tz.tzlocal()

_FRAME_COLUMNS = ["id", "timestamp", "time_of_day", "level"]


def readings_to_frame(readings: Sequence[Reading]) -> pd.DataFrame:
    """Convert readings to a DataFrame, keeping log order.

    Timestamps are normalized to UTC so readings saved under different
    offsets compare correctly.
    """
    if not readings:
        return pd.DataFrame(columns=_FRAME_COLUMNS)
    df = pd.DataFrame(
        {
            "id": [r.id for r in readings],
            "timestamp": pd.to_datetime(
                [_as_utc(r.timestamp) for r in readings], utc=True
            ),
            "time_of_day": [r.time_of_day.value for r in readings],
            "level": [r.level for r in readings],
        }
    )
    return df.reset_index(drop=True)


def round_half_up(value: float) -> int:
    """Redondea .5 hacia arriba (60.5 -> 61, 60.4 -> 60)."""
    return int(math.floor(value + 0.5))


def summarize(readings: Sequence[Reading], now: datetime) -> Summary | None:
    """Compute totals and averages for the log.

    Args:
        readings: Log in newest-first order.
        now: Reference instant for the last-week window and cadence.

    Returns:
        Summary, or None when the log is empty.
    """
    if not readings:
        return None

    df = readings_to_frame(readings)
    levels = df["level"]
    week_start = _utc(now) - LAST_WEEK
    last_week = levels[df["timestamp"] > week_start]

    return Summary(
        total_entries=len(df),
        average_battery=round_half_up(float(levels.mean())),
        last_week_average=(
            round_half_up(float(last_week.mean())) if not last_week.empty else 0
        ),
        lowest_recorded=int(levels.min()),
        missing_entries=missing_entries(readings, now),
    )


def missing_entries(readings: Sequence[Reading], now: datetime) -> int:
    """Expected minus actual entries for a twice-daily cadence.

    The anchor is the oldest reading by insertion (last item of the log).
    Negative values mean more entries than the cadence predicts.
    """
    total = len(readings)
    if total < 2:
        return 0
    first = _utc(readings[-1].timestamp)
    expected = (_utc(now) - first) // CADENCE + 1
    return int(expected - total)


def chart_series(
    readings: Sequence[Reading], max_points: int = DEFAULT_CHART_POINTS
) -> list[ChartPoint]:
    """Most recent readings in chronological order, ready to plot."""
    if max_points <= 0:
        return []
    recent = list(readings[:max_points])
    recent.reverse()
    return [ChartPoint(label=chart_label(r), level=r.level) for r in recent]


def export_text(readings: Sequence[Reading]) -> str:
    """Render the log as delimited text (header + one row per reading).

    Rows follow log order. Fields containing the delimiter (the short date
    does) are quoted; there is no trailing newline.
    """
    rows = [
        {
            EXPORT_HEADER[0]: short_date(r.timestamp),
            EXPORT_HEADER[1]: r.time_of_day.value,
            EXPORT_HEADER[2]: r.level,
        }
        for r in readings
    ]
    df = pd.DataFrame(rows, columns=list(EXPORT_HEADER))
    text = df.to_csv(index=False, lineterminator="\n")
    return text.rstrip("\n")


def _utc(value: datetime) -> pd.Timestamp:
    return pd.Timestamp(_as_utc(value))


def _as_utc(value: datetime) -> datetime:
    # Naive values are local wall time, as in storage.
    if value.tzinfo is None:
        value = value.replace(tzinfo=_LOCAL_TZ)
    return value.astimezone(timezone.utc)
