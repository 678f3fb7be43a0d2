from __future__ import annotations

from datetime import datetime, timedelta

from dateutil import tz

from battery_log.model import ChartPoint, Reading, TimeOfDay
from battery_log.summary import (
    chart_series,
    export_text,
    missing_entries,
    readings_to_frame,
    round_half_up,
    summarize,
)
from conftest import T0


def _reading(hours: float, level: int, moment: str = "morning") -> Reading:
    ts = T0 + timedelta(hours=hours)
    return Reading(
        id=int(ts.timestamp() * 1000),
        timestamp=ts,
        time_of_day=TimeOfDay(moment),
        level=level,
    )


def test_readings_to_frame_keeps_log_order_and_normalizes_utc() -> None:
    plus_three = tz.tzoffset(None, 3 * 3600)
    newer = Reading(
        id=2,
        timestamp=datetime(2026, 10, 19, 12, 0, tzinfo=plus_three),
        time_of_day=TimeOfDay.EVENING,
        level=10,
    )
    older = _reading(0, 90)
    df = readings_to_frame([newer, older])

    assert list(df["id"]) == [2, older.id]
    assert list(df["level"]) == [10, 90]
    assert str(df["timestamp"].dt.tz) == "UTC"
    assert df["timestamp"].iloc[0].hour == 9


def test_readings_to_frame_empty() -> None:
    df = readings_to_frame([])
    assert df.empty
    assert list(df.columns) == ["id", "timestamp", "time_of_day", "level"]


def test_round_half_up() -> None:
    assert round_half_up(60.5) == 61
    assert round_half_up(60.49) == 60
    assert round_half_up(2.5) == 3
    assert round_half_up(0.0) == 0


def test_summarize_empty_log_is_none() -> None:
    assert summarize([], T0) is None


def test_summarize_averages_and_lowest() -> None:
    log = [_reading(12, 61, "evening"), _reading(0, 60)]
    summary = summarize(log, T0 + timedelta(hours=12))

    assert summary is not None
    assert summary.total_entries == 2
    assert summary.average_battery == 61
    assert summary.last_week_average == 61
    assert summary.lowest_recorded == 60
    assert summary.missing_entries == 0


def test_last_week_average_only_counts_recent_readings() -> None:
    log = [_reading(240, 90), _reading(0, 20)]
    summary = summarize(log, T0 + timedelta(hours=240))

    assert summary is not None
    assert summary.average_battery == 55
    assert summary.last_week_average == 90


def test_last_week_window_is_strict() -> None:
    log = [_reading(0, 50)]
    summary = summarize(log, T0 + timedelta(days=7))

    assert summary is not None
    assert summary.last_week_average == 0


def test_missing_entries_three_readings_twenty_hours_apart() -> None:
    log = [_reading(40, 30), _reading(20, 60), _reading(0, 90)]

    # floor(40h / 12h) + 1 = 4 expected, 3 logged
    assert missing_entries(log, T0 + timedelta(hours=40)) == 1
    # floor(48h / 12h) + 1 = 5 expected
    assert missing_entries(log, T0 + timedelta(hours=48)) == 2


def test_missing_entries_can_be_negative() -> None:
    log = [_reading(2, 70), _reading(1, 80), _reading(0, 90)]
    assert missing_entries(log, T0 + timedelta(hours=2)) == -2


def test_missing_entries_anchors_on_last_item_not_oldest_timestamp() -> None:
    # Insertion order is kept even if the clock went backwards.
    log = [_reading(0, 70), _reading(24, 80)]
    assert missing_entries(log, T0 + timedelta(hours=24)) == -1


def test_missing_entries_needs_two_readings() -> None:
    assert missing_entries([], T0) == 0
    assert missing_entries([_reading(0, 50)], T0 + timedelta(days=30)) == 0


def test_chart_series_is_chronological_and_bounded() -> None:
    log = [_reading(12 * i, i) for i in reversed(range(20))]
    points = chart_series(log, 14)

    assert len(points) == 14
    assert [p.level for p in points] == list(range(6, 20))
    assert points[0] == ChartPoint(label="Oct 22 morning", level=6)


def test_chart_series_short_and_empty_logs() -> None:
    log = [_reading(12, 40, "evening"), _reading(0, 80)]
    assert chart_series(log) == [
        ChartPoint("Oct 19 morning", 80),
        ChartPoint("Oct 19 evening", 40),
    ]
    assert chart_series([]) == []
    assert chart_series(log, 0) == []


def test_export_text_quotes_dates_and_keeps_log_order() -> None:
    log = [_reading(36, 40, "evening"), _reading(0, 80)]
    assert export_text(log) == (
        "Date,Time of Day,Battery Level\n"
        '"Oct 20, 2026",evening,40\n'
        '"Oct 19, 2026",morning,80'
    )


def test_export_text_empty_log_is_header_only() -> None:
    assert export_text([]) == "Date,Time of Day,Battery Level"
