from __future__ import annotations

from datetime import timedelta

from battery_log.app import preview_text
from battery_log.log_store import LogStore
from conftest import FakeClock, MemoryStorage


def test_preview_text_empty_log(clock: FakeClock) -> None:
    store = LogStore(MemoryStorage(), now=clock)
    assert preview_text(store, 14) == "Sin registros."


def test_preview_text_shows_summary_and_recent_points(clock: FakeClock) -> None:
    store = LogStore(MemoryStorage(), now=clock)
    store.append("morning", 90)
    clock.advance(timedelta(hours=12))
    store.append("evening", 30)

    lines = preview_text(store, 1).splitlines()
    assert lines[0] == "Total de registros:   2"
    assert lines[5] == ""
    assert len(lines) == 7
    assert lines[6].startswith("Oct 19 evening")
    assert lines[6].endswith(" 30%")
