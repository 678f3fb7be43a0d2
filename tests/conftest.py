from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

import pytest
from dateutil import tz

from battery_log.model import Reading

T0 = datetime(2026, 10, 19, 8, 0, tzinfo=tz.UTC)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


class MemoryStorage:
    """In-memory LogStorage that records every save."""

    def __init__(self, initial: Sequence[Reading] = ()) -> None:
        self.saved: list[list[Reading]] = []
        self._data = list(initial)

    def load(self) -> list[Reading]:
        return list(self._data)

    def save(self, readings: Sequence[Reading]) -> None:
        self._data = list(readings)
        self.saved.append(list(readings))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory() -> MemoryStorage:
    return MemoryStorage()
