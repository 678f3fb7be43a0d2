"""LogStore: registro en memoria de lecturas de bateria con persistencia."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from dateutil import tz

from battery_log import summary as derive
from battery_log.errors import CorruptStoreError, InvalidLevelError
from battery_log.model import ChartPoint, Reading, Summary, TimeOfDay
from battery_log.storage import LogStorage
from battery_log.validation import MAX_LEVEL, MIN_LEVEL, parse_time_of_day

_LOGGER = logging.getLogger(__name__)

_LOCAL_TZ = tz.tzlocal()


def local_now() -> datetime:
    """Current local time (timezone-aware)."""
    return datetime.now(tz=_LOCAL_TZ)


class LogStore:
    """Ordered battery log, newest first.

    The log is loaded once from ``storage`` and rewritten in full after every
    append. Summary, chart series and export are recomputed on each call.
    """

    def __init__(
        self,
        storage: LogStorage,
        now: Callable[[], datetime] = local_now,
    ) -> None:
        """Create the store and load the persisted log.

        Args:
            storage: Persistence backend.
            now: Clock used for new readings and time windows.
        """
        self._storage = storage
        self._now = now
        self._readings = self._load()
        self._last_id = max((r.id for r in self._readings), default=0)

    def _load(self) -> list[Reading]:
        try:
            readings = self._storage.load()
        except CorruptStoreError as exc:
            _LOGGER.warning("Stored log is corrupt, starting empty: %s", exc)
            return []
        _LOGGER.debug("Loaded %d readings", len(readings))
        return list(readings)

    @property
    def readings(self) -> list[Reading]:
        """Copy of the log in its current order."""
        return list(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    def append(self, time_of_day: TimeOfDay | str, level: int) -> Reading:
        """Record a new reading at the front of the log and persist it.

        Args:
            time_of_day: 'morning' or 'evening'.
            level: Battery percentage, 0-100.

        Returns:
            The created reading.

        Raises:
            InvalidLevelError: If level is not an int in range.
            ValueError: If time_of_day is unknown.
        """
        if isinstance(level, bool) or not isinstance(level, int):
            raise InvalidLevelError(level)
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            raise InvalidLevelError(level)
        moment = parse_time_of_day(time_of_day)

        timestamp = self._now()
        reading = Reading(
            id=self._next_id(timestamp),
            timestamp=timestamp,
            time_of_day=moment,
            level=level,
        )
        self._readings.insert(0, reading)
        self._storage.save(self._readings)
        _LOGGER.info(
            "Logged %s reading %d%% (id=%d)", moment.value, level, reading.id
        )
        return reading

    def _next_id(self, timestamp: datetime) -> int:
        # Epoch millis, bumped when two readings land in the same millisecond.
        candidate = int(timestamp.timestamp() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def summary(self, now: datetime | None = None) -> Summary | None:
        """Statistics for the current log, or None when it is empty."""
        return derive.summarize(self._readings, now or self._now())

    def chart_series(
        self, max_points: int = derive.DEFAULT_CHART_POINTS
    ) -> list[ChartPoint]:
        return derive.chart_series(self._readings, max_points)

    def export_text(self) -> str:
        return derive.export_text(self._readings)
