"""Persistencia del registro (JSON / SQLite) y de la configuracion de la app."""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser
from dateutil import tz

from battery_log.errors import CorruptStoreError
from battery_log.model import Reading, TimeOfDay
from battery_log.summary import DEFAULT_CHART_POINTS

_LOGGER = logging.getLogger(__name__)

_LOCAL_TZ = tz.tzlocal()

LOG_KEY = "batteryLogs"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    export_dir: str = ""
    chart_points: int = DEFAULT_CHART_POINTS


class LogStorage(ABC):
    """Where the full log is read from at start and rewritten after appends."""

    @abstractmethod
    def load(self) -> list[Reading]:
        """Return the persisted log (newest first).

        Raises:
            CorruptStoreError: If the persisted content cannot be decoded.
        """

    @abstractmethod
    def save(self, readings: Sequence[Reading]) -> None:
        """Replace the persisted log with ``readings``."""


class JsonFileStore(LogStorage):
    """Log stored as a JSON array in a single file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Reading]:
        if not self._path.exists():
            _LOGGER.debug("No log file at %s", self._path)
            return []
        return deserialize_log(self._path.read_text(encoding="utf-8"))

    def save(self, readings: Sequence[Reading]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(serialize_log(readings), encoding="utf-8")
        _LOGGER.debug("Saved %d readings to %s", len(readings), self._path)


class SQLiteStore(LogStorage):
    """Repositorio SQLite clave/valor: registro serializado + configuracion."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def load(self) -> list[Reading]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (LOG_KEY,)
            ).fetchone()
        if row is None:
            _LOGGER.debug("No %s entry in %s", LOG_KEY, self._db_path)
            return []
        return deserialize_log(row["value"])

    def save(self, readings: Sequence[Reading]) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv_store(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                (LOG_KEY, serialize_log(readings)),
            )
            conn.commit()
        _LOGGER.debug("Saved %d readings to %s", len(readings), self._db_path)

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        defaults = AppConfig()
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        return AppConfig(
            export_dir=values.get("export_dir", defaults.export_dir),
            chart_points=_parse_positive_int(
                values.get("chart_points"), defaults.chart_points
            ),
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {
            "export_dir": config.export_dir,
            "chart_points": str(config.chart_points),
        }
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()


def serialize_log(readings: Sequence[Reading]) -> str:
    """Serialize the log as a JSON array of records (log order kept)."""
    records = [
        {
            "id": r.id,
            "date": _format_timestamp(r.timestamp),
            "timeOfDay": r.time_of_day.value,
            "batteryLevel": r.level,
        }
        for r in readings
    ]
    return json.dumps(records, ensure_ascii=True)


def deserialize_log(text: str) -> list[Reading]:
    """Parse a serialized log.

    Args:
        text: JSON text as written by :func:`serialize_log`.

    Returns:
        Readings in stored order. Empty text yields an empty log.

    Raises:
        CorruptStoreError: If the text is not a valid serialized log.
    """
    if not text.strip():
        return []
    try:
        raw: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptStoreError(f"Registro guardado no es JSON valido: {exc}") from exc
    if not isinstance(raw, list):
        raise CorruptStoreError("El registro guardado debe ser una lista")
    return [_item_to_reading(item) for item in raw]


def _item_to_reading(item: Any) -> Reading:
    """Convierte un item dict en Reading; CorruptStoreError si es invalido."""
    if not isinstance(item, dict):
        raise CorruptStoreError(f"Entrada invalida: {item!r}")
    try:
        return Reading(
            id=int(item["id"]),
            timestamp=_parse_timestamp(item["date"]),
            time_of_day=TimeOfDay(item["timeOfDay"]),
            level=int(item["batteryLevel"]),
        )
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise CorruptStoreError(f"Entrada invalida {item!r}: {exc}") from exc


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"date must be a string, got {type(value).__name__}")
    dt = date_parser.isoparse(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=_LOCAL_TZ)
    return dt.astimezone(_LOCAL_TZ)


def _format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with milliseconds, e.g. 2026-10-19T08:00:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=_LOCAL_TZ)
    text = value.astimezone(tz.UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def _parse_positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default
