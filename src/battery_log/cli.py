"""CLI para registrar, resumir y exportar el nivel de bateria."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from dateutil import tz

from battery_log.errors import InvalidLevelError
from battery_log.export import write_text_export, write_xlsx_export
from battery_log.log_store import LogStore
from battery_log.model import ChartPoint, Summary, TimeOfDay
from battery_log.storage import AppConfig, JsonFileStore, LogStorage, SQLiteStore
from battery_log.validation import parse_level

_LOCAL_TZ = tz.tzlocal()

_DEFAULT_DB = Path.home() / ".battery_log" / "battery_log.sqlite3"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Registro de bateria dos veces por dia (mañana / noche)."
    )
    backend = parser.add_mutually_exclusive_group()
    backend.add_argument(
        "--db",
        default=str(_DEFAULT_DB),
        help="Base SQLite (default: ~/.battery_log/battery_log.sqlite3).",
    )
    backend.add_argument(
        "--json",
        default=None,
        help="Usar un archivo JSON en lugar de SQLite.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Registrar una lectura.")
    add.add_argument("time_of_day", choices=[t.value for t in TimeOfDay])
    add.add_argument("level", help="Porcentaje de bateria (0-100).")

    sub.add_parser("summary", help="Mostrar estadisticas.")

    chart = sub.add_parser("chart", help="Mostrar las ultimas lecturas.")
    chart.add_argument("--points", type=int, default=None)

    export = sub.add_parser("export", help="Exportar el historial.")
    export.add_argument("--out-dir", default=None)
    export.add_argument("--xlsx", action="store_true", help="Exportar Excel.")

    config = sub.add_parser("config", help="Ver o cambiar la configuracion.")
    config.add_argument("--export-dir", default=None)
    config.add_argument("--chart-points", type=int, default=None)

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the battery log CLI.

    Returns:
        Exit code (0 on success, 2 on invalid input).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    storage = _open_storage(ns)
    config = (
        storage.load_config() if isinstance(storage, SQLiteStore) else AppConfig()
    )

    if ns.command == "config":
        return _run_config(ns, storage, config)

    store = LogStore(storage)

    if ns.command == "add":
        try:
            level = parse_level(ns.level)
        except InvalidLevelError as exc:
            print(f"Error: {exc}")
            return 2
        reading = store.append(ns.time_of_day, level)
        print(
            f"OK: {reading.time_of_day.value} {reading.level}% "
            f"({reading.timestamp:%Y-%m-%d %H:%M})"
        )
        return 0

    if ns.command == "summary":
        for line in summary_lines(store.summary()):
            print(line)
        return 0

    if ns.command == "chart":
        points = ns.points if ns.points is not None else config.chart_points
        for line in chart_lines(store.chart_series(points)):
            print(line)
        return 0

    out_dir = _export_dir(ns.out_dir, config)
    today = datetime.now(tz=_LOCAL_TZ).date()
    if ns.xlsx:
        out_path = write_xlsx_export(store, out_dir, today)
    else:
        out_path = write_text_export(store, out_dir, today)
    print(f"OK: Output: {out_path}")
    return 0


def summary_lines(summary: Summary | None) -> list[str]:
    """Lineas de texto para mostrar un resumen."""
    if summary is None:
        return ["Sin registros."]
    return [
        f"Total de registros:   {summary.total_entries}",
        f"Promedio:             {summary.average_battery}%",
        f"Promedio 7 dias:      {summary.last_week_average}%",
        f"Minimo registrado:    {summary.lowest_recorded}%",
        f"Registros faltantes:  {summary.missing_entries}",
    ]


def chart_lines(points: Sequence[ChartPoint], width: int = 40) -> list[str]:
    """Render chart points as text bars, oldest first."""
    if not points:
        return ["Sin registros."]
    label_width = max(len(p.label) for p in points)
    lines = []
    for point in points:
        filled = max(0, min(width, round(point.level * width / 100)))
        bar = "#" * filled
        lines.append(f"{point.label:<{label_width}} {bar:<{width}} {point.level}%")
    return lines


def _open_storage(ns: argparse.Namespace) -> LogStorage:
    if ns.json:
        return JsonFileStore(Path(ns.json).expanduser())
    return SQLiteStore(Path(ns.db).expanduser())


def _export_dir(out_dir: str | None, config: AppConfig) -> Path:
    if out_dir:
        return Path(out_dir).expanduser()
    if config.export_dir:
        return Path(config.export_dir).expanduser()
    return Path.cwd() / "salidas"


def _run_config(
    ns: argparse.Namespace, storage: LogStorage, config: AppConfig
) -> int:
    if not isinstance(storage, SQLiteStore):
        print("Error: la configuracion solo se guarda con --db.")
        return 2
    if ns.chart_points is not None and ns.chart_points <= 0:
        print("Error: --chart-points debe ser mayor que 0.")
        return 2
    if ns.export_dir is not None:
        config = replace(config, export_dir=ns.export_dir)
    if ns.chart_points is not None:
        config = replace(config, chart_points=ns.chart_points)
    storage.save_config(config)
    print(f"export_dir: {config.export_dir or '(default)'}")
    print(f"chart_points: {config.chart_points}")
    return 0
