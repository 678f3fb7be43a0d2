"""Escritura de exportaciones (CSV y Excel) en un directorio."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from battery_log.excel_writer import ExcelLayout, write_log_xlsx
from battery_log.formatting import export_filename
from battery_log.log_store import LogStore

_LOGGER = logging.getLogger(__name__)


def write_text_export(store: LogStore, out_dir: Path, day: date) -> Path:
    """Write ``store.export_text()`` to battery-log-YYYY-MM-DD.csv in out_dir."""
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / export_filename(day)
    out_path.write_text(store.export_text(), encoding="utf-8")
    _LOGGER.info("Exported %d readings to %s", len(store), out_path)
    return out_path


def write_xlsx_export(store: LogStore, out_dir: Path, day: date) -> Path:
    """Same as :func:`write_text_export` but as a formatted spreadsheet."""
    out_path = out_dir / export_filename(day, suffix=".xlsx")
    write_log_xlsx(store.readings, out_path, ExcelLayout())
    _LOGGER.info("Exported %d readings to %s", len(store), out_path)
    return out_path
