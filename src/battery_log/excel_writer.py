"""Generación de Excel formateado con el historial de bateria."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from battery_log.model import Reading

_WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Day",
    "timestamp": "Date / Time",
    "time_of_day": "Time of Day",
    "level": "Battery Level",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the log sheet."""

    sheet_name: str = "Battery log"


def _weekday_label(i: object) -> str:
    """Convierte índice 0-6 (lunes-domingo) a etiqueta de 3 letras."""
    if isinstance(i, int) and 0 <= i < 7:
        return _WEEKDAYS[i]
    return ""


def _export_frame(readings: Sequence[Reading]) -> pd.DataFrame:
    """Frame in log order with wall-clock datetimes and a weekday column."""
    out = pd.DataFrame(
        {
            "timestamp": [r.timestamp.replace(tzinfo=None) for r in readings],
            "time_of_day": [r.time_of_day.value for r in readings],
            "level": [r.level for r in readings],
        },
        columns=["timestamp", "time_of_day", "level"],
    )
    return _add_weekday_column(out).rename(columns=_HEADER_MAP)


def _add_weekday_column(export_df: pd.DataFrame) -> pd.DataFrame:
    """Añade columna weekday (Day) a partir de timestamp."""
    export_df = export_df.copy()
    weekdays = pd.to_datetime(export_df["timestamp"]).dt.weekday
    export_df["weekday"] = [_weekday_label(int(i)) for i in weekdays]
    return export_df[list(_HEADER_MAP)]


def write_log_xlsx(
    readings: Sequence[Reading],
    out_path: Path,
    layout: ExcelLayout | None = None,
) -> None:
    """Write a formatted Excel file with one row per reading.

    Args:
        readings: Log in newest-first order.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    layout = layout or ExcelLayout()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    export_df = _export_frame(readings)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    widths = [
        ("Day", 6),
        ("Date / Time", 18),
        ("Time of Day", 12),
        ("Battery Level", 14),
    ]
    for header, width in widths:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    fmt_map: dict[str, str] = {
        "Date / Time": "dd/mm/yyyy hh:mm",
        "Battery Level": '0"%"',
    }
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
