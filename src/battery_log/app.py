"""App Kivy para registrar la bateria y ver resumen / ultimas lecturas."""

from __future__ import annotations

import traceback
from datetime import date
from pathlib import Path

from battery_log.cli import chart_lines, summary_lines
from battery_log.errors import InvalidLevelError
from battery_log.export import write_text_export, write_xlsx_export
from battery_log.log_store import LogStore
from battery_log.model import TimeOfDay
from battery_log.storage import SQLiteStore
from battery_log.validation import parse_level


def run_app() -> int:
    """Lanza la app Kivy."""
    from kivy.app import App
    from kivy.core.window import Window
    from kivy.resources import resource_find
    from kivy.uix.boxlayout import BoxLayout
    from kivy.uix.button import Button
    from kivy.uix.label import Label
    from kivy.uix.textinput import TextInput

    class BatteryLogApp(App):
        """Main Kivy app."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self.storage = SQLiteStore(Path.cwd() / "battery_log.sqlite3")
            self.app_config = self.storage.load_config()
            self.store = LogStore(self.storage)
            self.level_input: TextInput | None = None
            self.preview: TextInput | None = None
            self.status: Label | None = None
            self._preview_font = resource_find("data/fonts/RobotoMono-Regular.ttf")

        def build(self) -> BoxLayout:
            Window.bind(on_key_down=self._on_key_down)

            root = BoxLayout(orientation="vertical", spacing=8, padding=10)
            root.add_widget(
                Label(
                    text="Battery Log: nivel de bateria mañana y noche.",
                    size_hint_y=None,
                    height=36,
                )
            )

            entry = BoxLayout(
                orientation="horizontal",
                spacing=8,
                size_hint_y=None,
                height=40,
            )
            self.level_input = TextInput(
                hint_text="Nivel (0-100)",
                multiline=False,
                input_filter="int",
            )
            morning_btn = Button(text="Mañana")
            evening_btn = Button(text="Noche")
            morning_btn.bind(
                on_press=lambda *_args: self._on_log(TimeOfDay.MORNING)
            )
            evening_btn.bind(
                on_press=lambda *_args: self._on_log(TimeOfDay.EVENING)
            )
            entry.add_widget(self.level_input)
            entry.add_widget(morning_btn)
            entry.add_widget(evening_btn)
            root.add_widget(entry)

            actions = BoxLayout(
                orientation="horizontal",
                spacing=8,
                size_hint_y=None,
                height=40,
            )
            csv_btn = Button(text="Exportar CSV")
            xlsx_btn = Button(text="Exportar Excel")
            exit_btn = Button(text="Salir")
            csv_btn.bind(on_press=lambda *_args: self._on_export(xlsx=False))
            xlsx_btn.bind(on_press=lambda *_args: self._on_export(xlsx=True))
            exit_btn.bind(on_press=lambda *_args: self.stop())
            actions.add_widget(csv_btn)
            actions.add_widget(xlsx_btn)
            actions.add_widget(exit_btn)
            root.add_widget(actions)

            self.status = Label(text="", size_hint_y=None, height=30)
            root.add_widget(self.status)

            self.preview = TextInput(
                readonly=True,
                text="",
                multiline=True,
                do_wrap=False,
            )
            if self._preview_font:
                self.preview.font_name = self._preview_font
            root.add_widget(self.preview)

            self._refresh_preview()
            return root

        def _on_key_down(
            self,
            _window: object,
            keycode: int,
            _scancode: int,
            _text: str,
            _modifiers: list[str],
        ) -> bool:
            # Esc: salir de fullscreen o cerrar app.
            if keycode != 27:
                return False
            if Window.fullscreen:
                Window.fullscreen = False
            else:
                self.stop()
            return True

        def _on_log(self, time_of_day: TimeOfDay) -> None:
            if self.level_input is None:
                return
            try:
                level = parse_level(self.level_input.text)
                reading = self.store.append(time_of_day, level)
            except InvalidLevelError as exc:
                self._set_status(str(exc))
                return
            except Exception as exc:
                self._show_error("guardar", exc)
                return
            self.level_input.text = ""
            self._set_status(
                f"OK. {reading.time_of_day.value} {reading.level}% guardado."
            )
            self._refresh_preview()

        def _on_export(self, *, xlsx: bool) -> None:
            if len(self.store) == 0:
                self._set_status("No hay datos para exportar.")
                return
            out_dir = (
                Path(self.app_config.export_dir).expanduser()
                if self.app_config.export_dir
                else Path.cwd() / "salidas"
            )
            try:
                writer = write_xlsx_export if xlsx else write_text_export
                out_path = writer(self.store, out_dir, date.today())
            except Exception as exc:
                self._show_error("exportar", exc)
                return
            self._set_status(f"Archivo generado: {out_path}")

        def _refresh_preview(self) -> None:
            if self.preview is None:
                return
            self.preview.text = preview_text(
                self.store, self.app_config.chart_points
            )

        def _set_status(self, text: str) -> None:
            if self.status is not None:
                self.status.text = text

        def _show_error(self, action: str, exc: Exception) -> None:
            error_type = type(exc).__name__
            self._set_status(f"Error al {action} ({error_type}): {exc}")
            if self.preview is not None:
                self.preview.text = traceback.format_exc()

    BatteryLogApp().run()
    return 0


def preview_text(store: LogStore, chart_points: int) -> str:
    """Resumen + ultimas lecturas como texto monoespaciado."""
    lines = summary_lines(store.summary())
    if len(store) > 0:
        lines.append("")
        lines.extend(chart_lines(store.chart_series(chart_points)))
    return "\n".join(lines)
