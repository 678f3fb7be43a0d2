"""Abre la ventana Kivy del registro de bateria (python -m battery_log)."""

from __future__ import annotations

from battery_log.app import run_app


def main() -> int:
    """Run the battery log window; returns 1 when Kivy is not installed."""
    try:
        return run_app()
    except ImportError as exc:
        print(f"Battery Log necesita Kivy para la ventana: {exc}")
        print("Instala el extra gui: pip install 'battery-log[gui]'")
        print("Sin Kivy se puede usar la CLI: battery-log --help")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
