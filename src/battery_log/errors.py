"""Excepciones del registro de bateria."""

from __future__ import annotations


class BatteryLogError(Exception):
    """Base error for battery log operations."""


class InvalidLevelError(BatteryLogError, ValueError):
    """Raised when a battery level is not an integer percentage in 0-100."""

    def __init__(self, raw: object) -> None:
        self.raw = raw
        super().__init__(f"Nivel de bateria invalido: {raw!r} (esperado 0-100)")


class CorruptStoreError(BatteryLogError, ValueError):
    """Raised when persisted content is not a valid serialized log."""
