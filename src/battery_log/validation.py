"""Validacion explicita de la entrada del usuario."""

from __future__ import annotations

import re

from battery_log.errors import InvalidLevelError
from battery_log.model import TimeOfDay

MIN_LEVEL = 0
MAX_LEVEL = 100

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_level(raw: str | int) -> int:
    """Parse a battery level typed by the user.

    Args:
        raw: Raw text (or an int already parsed by the caller).

    Returns:
        Integer percentage in [0, 100].

    Raises:
        InvalidLevelError: If the input is empty, not an integer or out of range.
    """
    if isinstance(raw, bool):
        raise InvalidLevelError(raw)
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not _INTEGER_RE.match(text):
            raise InvalidLevelError(raw)
        value = int(text)
    if not MIN_LEVEL <= value <= MAX_LEVEL:
        raise InvalidLevelError(raw)
    return value


def parse_time_of_day(raw: TimeOfDay | str) -> TimeOfDay:
    """Convierte 'morning'/'evening' (sin importar mayusculas) a TimeOfDay."""
    if isinstance(raw, TimeOfDay):
        return raw
    try:
        return TimeOfDay(str(raw).strip().lower())
    except ValueError:
        raise ValueError(f"Momento del dia invalido: {raw!r}") from None
