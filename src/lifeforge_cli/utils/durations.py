"""Helpers for turning human duration labels into minutes."""

from __future__ import annotations

import math
import re

_STRIP_PATTERN = re.compile(r"[^\dhm\s]", re.IGNORECASE)
_HOURS_PATTERN = re.compile(r"(\d+)\s*h")
_MINUTES_PATTERN = re.compile(r"(\d+)\s*m")


def parse_duration_label(label: object) -> int | None:
    """
    Parse labels like ``"1h 30m"``, ``"45m"`` or ``"2h"`` into minutes.

    Args:
        label: Raw label text (anything that is not a string yields None)

    Returns:
        Total minutes, or None when nothing positive could be parsed
    """
    if not label or not isinstance(label, str):
        return None

    text = _STRIP_PATTERN.sub("", label).lower()
    hours = _HOURS_PATTERN.search(text)
    minutes = _MINUTES_PATTERN.search(text)

    total = (int(hours.group(1)) if hours else 0) * 60 + (
        int(minutes.group(1)) if minutes else 0
    )
    return total if total > 0 else None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def coerce_minutes(value: object) -> float | None:
    """Convert *value* to a finite float, or None if that is not possible."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
