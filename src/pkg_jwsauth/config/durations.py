from __future__ import annotations

import math
import re
from datetime import timedelta
from typing import Optional, Union

DurationLike = Union[str, int, float, timedelta, None]

_UNIT_SECONDS = {
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
}

_PART = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)")


def _to_timedelta(seconds: float, value: DurationLike) -> timedelta:
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"Invalid duration: {value!r}")
    try:
        return timedelta(seconds=seconds)
    except OverflowError as exc:
        raise ValueError(f"Duration out of range: {value!r}") from exc


def parse_duration(value: DurationLike) -> Optional[timedelta]:
    """
    Parse a human-readable duration into a timedelta.

    Accepts "1 hour", "24 hours", "90 minutes", "1h30m", "2 days, 3 hours",
    a bare number of seconds ("3600", 3600) or a timedelta. None and blank
    strings mean "unset" and return None.

    Raises:
        ValueError on anything else, including negative, infinite, NaN and
        out-of-range durations.
    """
    if value is None:
        return None
    if isinstance(value, timedelta):
        if value < timedelta(0):
            raise ValueError(f"Invalid duration: {value!r}")
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return _to_timedelta(value, value)

    text = value.strip().lower()
    if not text:
        return None

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        return _to_timedelta(seconds, value)

    text = re.sub(r"\s*(,|\band\b)\s*", " ", text)
    total = 0.0
    pos = 0
    for match in _PART.finditer(text):
        if text[pos:match.start()].strip():
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        if unit not in _UNIT_SECONDS:
            raise ValueError(f"Unknown duration unit {unit!r} in {value!r}")
        total += float(amount) * _UNIT_SECONDS[unit]
        pos = match.end()

    if pos == 0 or text[pos:].strip():
        raise ValueError(f"Invalid duration: {value!r}")

    return _to_timedelta(total, value)
