# src/distkey/utils/duration.py
from __future__ import annotations
import re

from distkey.core.errors import InvalidArgument

UNIT_MILLIS = {
    "millisecond": 1,
    "second": 1000,
    "minute": 60 * 1000,
    "hour": 60 * 60 * 1000,
    "day": 24 * 60 * 60 * 1000,
    "week": 7 * 24 * 60 * 60 * 1000,
}

_FACTOR = re.compile(r"^\d+$")

def _unit(token: str) -> int | None:
    t = token.lower()
    if t in UNIT_MILLIS:
        return UNIT_MILLIS[t]
    if t.endswith("s") and t[:-1] in UNIT_MILLIS:
        return UNIT_MILLIS[t[:-1]]
    return None

def parse_duration_millis(value) -> int:
    """
    Validity periods as written in Auth/entity configs: '1*hour', '2*7*day',
    '500*millisecond', or a plain number of milliseconds.
    """
    if isinstance(value, bool):
        raise InvalidArgument("duration cannot be bool")
    if isinstance(value, int):
        if value < 0:
            raise InvalidArgument("duration cannot be negative")
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"Invalid duration: {value!r}")
    tokens = [t.strip() for t in value.strip().split("*")]
    if len(tokens) == 1 and _FACTOR.match(tokens[0]):
        return int(tokens[0])
    unit = _unit(tokens[-1])
    if unit is None:
        raise InvalidArgument(f"Unknown time unit in {value!r}")
    total = unit
    for t in tokens[:-1]:
        if not _FACTOR.match(t):
            raise InvalidArgument(f"Invalid factor {t!r} in {value!r}")
        total *= int(t)
    return total
