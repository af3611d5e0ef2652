# src/distkey/core/clock.py
from __future__ import annotations
import threading
import time
from typing import Protocol

class Clock(Protocol):
    def now_millis(self) -> int: ...

class SystemClock:
    """Wall clock, milliseconds since the Unix epoch."""

    def now_millis(self) -> int:
        return time.time_ns() // 1_000_000

class FixedClock:
    """Deterministic clock for tests; only moves when told to."""

    def __init__(self, millis: int = 0):
        self._now = int(millis)

    def now_millis(self) -> int:
        return self._now

    def set(self, millis: int) -> None:
        self._now = int(millis)

    def advance(self, millis: int) -> None:
        self._now += int(millis)

_default_lock = threading.Lock()
_default_clock: Clock = SystemClock()

def get_default_clock() -> Clock:
    return _default_clock

def set_default_clock(clock: Clock) -> Clock:
    """Install a process-wide clock; returns the previous one so callers can restore it."""
    global _default_clock
    with _default_lock:
        previous = _default_clock
        _default_clock = clock
    return previous

def resolve(clock: Clock | None) -> Clock:
    return clock if clock is not None else _default_clock
