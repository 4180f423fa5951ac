"""Utility helpers for reusable functionality."""

from .clock import Clock, FixedClock, SystemClock
from .datetime import as_utc, next_local_time, resolve_timezone, to_storage, utc_now

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "as_utc",
    "next_local_time",
    "resolve_timezone",
    "to_storage",
    "utc_now",
]
