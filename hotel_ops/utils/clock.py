"""Wall-clock sources used by the notification pipeline."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .datetime import as_utc, utc_now


class Clock(Protocol):
    """Single time source for suppression, persistence and scheduling."""

    def now(self) -> datetime:
        """Return the current timezone-aware instant."""


class SystemClock:
    """Clock backed by the host wall clock."""

    def now(self) -> datetime:
        return utc_now()


class FixedClock:
    """Manually driven clock, mainly for tests and replays."""

    def __init__(self, current: datetime) -> None:
        self._current = as_utc(current)

    def now(self) -> datetime:
        return self._current

    def set(self, value: datetime) -> None:
        self._current = as_utc(value)

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by ``timedelta(**delta)`` and return the new time."""

        self._current = self._current + timedelta(**delta)
        return self._current


__all__ = ["Clock", "FixedClock", "SystemClock"]
