"""Timezone helpers shared by the store, the clock and quiet-hours handling.

Instants travel through the pipeline as aware UTC datetimes. SQLite
``DATETIME`` columns drop the offset, so the repositories persist naive UTC
values and re-attach the zone when reading them back. Hotel-local wall clock
time only matters for quiet hours and the daily summary.
"""

from __future__ import annotations

import re
from datetime import datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_FALLBACK_ZONE: Final[str] = "UTC"
_UTC_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=64)
def resolve_timezone(name: str) -> tzinfo:
    """Return the zone called ``name``; IANA names and ``UTC+05:30`` offsets work.

    Unknown names resolve to UTC so a misconfigured hotel still gets
    notifications, only with quiet hours evaluated in UTC.
    """

    cleaned = (name or "").strip() or _FALLBACK_ZONE
    try:
        return ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError):
        pass
    match = _UTC_OFFSET.match(cleaned)
    if match is None:
        return ZoneInfo(_FALLBACK_ZONE)
    offset = timedelta(
        hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
    )
    return timezone(-offset if match.group("sign") == "-" else offset)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC instant; naive values are taken as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage(value: datetime | None) -> datetime | None:
    """Return the naive UTC representation persisted in ``DATETIME`` columns."""

    instant = as_utc(value)
    return None if instant is None else instant.replace(tzinfo=None)


def next_local_time(value: datetime, hour: int, tz: tzinfo) -> datetime:
    """Return the first instant after ``value`` whose local wall clock reads ``hour``:00."""

    local = value.astimezone(tz)
    candidate = datetime.combine(local.date(), time(hour=hour), tzinfo=tz)
    if candidate <= local:
        candidate = datetime.combine(
            local.date() + timedelta(days=1), time(hour=hour), tzinfo=tz
        )
    return candidate


__all__ = [
    "as_utc",
    "next_local_time",
    "resolve_timezone",
    "to_storage",
    "utc_now",
]
