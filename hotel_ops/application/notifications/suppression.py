"""Quiet hours and duplicate coalescing for notification candidates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol, Sequence, Union

from hotel_ops.config import Settings
from hotel_ops.domain.entities import PRIORITY_LOW, NotificationRecord
from hotel_ops.utils import Clock, next_local_time, resolve_timezone

logger = logging.getLogger(__name__)


class RecentRecords(Protocol):
    async def query_recent(
        self, *, recipient_id: int, kind: str, hotel_id: int, since: datetime
    ) -> Sequence[NotificationRecord]: ...


@dataclass(frozen=True)
class Create:
    """No live duplicate: persist the candidate."""


@dataclass(frozen=True)
class MergeInto:
    """Fold the candidate into an existing record instead of creating one."""

    record_id: int
    suffix: str
    expected_count: int


CoalesceDecision = Union[Create, MergeInto]

CREATE = Create()


def in_quiet_hours(hour: int, start: int, end: int) -> bool:
    """Return ``True`` when ``hour`` lies in ``[start, end)``, wrapping midnight."""

    if start < end:
        return start <= hour < end
    return hour >= start or hour < end


def coalesced_suffix(count: int) -> str:
    return f" (+{count} more)"


class SuppressionEngine:
    """Apply the per-hotel quiet hours and coalescing policy."""

    def __init__(self, settings: Settings, clock: Clock) -> None:
        self._settings = settings
        self._clock = clock

    def apply_quiet_hours(self, record: NotificationRecord) -> NotificationRecord:
        """Defer a low priority record created during quiet hours.

        The deferred record is released at the next quiet hours release time,
        in the hotel's local timezone.
        """

        if record.priority != PRIORITY_LOW:
            return record
        policy = self._settings.policy_for(record.hotel_id)
        tz = resolve_timezone(policy.timezone)
        now = self._clock.now()
        local_hour = now.astimezone(tz).hour
        if not in_quiet_hours(local_hour, policy.quiet_hours_start, policy.quiet_hours_end):
            return record
        release = next_local_time(now, policy.quiet_hours_release, tz)
        logger.debug(
            "Deferring %s for user %s until %s", record.kind, record.recipient_id, release
        )
        return replace(record, scheduled_for=release)

    async def coalesce(
        self, candidate: NotificationRecord, store: RecentRecords
    ) -> CoalesceDecision:
        """Decide whether ``candidate`` duplicates a live record of its suppression key."""

        window = self._settings.policy_for(candidate.hotel_id).coalescing_window
        recent = await store.query_recent(
            recipient_id=candidate.recipient_id,
            kind=candidate.kind,
            hotel_id=candidate.hotel_id,
            since=self._clock.now() - window,
        )
        if not recent:
            return CREATE
        latest = recent[0]
        return MergeInto(
            record_id=latest.id,
            suffix=coalesced_suffix(latest.coalesced_count + 1),
            expected_count=latest.coalesced_count,
        )


__all__ = [
    "CREATE",
    "CoalesceDecision",
    "Create",
    "MergeInto",
    "SuppressionEngine",
    "coalesced_suffix",
    "in_quiet_hours",
]
