"""Domain entity representing a persisted notification record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

STATUS_PENDING = "pending"
STATUS_SENT = "sent"
STATUS_FAILED = "failed"
STATUS_SUPPRESSED = "suppressed"

NOTIFICATION_STATUSES = (STATUS_PENDING, STATUS_SENT, STATUS_FAILED, STATUS_SUPPRESSED)
TERMINAL_STATUSES = frozenset({STATUS_SENT, STATUS_FAILED, STATUS_SUPPRESSED})
# Records in these states can still absorb a coalesced duplicate.
COALESCIBLE_STATUSES = (STATUS_PENDING, STATUS_SENT)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH, PRIORITY_URGENT)
# Priorities that are also broadcast on the hotel admin channel.
ESCALATED_PRIORITIES = frozenset({PRIORITY_HIGH, PRIORITY_URGENT})

CHANNEL_IN_APP = "in_app"
CHANNEL_PUSH = "push"
CHANNEL_EMAIL = "email"
CHANNEL_SMS = "sms"

CHANNELS = (CHANNEL_IN_APP, CHANNEL_PUSH, CHANNEL_EMAIL, CHANNEL_SMS)
DEFAULT_CHANNELS = (CHANNEL_IN_APP, CHANNEL_PUSH)

DELIVERY_DELIVERED = "delivered"
DELIVERY_FAILED = "failed"


def is_legal_transition(current: str, new: str) -> bool:
    """Return ``True`` when moving from ``current`` to ``new`` respects the lifecycle."""

    return current == STATUS_PENDING and new in TERMINAL_STATUSES


def normalize_priority(value: str | None) -> str:
    """Map an arbitrary priority label onto the notification priority scale."""

    label = (value or "").strip().lower()
    if label in PRIORITIES:
        return label
    if label in {"emergency", "now", "critical"}:
        return PRIORITY_URGENT
    return PRIORITY_MEDIUM


@dataclass
class NotificationRecord:
    """Notification addressed to a single recipient of a single hotel."""

    id: int | None
    recipient_id: int
    hotel_id: int
    kind: str
    title: str
    message: str
    priority: str = PRIORITY_MEDIUM
    status: str = STATUS_PENDING
    channels: tuple[str, ...] = DEFAULT_CHANNELS
    scheduled_for: datetime | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None
    read_at: datetime | None = None
    failure_reason: str | None = None
    channel_results: dict[str, dict[str, Any]] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    coalesced_count: int = 0

    @property
    def suppression_key(self) -> tuple[int, str, int]:
        return (self.recipient_id, self.kind, self.hotel_id)

    def is_escalated(self) -> bool:
        return self.priority in ESCALATED_PRIORITIES

    def channel_failure(self, channel: str) -> str | None:
        result = self.channel_results.get(channel) or {}
        if result.get("status") != DELIVERY_FAILED:
            return None
        return result.get("reason")


__all__ = [
    "CHANNELS",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_PUSH",
    "CHANNEL_SMS",
    "COALESCIBLE_STATUSES",
    "DEFAULT_CHANNELS",
    "DELIVERY_DELIVERED",
    "DELIVERY_FAILED",
    "ESCALATED_PRIORITIES",
    "NOTIFICATION_STATUSES",
    "NotificationRecord",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
    "STATUS_FAILED",
    "STATUS_PENDING",
    "STATUS_SENT",
    "STATUS_SUPPRESSED",
    "TERMINAL_STATUSES",
    "is_legal_transition",
    "normalize_priority",
]
