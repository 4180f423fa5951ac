"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the identifiers without duplicates, preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationMarkReadResponse(BaseModel):
    updated: int


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipient_id: int
    hotel_id: int
    kind: str
    title: str
    message: str
    priority: str
    status: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    channel_results: dict[str, dict[str, Any]] = Field(default_factory=dict)
    created_at: datetime
    scheduled_for: datetime | None = None
    sent_at: datetime | None = None
    read_at: datetime | None = None
    failure_reason: str | None = None
    coalesced_count: int = 0


__all__ = [
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
]
