"""Errors raised by the notification pipeline."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for notification pipeline failures."""


class DispatchError(NotificationError):
    """A notification record could not be persisted."""

    def __init__(self, kind: str, hotel_id: int, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.hotel_id = hotel_id


class IllegalStatusTransition(NotificationError):
    """A status change that the record lifecycle never allows."""

    def __init__(self, current: str | None, new: str) -> None:
        super().__init__(f"Cannot move notification from {current!r} to {new!r}")
        self.current = current
        self.new = new


class PushDeliveryError(NotificationError):
    """The realtime transport failed or timed out."""


__all__ = [
    "DispatchError",
    "IllegalStatusTransition",
    "NotificationError",
    "PushDeliveryError",
]
