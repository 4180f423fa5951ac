"""Realtime notification helpers for the infrastructure layer."""

from .manager import JsonConnection, NotificationConnectionManager, notification_manager
from .publisher import (
    TOPIC_NEW,
    TOPIC_URGENT,
    RealtimeFanOut,
    serialize_notification,
)
from .sinks import NotificationSink, SendGridEmailSink, build_sinks

__all__ = [
    "JsonConnection",
    "NotificationConnectionManager",
    "NotificationSink",
    "RealtimeFanOut",
    "SendGridEmailSink",
    "TOPIC_NEW",
    "TOPIC_URGENT",
    "build_sinks",
    "notification_manager",
    "serialize_notification",
]
