"""Notification pipeline: rendering, routing, suppression and delivery."""

from .delivery import NO_TRANSPORT, NotificationDelivery
from .dispatcher import NotificationDispatcher
from .jobs import NotificationJobs
from .recipients import RecipientResolver
from .rendering import ContentRenderer, RenderedContent
from .scheduler import RECIPIENT_UNREACHABLE, NotificationScheduler
from .service import NotificationService, build_notification_service
from .suppression import CREATE, Create, MergeInto, SuppressionEngine, in_quiet_hours
from .sweeps import OperationsSweeps

__all__ = [
    "CREATE",
    "ContentRenderer",
    "Create",
    "MergeInto",
    "NO_TRANSPORT",
    "NotificationDelivery",
    "NotificationDispatcher",
    "NotificationJobs",
    "NotificationScheduler",
    "NotificationService",
    "OperationsSweeps",
    "RECIPIENT_UNREACHABLE",
    "RecipientResolver",
    "RenderedContent",
    "SuppressionEngine",
    "build_notification_service",
    "in_quiet_hours",
]
