"""Application use cases."""

from .notifications import (
    list_user_notifications,
    mark_notifications_as_read,
    search_hotel_notifications,
)
from .tasks import (
    create_guest_service,
    create_housekeeping_task,
    create_maintenance_task,
    update_guest_service,
    update_housekeeping_task,
    update_maintenance_task,
)

__all__ = [
    "create_guest_service",
    "create_housekeeping_task",
    "create_maintenance_task",
    "list_user_notifications",
    "mark_notifications_as_read",
    "search_hotel_notifications",
    "update_guest_service",
    "update_housekeeping_task",
    "update_maintenance_task",
]
