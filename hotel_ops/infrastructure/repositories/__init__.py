"""Repository implementations backed by SQLAlchemy."""

from .guest_service_repository import GuestServiceRepository
from .housekeeping_task_repository import HousekeepingTaskRepository
from .maintenance_task_repository import MaintenanceTaskRepository
from .notification_repository import COALESCED_SUFFIX, NotificationRepository
from .task_repository import TaskRepository
from .user_repository import UserDirectory

__all__ = [
    "COALESCED_SUFFIX",
    "GuestServiceRepository",
    "HousekeepingTaskRepository",
    "MaintenanceTaskRepository",
    "NotificationRepository",
    "TaskRepository",
    "UserDirectory",
]
