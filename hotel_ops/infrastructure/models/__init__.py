"""ORM models used by the application infrastructure."""

from .user import UserModel
from .notification import NotificationModel
from .housekeeping_task import HousekeepingTaskModel
from .maintenance_task import MaintenanceTaskModel
from .guest_service import GuestServiceModel

__all__ = [
    "GuestServiceModel",
    "HousekeepingTaskModel",
    "MaintenanceTaskModel",
    "NotificationModel",
    "UserModel",
]
