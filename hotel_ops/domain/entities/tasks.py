"""Operational task entities whose mutations drive notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

TASK_STATUS_PENDING = "pending"
TASK_STATUS_ASSIGNED = "assigned"
TASK_STATUS_IN_PROGRESS = "in_progress"
TASK_STATUS_COMPLETED = "completed"
TASK_STATUS_CANCELLED = "cancelled"

TASK_STATUSES = (
    TASK_STATUS_PENDING,
    TASK_STATUS_ASSIGNED,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_COMPLETED,
    TASK_STATUS_CANCELLED,
)
OPEN_TASK_STATUSES = (TASK_STATUS_PENDING, TASK_STATUS_ASSIGNED, TASK_STATUS_IN_PROGRESS)

HOUSEKEEPING_TYPE_CLEANING = "cleaning"
HOUSEKEEPING_TYPE_DEEP_CLEAN = "deep_clean"

MAINTENANCE_PRIORITY_EMERGENCY = "emergency"
GUEST_SERVICE_URGENT_PRIORITIES = frozenset({"urgent", "now"})

# Quality scores below this value are reported as a cleaning quality issue.
QUALITY_ISSUE_THRESHOLD = 3


@dataclass
class InventoryLine:
    """Item consumed while carrying out a housekeeping task."""

    item_name: str
    quantity: float
    unit_cost: float

    @property
    def total(self) -> float:
        return self.quantity * self.unit_cost


@dataclass
class HousekeepingTask:
    id: int | None
    hotel_id: int
    room_number: str
    title: str
    task_type: str = HOUSEKEEPING_TYPE_CLEANING
    priority: str = "medium"
    status: str = TASK_STATUS_PENDING
    assigned_to: int | None = None
    created_by: int | None = None
    quality_score: float | None = None
    inventory_consumed: list[InventoryLine] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None

    def inventory_total(self) -> float:
        return sum(line.total for line in self.inventory_consumed)


@dataclass
class MaintenanceTask:
    id: int | None
    hotel_id: int
    room_number: str | None
    title: str
    issue_type: str
    description: str | None = None
    priority: str = "medium"
    status: str = TASK_STATUS_PENDING
    assigned_to: int | None = None
    created_by: int | None = None
    estimated_cost: float | None = None
    actual_cost: float | None = None
    due_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    overdue_notified_at: datetime | None = None

    def is_emergency(self) -> bool:
        return (self.priority or "").lower() == MAINTENANCE_PRIORITY_EMERGENCY


@dataclass
class GuestService:
    id: int | None
    hotel_id: int
    guest_id: int
    room_number: str | None
    service_type: str
    service_variation: str | None = None
    title: str | None = None
    description: str | None = None
    priority: str = "medium"
    status: str = TASK_STATUS_PENDING
    assigned_to: int | None = None
    actual_cost: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    overdue_notified_at: datetime | None = None

    def is_urgent(self) -> bool:
        return (self.priority or "").lower() in GUEST_SERVICE_URGENT_PRIORITIES


__all__ = [
    "GUEST_SERVICE_URGENT_PRIORITIES",
    "GuestService",
    "HOUSEKEEPING_TYPE_CLEANING",
    "HOUSEKEEPING_TYPE_DEEP_CLEAN",
    "HousekeepingTask",
    "InventoryLine",
    "MAINTENANCE_PRIORITY_EMERGENCY",
    "MaintenanceTask",
    "OPEN_TASK_STATUSES",
    "QUALITY_ISSUE_THRESHOLD",
    "TASK_STATUSES",
    "TASK_STATUS_ASSIGNED",
    "TASK_STATUS_CANCELLED",
    "TASK_STATUS_COMPLETED",
    "TASK_STATUS_IN_PROGRESS",
    "TASK_STATUS_PENDING",
]
