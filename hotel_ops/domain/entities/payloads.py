"""Typed payload shapes carried by event intents.

Every event kind names one payload dataclass. Renderers and routing rules
read only the fields declared on that dataclass; kinds outside the known set
travel as a :class:`GenericPayload` wrapping the raw mapping.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from .event_kind import EventKind

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    return value


@dataclass(frozen=True)
class Payload:
    """Base class for intent payloads."""

    def get(self, name: str, default: Any = None) -> Any:
        value = getattr(self, name, None)
        return default if value is None else value

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable mapping of the declared fields."""

        return {item.name: _jsonable(getattr(self, item.name)) for item in fields(self)}


@dataclass(frozen=True)
class HousekeepingPayload(Payload):
    task_id: int | None = None
    room_number: str | None = None
    title: str | None = None
    task_type: str | None = None
    priority: str | None = None
    assigned_to: int | None = None
    created_by: int | None = None
    quality_score: float | None = None
    reason: str | None = None


@dataclass(frozen=True)
class MaintenancePayload(Payload):
    task_id: int | None = None
    room_number: str | None = None
    issue_type: str | None = None
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    assigned_to: int | None = None
    created_by: int | None = None
    cost: float | None = None
    overdue_hours: int | None = None
    due_date: datetime | None = None


@dataclass(frozen=True)
class GuestServicePayload(Payload):
    request_id: int | None = None
    room_number: str | None = None
    service_type: str | None = None
    service_variation: str | None = None
    description: str | None = None
    priority: str | None = None
    guest_id: int | None = None
    assigned_to: int | None = None
    is_vip: bool | None = None
    actual_cost: float | None = None
    overdue_minutes: int | None = None


@dataclass(frozen=True)
class InventoryPayload(Payload):
    item_name: str | None = None
    current_stock: float | None = None
    room_number: str | None = None
    value: float | None = None
    task_id: int | None = None


@dataclass(frozen=True)
class DailyCheckPayload(Payload):
    check_id: int | None = None
    room_number: str | None = None
    assigned_to: int | None = None
    overdue_hours: int | None = None
    quality_score: float | None = None
    issue_description: str | None = None


@dataclass(frozen=True)
class RoomStatusPayload(Payload):
    room_number: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class OperationsSummaryPayload(Payload):
    completed_tasks: int | None = None
    pending_tasks: int | None = None
    overdue_items: int | None = None


@dataclass(frozen=True)
class StaffPerformancePayload(Payload):
    staff_name: str | None = None
    metric: str | None = None
    value: float | str | None = None


@dataclass(frozen=True)
class RevenueImpactPayload(Payload):
    out_of_order_rooms: int | None = None
    estimated_loss: float | None = None


@dataclass(frozen=True)
class TaskPayload(Payload):
    task_title: str | None = None
    due_date: datetime | date | str | None = None
    overdue_days: int | None = None
    assigned_to: int | None = None


@dataclass(frozen=True)
class GenericPayload(Payload):
    """Loose payload for kinds outside the known set."""

    values: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        value = self.values.get(name)
        return default if value is None else value

    def as_dict(self) -> dict[str, Any]:
        return _jsonable(dict(self.values))


PAYLOAD_TYPES: dict[EventKind, type[Payload]] = {
    EventKind.DAILY_CHECK_ASSIGNED: DailyCheckPayload,
    EventKind.DAILY_CHECK_OVERDUE: DailyCheckPayload,
    EventKind.DAILY_CHECK_COMPLETED: DailyCheckPayload,
    EventKind.DAILY_CHECK_ISSUES: DailyCheckPayload,
    EventKind.MAINTENANCE_REQUEST_CREATED: MaintenancePayload,
    EventKind.MAINTENANCE_URGENT: MaintenancePayload,
    EventKind.MAINTENANCE_ASSIGNED: MaintenancePayload,
    EventKind.MAINTENANCE_STARTED: MaintenancePayload,
    EventKind.MAINTENANCE_COMPLETED: MaintenancePayload,
    EventKind.MAINTENANCE_OVERDUE: MaintenancePayload,
    EventKind.MAINTENANCE_HIGH_COST: MaintenancePayload,
    EventKind.ROOM_NEEDS_CLEANING: HousekeepingPayload,
    EventKind.ROOM_OUT_OF_ORDER: RoomStatusPayload,
    EventKind.ROOM_BACK_IN_SERVICE: RoomStatusPayload,
    EventKind.ROOM_CHECKOUT_DIRTY: RoomStatusPayload,
    EventKind.CLEANING_STARTED: HousekeepingPayload,
    EventKind.CLEANING_COMPLETED: HousekeepingPayload,
    EventKind.CLEANING_QUALITY_ISSUE: HousekeepingPayload,
    EventKind.HOUSEKEEPING_ASSIGNED: HousekeepingPayload,
    EventKind.DEEP_CLEANING_DUE: HousekeepingPayload,
    EventKind.GUEST_SERVICE_CREATED: GuestServicePayload,
    EventKind.GUEST_SERVICE_URGENT: GuestServicePayload,
    EventKind.GUEST_SERVICE_ASSIGNED: GuestServicePayload,
    EventKind.GUEST_SERVICE_STARTED: GuestServicePayload,
    EventKind.GUEST_SERVICE_COMPLETED: GuestServicePayload,
    EventKind.GUEST_SERVICE_OVERDUE: GuestServicePayload,
    EventKind.GUEST_SERVICE_VIP: GuestServicePayload,
    EventKind.INVENTORY_LOW_STOCK: InventoryPayload,
    EventKind.INVENTORY_OUT_OF_STOCK: InventoryPayload,
    EventKind.INVENTORY_DAMAGED: InventoryPayload,
    EventKind.INVENTORY_MISSING: InventoryPayload,
    EventKind.INVENTORY_HIGH_VALUE_USED: InventoryPayload,
    EventKind.DAILY_OPERATIONS_SUMMARY: OperationsSummaryPayload,
    EventKind.STAFF_PERFORMANCE_ALERT: StaffPerformancePayload,
    EventKind.REVENUE_IMPACT_ALERT: RevenueImpactPayload,
    EventKind.TASK_ASSIGNMENT: TaskPayload,
    EventKind.TASK_OVERDUE: TaskPayload,
}


def payload_type_for(kind: EventKind | str) -> type[Payload]:
    """Return the payload dataclass declared for ``kind``."""

    return PAYLOAD_TYPES.get(EventKind.coerce(kind), GenericPayload)


def build_payload(kind: EventKind | str, data: Mapping[str, Any] | None) -> Payload:
    """Build the payload variant of ``kind`` from a loose mapping.

    Keys may be given in ``camelCase`` or ``snake_case``. Keys that the
    variant does not declare are ignored.
    """

    data = data or {}
    payload_type = payload_type_for(kind)
    if payload_type is GenericPayload:
        return GenericPayload(values=dict(data))

    declared = {item.name for item in fields(payload_type)}
    values: dict[str, Any] = {}
    for key, value in data.items():
        name = key if key in declared else _to_snake(key)
        if name in declared:
            values[name] = value
    return payload_type(**values)


__all__ = [
    "DailyCheckPayload",
    "GenericPayload",
    "GuestServicePayload",
    "HousekeepingPayload",
    "InventoryPayload",
    "MaintenancePayload",
    "OperationsSummaryPayload",
    "PAYLOAD_TYPES",
    "Payload",
    "RevenueImpactPayload",
    "RoomStatusPayload",
    "StaffPerformancePayload",
    "TaskPayload",
    "build_payload",
    "payload_type_for",
]
