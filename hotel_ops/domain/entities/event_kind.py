"""Enumeration of the operational event kinds recognised by the pipeline."""

from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """Kinds of hotel operational events that produce notifications."""

    DAILY_CHECK_ASSIGNED = "daily_check_assigned"
    DAILY_CHECK_OVERDUE = "daily_check_overdue"
    DAILY_CHECK_COMPLETED = "daily_check_completed"
    DAILY_CHECK_ISSUES = "daily_check_issues"

    MAINTENANCE_REQUEST_CREATED = "maintenance_request_created"
    MAINTENANCE_URGENT = "maintenance_urgent"
    MAINTENANCE_ASSIGNED = "maintenance_assigned"
    MAINTENANCE_STARTED = "maintenance_started"
    MAINTENANCE_COMPLETED = "maintenance_completed"
    MAINTENANCE_OVERDUE = "maintenance_overdue"
    MAINTENANCE_HIGH_COST = "maintenance_high_cost"

    ROOM_NEEDS_CLEANING = "room_needs_cleaning"
    ROOM_OUT_OF_ORDER = "room_out_of_order"
    ROOM_BACK_IN_SERVICE = "room_back_in_service"
    ROOM_CHECKOUT_DIRTY = "room_checkout_dirty"

    CLEANING_STARTED = "cleaning_started"
    CLEANING_COMPLETED = "cleaning_completed"
    CLEANING_QUALITY_ISSUE = "cleaning_quality_issue"
    HOUSEKEEPING_ASSIGNED = "housekeeping_assigned"
    DEEP_CLEANING_DUE = "deep_cleaning_due"

    GUEST_SERVICE_CREATED = "guest_service_created"
    GUEST_SERVICE_URGENT = "guest_service_urgent"
    GUEST_SERVICE_ASSIGNED = "guest_service_assigned"
    GUEST_SERVICE_STARTED = "guest_service_started"
    GUEST_SERVICE_COMPLETED = "guest_service_completed"
    GUEST_SERVICE_OVERDUE = "guest_service_overdue"
    GUEST_SERVICE_VIP = "guest_service_vip"

    INVENTORY_LOW_STOCK = "inventory_low_stock"
    INVENTORY_OUT_OF_STOCK = "inventory_out_of_stock"
    INVENTORY_DAMAGED = "inventory_damaged"
    INVENTORY_MISSING = "inventory_missing"
    INVENTORY_HIGH_VALUE_USED = "inventory_high_value_used"

    DAILY_OPERATIONS_SUMMARY = "daily_operations_summary"
    STAFF_PERFORMANCE_ALERT = "staff_performance_alert"
    REVENUE_IMPACT_ALERT = "revenue_impact_alert"

    TASK_ASSIGNMENT = "task_assignment"
    TASK_OVERDUE = "task_overdue"

    @classmethod
    def coerce(cls, value: "EventKind | str") -> "EventKind | str":
        """Return the matching member, or ``value`` unchanged when it is unknown."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return value


def kind_value(kind: EventKind | str) -> str:
    """Return the plain string stored for ``kind``."""

    return kind.value if isinstance(kind, EventKind) else str(kind)


__all__ = ["EventKind", "kind_value"]
