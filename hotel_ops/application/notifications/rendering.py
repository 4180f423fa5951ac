"""Render notification titles and messages from event payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from hotel_ops.domain.entities import EventKind, Payload, kind_value

FALLBACK_ICON = "🏨"


@dataclass(frozen=True)
class RenderedContent:
    title: str
    message: str
    icon: str


@dataclass(frozen=True)
class Template:
    """Title, message and glyph of one event kind.

    ``message`` is a :meth:`str.format` pattern over the payload fields.
    ``fallbacks`` supplies a pattern for a field that is empty in the payload.
    """

    title: str
    message: str
    icon: str
    fallbacks: Mapping[str, str] = field(default_factory=dict)


class _Fields(dict):
    def __missing__(self, key: str) -> str:
        return ""


def _display(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


TEMPLATES: dict[EventKind, Template] = {
    EventKind.DAILY_CHECK_ASSIGNED: Template(
        "Daily Check Assigned",
        "Room {room_number} daily check has been assigned to you",
        "📋",
    ),
    EventKind.DAILY_CHECK_OVERDUE: Template(
        "Daily Check Overdue",
        "⚠️ Daily check for Room {room_number} is overdue ({overdue_hours}h)",
        "⏰",
    ),
    EventKind.DAILY_CHECK_COMPLETED: Template(
        "Daily Check Completed",
        "✅ Room {room_number} daily check completed with quality score: {quality_score}/5",
        "✅",
    ),
    EventKind.DAILY_CHECK_ISSUES: Template(
        "Issues Found in Daily Check",
        "🚨 Issues found in Room {room_number}: {issue_description}",
        "🚨",
    ),
    EventKind.MAINTENANCE_REQUEST_CREATED: Template(
        "New Maintenance Request",
        "New {issue_type} maintenance request for Room {room_number}",
        "🔧",
    ),
    EventKind.MAINTENANCE_URGENT: Template(
        "URGENT Maintenance Required",
        "🚨 URGENT: {issue_type} in Room {room_number} - Immediate attention required",
        "🚨",
    ),
    EventKind.MAINTENANCE_ASSIGNED: Template(
        "Maintenance Task Assigned",
        "Maintenance task assigned: {description} for Room {room_number}",
        "🔧",
        {"description": "{title}"},
    ),
    EventKind.MAINTENANCE_STARTED: Template(
        "Maintenance Started",
        "Maintenance started for Room {room_number}: {description}",
        "🛠️",
        {"description": "{title}"},
    ),
    EventKind.MAINTENANCE_COMPLETED: Template(
        "Maintenance Completed",
        "✅ Maintenance completed for Room {room_number}: {description}",
        "✅",
        {"description": "{title}"},
    ),
    EventKind.MAINTENANCE_OVERDUE: Template(
        "Maintenance Overdue",
        "⚠️ Maintenance task overdue for Room {room_number}: {description}",
        "⚠️",
        {"description": "{title}"},
    ),
    EventKind.MAINTENANCE_HIGH_COST: Template(
        "High-Cost Maintenance Alert",
        "💰 High-cost maintenance: ${cost} for Room {room_number}",
        "💰",
    ),
    EventKind.ROOM_NEEDS_CLEANING: Template(
        "Room Needs Cleaning",
        "Room {room_number} marked as dirty - cleaning required",
        "🧹",
    ),
    EventKind.ROOM_OUT_OF_ORDER: Template(
        "Room Out of Order",
        "🚫 Room {room_number} marked OUT OF ORDER - {reason}",
        "🚫",
        {"reason": "Maintenance required"},
    ),
    EventKind.ROOM_BACK_IN_SERVICE: Template(
        "Room Back in Service",
        "✅ Room {room_number} is back in service and available for booking",
        "✅",
    ),
    EventKind.ROOM_CHECKOUT_DIRTY: Template(
        "Room Checkout - Cleaning Needed",
        "Room {room_number} checked out - housekeeping needed before next guest",
        "🧹",
    ),
    EventKind.CLEANING_STARTED: Template(
        "Cleaning Started",
        "Cleaning started in Room {room_number}",
        "🧽",
    ),
    EventKind.CLEANING_COMPLETED: Template(
        "Cleaning Completed",
        "✅ Room {room_number} cleaned and ready for guests",
        "✨",
    ),
    EventKind.CLEANING_QUALITY_ISSUE: Template(
        "Cleaning Quality Issue",
        "⚠️ Room {room_number} cleaning scored {quality_score}/5 - re-inspection needed",
        "🔍",
    ),
    EventKind.HOUSEKEEPING_ASSIGNED: Template(
        "Housekeeping Task Assigned",
        "Housekeeping task assigned: {title} for Room {room_number}",
        "🧹",
    ),
    EventKind.DEEP_CLEANING_DUE: Template(
        "Deep Cleaning Due",
        "Room {room_number} is due for deep cleaning",
        "🧼",
    ),
    EventKind.GUEST_SERVICE_CREATED: Template(
        "New Guest Service Request",
        "New {service_type} request from Room {room_number}: {description}",
        "🛎️",
        {"description": "{service_variation}"},
    ),
    EventKind.GUEST_SERVICE_URGENT: Template(
        "URGENT Guest Service",
        "🚨 URGENT: {service_type} request from Room {room_number}",
        "🚨",
    ),
    EventKind.GUEST_SERVICE_ASSIGNED: Template(
        "Service Request Assigned",
        "{service_type} request assigned to you from Room {room_number}",
        "🛎️",
    ),
    EventKind.GUEST_SERVICE_STARTED: Template(
        "Service Request In Progress",
        "{service_type} request for Room {room_number} is being handled",
        "🛎️",
    ),
    EventKind.GUEST_SERVICE_COMPLETED: Template(
        "Service Request Completed",
        "✅ {service_type} request completed for Room {room_number}",
        "✅",
    ),
    EventKind.GUEST_SERVICE_OVERDUE: Template(
        "Service Request Overdue",
        "⚠️ Guest service overdue: {service_type} for Room {room_number}",
        "⚠️",
    ),
    EventKind.GUEST_SERVICE_VIP: Template(
        "VIP Guest Service Request",
        "👑 VIP guest service request: {service_type} from Room {room_number}",
        "👑",
    ),
    EventKind.INVENTORY_LOW_STOCK: Template(
        "Low Inventory Alert",
        "⚠️ Low stock: {item_name} ({current_stock} remaining)",
        "📦",
    ),
    EventKind.INVENTORY_OUT_OF_STOCK: Template(
        "Out of Stock",
        "🚫 OUT OF STOCK: {item_name} - Immediate reorder required",
        "🚫",
    ),
    EventKind.INVENTORY_DAMAGED: Template(
        "Damaged Inventory Found",
        "❌ Damaged inventory: {item_name} in Room {room_number}",
        "❌",
    ),
    EventKind.INVENTORY_MISSING: Template(
        "Missing Inventory",
        "🚨 Missing inventory: {item_name} from Room {room_number}",
        "🚨",
    ),
    EventKind.INVENTORY_HIGH_VALUE_USED: Template(
        "High-Value Item Used",
        "💰 High-value item consumed: {item_name} (${value}) in Room {room_number}",
        "💰",
    ),
    EventKind.DAILY_OPERATIONS_SUMMARY: Template(
        "Daily Operations Summary",
        "📊 Daily Summary: {completed_tasks} completed, {pending_tasks} pending, "
        "{overdue_items} overdue",
        "📊",
    ),
    EventKind.STAFF_PERFORMANCE_ALERT: Template(
        "Staff Performance Alert",
        "📈 Performance alert: {staff_name} - {metric}: {value}",
        "📈",
    ),
    EventKind.REVENUE_IMPACT_ALERT: Template(
        "Revenue Impact Alert",
        "💰 Revenue impact: {out_of_order_rooms} rooms out of service - "
        "Estimated loss: ${estimated_loss}",
        "💰",
    ),
    EventKind.TASK_ASSIGNMENT: Template(
        "Task Assigned",
        "📋 New task assigned: {task_title} - Due: {due_date}",
        "📋",
    ),
    EventKind.TASK_OVERDUE: Template(
        "Task Overdue",
        "⚠️ Task overdue: {task_title} ({overdue_days} days)",
        "⚠️",
    ),
}


class ContentRenderer:
    """Turn ``(kind, payload)`` into human readable content.

    Rendering is pure and never raises: missing fields render as empty text
    and unknown kinds use a generic envelope carrying the whole payload.
    """

    def __init__(self, templates: Mapping[EventKind, Template] | None = None) -> None:
        self._templates = dict(TEMPLATES if templates is None else templates)

    def render(self, kind: EventKind | str, payload: Payload) -> RenderedContent:
        template = self._templates.get(EventKind.coerce(kind))
        data = payload.as_dict()
        if template is None:
            name = kind_value(kind)
            return RenderedContent(
                title=f"Hotel Notification: {name}",
                message=f"Notification for {name}: {json.dumps(data, default=str, ensure_ascii=False)}",
                icon=FALLBACK_ICON,
            )

        fields = _Fields(
            (name, _display(value))
            for name, value in data.items()
            if value is not None and value != ""
        )
        for name, pattern in template.fallbacks.items():
            if name not in fields:
                fields[name] = pattern.format_map(fields)
        return RenderedContent(
            title=template.title,
            message=template.message.format_map(fields),
            icon=template.icon,
        )


__all__ = ["ContentRenderer", "RenderedContent", "TEMPLATES", "Template"]
