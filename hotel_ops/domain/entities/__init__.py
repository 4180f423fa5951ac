"""Domain entities exposed by the application."""

from .domain_event import (
    ENTITY_GUEST_SERVICE,
    ENTITY_HOUSEKEEPING_TASK,
    ENTITY_MAINTENANCE_TASK,
    DomainEvent,
    FieldChange,
    WriteResult,
    diff_fields,
)
from .event_kind import EventKind, kind_value
from .intent import (
    AUTO,
    AutoRecipients,
    EventIntent,
    ExplicitRecipients,
    Recipients,
    explicit,
    recipients_from,
)
from .notification import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_PUSH,
    CHANNEL_SMS,
    CHANNELS,
    COALESCIBLE_STATUSES,
    DEFAULT_CHANNELS,
    DELIVERY_DELIVERED,
    DELIVERY_FAILED,
    ESCALATED_PRIORITIES,
    NOTIFICATION_STATUSES,
    PRIORITIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_SENT,
    STATUS_SUPPRESSED,
    TERMINAL_STATUSES,
    NotificationRecord,
    is_legal_transition,
    normalize_priority,
)
from .payloads import (
    DailyCheckPayload,
    GenericPayload,
    GuestServicePayload,
    HousekeepingPayload,
    InventoryPayload,
    MaintenancePayload,
    OperationsSummaryPayload,
    Payload,
    RevenueImpactPayload,
    RoomStatusPayload,
    StaffPerformancePayload,
    TaskPayload,
    build_payload,
    payload_type_for,
)
from .tasks import (
    GUEST_SERVICE_URGENT_PRIORITIES,
    HOUSEKEEPING_TYPE_CLEANING,
    HOUSEKEEPING_TYPE_DEEP_CLEAN,
    MAINTENANCE_PRIORITY_EMERGENCY,
    OPEN_TASK_STATUSES,
    QUALITY_ISSUE_THRESHOLD,
    TASK_STATUS_ASSIGNED,
    TASK_STATUS_CANCELLED,
    TASK_STATUS_COMPLETED,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_PENDING,
    TASK_STATUSES,
    GuestService,
    HousekeepingTask,
    InventoryLine,
    MaintenanceTask,
)
from .user import (
    ADMIN_CHANNEL_ROLES,
    LOYALTY_TIERS,
    ROLE_ADMIN,
    ROLE_GUEST,
    ROLE_HOUSEKEEPING,
    ROLE_HR,
    ROLE_MAINTENANCE,
    ROLE_MANAGER,
    ROLE_STAFF,
    ROLES,
    VIP_TIERS,
    Assignment,
    User,
)

__all__ = [
    "ADMIN_CHANNEL_ROLES",
    "AUTO",
    "Assignment",
    "AutoRecipients",
    "CHANNELS",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_PUSH",
    "CHANNEL_SMS",
    "COALESCIBLE_STATUSES",
    "DEFAULT_CHANNELS",
    "DELIVERY_DELIVERED",
    "DELIVERY_FAILED",
    "DailyCheckPayload",
    "DomainEvent",
    "ENTITY_GUEST_SERVICE",
    "ENTITY_HOUSEKEEPING_TASK",
    "ENTITY_MAINTENANCE_TASK",
    "ESCALATED_PRIORITIES",
    "EventIntent",
    "EventKind",
    "ExplicitRecipients",
    "FieldChange",
    "GUEST_SERVICE_URGENT_PRIORITIES",
    "GenericPayload",
    "GuestService",
    "GuestServicePayload",
    "HOUSEKEEPING_TYPE_CLEANING",
    "HOUSEKEEPING_TYPE_DEEP_CLEAN",
    "HousekeepingPayload",
    "HousekeepingTask",
    "InventoryLine",
    "InventoryPayload",
    "LOYALTY_TIERS",
    "MAINTENANCE_PRIORITY_EMERGENCY",
    "MaintenancePayload",
    "MaintenanceTask",
    "NOTIFICATION_STATUSES",
    "NotificationRecord",
    "OPEN_TASK_STATUSES",
    "OperationsSummaryPayload",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
    "Payload",
    "QUALITY_ISSUE_THRESHOLD",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_GUEST",
    "ROLE_HOUSEKEEPING",
    "ROLE_HR",
    "ROLE_MAINTENANCE",
    "ROLE_MANAGER",
    "ROLE_STAFF",
    "Recipients",
    "RevenueImpactPayload",
    "RoomStatusPayload",
    "STATUS_FAILED",
    "STATUS_PENDING",
    "STATUS_SENT",
    "STATUS_SUPPRESSED",
    "StaffPerformancePayload",
    "TASK_STATUSES",
    "TASK_STATUS_ASSIGNED",
    "TASK_STATUS_CANCELLED",
    "TASK_STATUS_COMPLETED",
    "TASK_STATUS_IN_PROGRESS",
    "TASK_STATUS_PENDING",
    "TERMINAL_STATUSES",
    "TaskPayload",
    "User",
    "VIP_TIERS",
    "WriteResult",
    "build_payload",
    "diff_fields",
    "explicit",
    "is_legal_transition",
    "kind_value",
    "normalize_priority",
    "payload_type_for",
    "recipients_from",
]
