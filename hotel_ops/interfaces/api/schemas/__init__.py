from .notification import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
)

__all__ = [
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
]
