"""Domain entity representing a hotel user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ROLE_GUEST = "guest"
ROLE_STAFF = "staff"
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_HOUSEKEEPING = "housekeeping"
ROLE_MAINTENANCE = "maintenance"
ROLE_HR = "hr"

ROLES = frozenset(
    {
        ROLE_GUEST,
        ROLE_STAFF,
        ROLE_ADMIN,
        ROLE_MANAGER,
        ROLE_HOUSEKEEPING,
        ROLE_MAINTENANCE,
        ROLE_HR,
    }
)

# Roles subscribed to the hotel-wide admin channel.
ADMIN_CHANNEL_ROLES = frozenset({ROLE_ADMIN, ROLE_MANAGER})

LOYALTY_TIERS = ("bronze", "silver", "gold", "platinum", "diamond")
VIP_TIERS = frozenset({"platinum", "diamond"})


@dataclass
class User:
    """Core attributes of a user belonging to a single hotel."""

    id: int | None
    hotel_id: int
    name: str
    email: str
    role: str
    department_id: int | None = None
    loyalty_tier: str | None = None
    last_login: datetime | None = None
    is_active: bool = True
    deleted: bool = False

    def has_role(self, *roles: str) -> bool:
        """Return ``True`` when the user's role is one of ``roles``."""

        return self.role.lower() in {role.lower() for role in roles}

    def is_admin(self) -> bool:
        """Return ``True`` when the user manages the hotel."""

        return self.has_role(*ADMIN_CHANNEL_ROLES)

    def is_vip(self) -> bool:
        return (self.loyalty_tier or "").lower() in VIP_TIERS

    def is_reachable(self) -> bool:
        return self.is_active and not self.deleted


@dataclass(frozen=True)
class Assignment:
    """Role and department of a user referenced by an assignment field."""

    user_id: int
    hotel_id: int
    role: str
    department_id: int | None


__all__ = [
    "ADMIN_CHANNEL_ROLES",
    "Assignment",
    "LOYALTY_TIERS",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_GUEST",
    "ROLE_HOUSEKEEPING",
    "ROLE_HR",
    "ROLE_MAINTENANCE",
    "ROLE_MANAGER",
    "ROLE_STAFF",
    "User",
    "VIP_TIERS",
]
