"""Decide which users of a hotel receive a notification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol, Union

from hotel_ops.domain.entities import (
    ROLE_ADMIN,
    ROLE_HOUSEKEEPING,
    ROLE_MAINTENANCE,
    ROLE_MANAGER,
    ROLE_STAFF,
    Assignment,
    AutoRecipients,
    EventKind,
    ExplicitRecipients,
    Payload,
    Recipients,
)

logger = logging.getLogger(__name__)


class Directory(Protocol):
    async def find_by_role(self, hotel_id: int, roles) -> set[int]: ...

    async def find_by_assignment(self, user_id: int | None) -> Assignment | None: ...


@dataclass(frozen=True)
class RoleRule:
    """Every reachable user of the hotel holding one of ``roles``."""

    roles: frozenset[str]


@dataclass(frozen=True)
class FieldRule:
    """Users referenced by the named payload fields."""

    fields: tuple[str, ...]


@dataclass(frozen=True)
class UnionRule:
    rules: tuple["RoutingRule", ...]


RoutingRule = Union[RoleRule, FieldRule, UnionRule]


def roles(*names: str) -> RoleRule:
    return RoleRule(frozenset(names))


def payload_fields(*names: str) -> FieldRule:
    return FieldRule(tuple(names))


def union(*rules: RoutingRule) -> UnionRule:
    return UnionRule(tuple(rules))


MANAGEMENT = roles(ROLE_ADMIN, ROLE_MANAGER)

DEFAULT_RULE: RoutingRule = MANAGEMENT

ROUTING: dict[EventKind, RoutingRule] = {
    EventKind.DAILY_CHECK_ASSIGNED: payload_fields("assigned_to"),
    EventKind.DAILY_CHECK_OVERDUE: MANAGEMENT,
    EventKind.DAILY_CHECK_COMPLETED: MANAGEMENT,
    EventKind.DAILY_CHECK_ISSUES: roles(ROLE_ADMIN, ROLE_MANAGER, ROLE_MAINTENANCE),
    EventKind.MAINTENANCE_REQUEST_CREATED: roles(ROLE_ADMIN, ROLE_MAINTENANCE),
    EventKind.MAINTENANCE_URGENT: roles(ROLE_ADMIN, ROLE_MANAGER, ROLE_MAINTENANCE),
    EventKind.MAINTENANCE_ASSIGNED: payload_fields("assigned_to"),
    EventKind.MAINTENANCE_STARTED: union(roles(ROLE_ADMIN), payload_fields("created_by")),
    EventKind.MAINTENANCE_COMPLETED: union(roles(ROLE_ADMIN), payload_fields("created_by")),
    EventKind.MAINTENANCE_OVERDUE: roles(ROLE_ADMIN, ROLE_MANAGER, ROLE_MAINTENANCE),
    EventKind.MAINTENANCE_HIGH_COST: MANAGEMENT,
    EventKind.ROOM_NEEDS_CLEANING: roles(ROLE_STAFF, ROLE_HOUSEKEEPING),
    EventKind.ROOM_OUT_OF_ORDER: MANAGEMENT,
    EventKind.ROOM_CHECKOUT_DIRTY: roles(ROLE_STAFF, ROLE_HOUSEKEEPING),
    EventKind.CLEANING_STARTED: roles(ROLE_ADMIN, ROLE_STAFF),
    EventKind.CLEANING_COMPLETED: roles(ROLE_ADMIN, ROLE_STAFF),
    EventKind.CLEANING_QUALITY_ISSUE: union(MANAGEMENT, payload_fields("assigned_to")),
    EventKind.HOUSEKEEPING_ASSIGNED: payload_fields("assigned_to"),
    EventKind.DEEP_CLEANING_DUE: roles(ROLE_STAFF, ROLE_HOUSEKEEPING),
    EventKind.GUEST_SERVICE_CREATED: roles(ROLE_STAFF, ROLE_ADMIN),
    EventKind.GUEST_SERVICE_URGENT: MANAGEMENT,
    EventKind.GUEST_SERVICE_ASSIGNED: payload_fields("assigned_to"),
    EventKind.GUEST_SERVICE_OVERDUE: union(MANAGEMENT, payload_fields("assigned_to")),
    EventKind.GUEST_SERVICE_VIP: MANAGEMENT,
    EventKind.INVENTORY_LOW_STOCK: MANAGEMENT,
    EventKind.INVENTORY_OUT_OF_STOCK: MANAGEMENT,
    EventKind.INVENTORY_MISSING: MANAGEMENT,
    EventKind.INVENTORY_HIGH_VALUE_USED: MANAGEMENT,
    EventKind.TASK_ASSIGNMENT: payload_fields("assigned_to"),
}


def _as_user_id(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non numeric recipient reference %r", value)
        return None


class RecipientResolver:
    """Resolve recipients of an intent against the identity directory."""

    def __init__(
        self,
        directory: Directory,
        routing: Mapping[EventKind, RoutingRule] | None = None,
        default_rule: RoutingRule = DEFAULT_RULE,
    ) -> None:
        self._directory = directory
        self._routing = dict(ROUTING if routing is None else routing)
        self._default_rule = default_rule

    def rule_for(self, kind: EventKind | str) -> RoutingRule:
        return self._routing.get(EventKind.coerce(kind), self._default_rule)

    async def resolve(
        self,
        kind: EventKind | str,
        payload: Payload,
        recipients: Recipients,
        hotel_id: int,
    ) -> list[int]:
        """Return the de-duplicated recipient ids of an intent.

        Explicit ids are returned as given without consulting the directory,
        unless automatic resolution was also requested, in which case both
        sets are joined.
        """

        explicit_ids: list[int] = []
        if isinstance(recipients, ExplicitRecipients):
            explicit_ids = list(dict.fromkeys(recipients.user_ids))
            if not recipients.include_auto:
                return explicit_ids
        elif not isinstance(recipients, AutoRecipients):
            raise TypeError(f"Unsupported recipients value: {recipients!r}")

        resolved = await self._apply(self.rule_for(kind), payload, hotel_id)
        return explicit_ids + [
            user_id for user_id in sorted(resolved) if user_id not in explicit_ids
        ]

    async def _apply(self, rule: RoutingRule, payload: Payload, hotel_id: int) -> set[int]:
        if isinstance(rule, RoleRule):
            return set(await self._directory.find_by_role(hotel_id, rule.roles))
        if isinstance(rule, FieldRule):
            found = {_as_user_id(payload.get(name)) for name in rule.fields}
            found.discard(None)
            return {user_id for user_id in found if await self._in_hotel(user_id, hotel_id)}
        result: set[int] = set()
        for item in rule.rules:
            result |= await self._apply(item, payload, hotel_id)
        return result

    async def _in_hotel(self, user_id: int, hotel_id: int) -> bool:
        assignment = await self._directory.find_by_assignment(user_id)
        if assignment is None or assignment.hotel_id != hotel_id:
            logger.warning(
                "Skipping user %s referenced by a payload of hotel %s", user_id, hotel_id
            )
            return False
        return True


__all__ = [
    "DEFAULT_RULE",
    "FieldRule",
    "RecipientResolver",
    "RoleRule",
    "ROUTING",
    "RoutingRule",
    "UnionRule",
    "payload_fields",
    "roles",
    "union",
]
