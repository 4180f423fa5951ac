"""Events returned by repositories after a committed entity write."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, TypeVar

ENTITY_HOUSEKEEPING_TASK = "housekeeping_task"
ENTITY_MAINTENANCE_TASK = "maintenance_task"
ENTITY_GUEST_SERVICE = "guest_service"

EntityT = TypeVar("EntityT")


@dataclass(frozen=True)
class FieldChange:
    before: Any
    after: Any


@dataclass(frozen=True)
class DomainEvent(Generic[EntityT]):
    """A durable create or update of an entity, with the watched fields that changed."""

    entity_type: str
    entity: EntityT
    created: bool
    changes: Mapping[str, FieldChange] = field(default_factory=dict)

    @property
    def hotel_id(self) -> int:
        return self.entity.hotel_id

    def changed(self, name: str) -> bool:
        return name in self.changes

    def change(self, name: str) -> FieldChange | None:
        return self.changes.get(name)


@dataclass(frozen=True)
class WriteResult(Generic[EntityT]):
    """Outcome of a repository write: the stored entity and its domain events."""

    entity: EntityT
    events: tuple[DomainEvent[EntityT], ...] = ()


def diff_fields(
    before: Any, after: Any, names: tuple[str, ...]
) -> dict[str, FieldChange]:
    """Return the watched ``names`` whose value differs between two snapshots."""

    changes: dict[str, FieldChange] = {}
    for name in names:
        old = getattr(before, name, None)
        new = getattr(after, name, None)
        if old != new:
            changes[name] = FieldChange(before=old, after=new)
    return changes


__all__ = [
    "DomainEvent",
    "ENTITY_GUEST_SERVICE",
    "ENTITY_HOUSEKEEPING_TASK",
    "ENTITY_MAINTENANCE_TASK",
    "FieldChange",
    "WriteResult",
    "diff_fields",
]
