"""Adapters turning entity writes into notification intents."""

from .base import EventAdapter
from .forwarder import DomainEventForwarder, default_adapters
from .guest_service import GuestServiceAdapter
from .housekeeping import HousekeepingAdapter
from .maintenance import MaintenanceAdapter
from .payloads import guest_service_payload, housekeeping_payload, maintenance_payload

__all__ = [
    "DomainEventForwarder",
    "EventAdapter",
    "GuestServiceAdapter",
    "HousekeepingAdapter",
    "MaintenanceAdapter",
    "default_adapters",
    "guest_service_payload",
    "housekeeping_payload",
    "maintenance_payload",
]
