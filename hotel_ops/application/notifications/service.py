"""Assemble the notification pipeline once per application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hotel_ops.application.adapters import DomainEventForwarder, default_adapters
from hotel_ops.config import Settings
from hotel_ops.infrastructure.notifications import NotificationSink, RealtimeFanOut
from hotel_ops.utils import Clock

from .delivery import NotificationDelivery
from .dispatcher import NotificationDispatcher
from .rendering import ContentRenderer
from .scheduler import NotificationScheduler
from .suppression import SuppressionEngine
from .sweeps import OperationsSweeps


@dataclass
class NotificationService:
    dispatcher: NotificationDispatcher
    scheduler: NotificationScheduler
    sweeps: OperationsSweeps
    forwarder: DomainEventForwarder
    clock: Clock


def build_notification_service(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    settings: Settings,
    clock: Clock,
    fan_out: RealtimeFanOut,
    sinks: Mapping[str, NotificationSink] | None = None,
) -> NotificationService:
    delivery = NotificationDelivery(fan_out, clock, sinks)
    dispatcher = NotificationDispatcher(
        session_factory,
        renderer=ContentRenderer(),
        suppression=SuppressionEngine(settings, clock),
        delivery=delivery,
        clock=clock,
    )
    return NotificationService(
        dispatcher=dispatcher,
        scheduler=NotificationScheduler(session_factory, delivery=delivery, clock=clock),
        sweeps=OperationsSweeps(
            session_factory, dispatcher, settings=settings, clock=clock
        ),
        forwarder=DomainEventForwarder(
            dispatcher, session_factory, default_adapters(settings)
        ),
        clock=clock,
    )


__all__ = ["NotificationService", "build_notification_service"]
