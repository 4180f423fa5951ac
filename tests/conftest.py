"""Shared fixtures for the notification pipeline tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from sqlalchemy import select

from hotel_ops.application.notifications import build_notification_service
from hotel_ops.config import Settings
from hotel_ops.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from hotel_ops.infrastructure.models import NotificationModel, UserModel
from hotel_ops.infrastructure.notifications import (
    NotificationConnectionManager,
    RealtimeFanOut,
)
from hotel_ops.infrastructure.repositories import NotificationRepository
from hotel_ops.utils import FixedClock

START = datetime(2024, 5, 14, 10, 0, tzinfo=timezone.utc)


class RecordingConnection:
    """Websocket stand-in keeping every JSON message it was sent."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[dict[str, Any]] = []

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.messages.append(data)

    def topics(self) -> list[str]:
        return [message["type"] for message in self.messages]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, scheduler_enabled=False)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    await initialize_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def connections() -> NotificationConnectionManager:
    return NotificationConnectionManager()


@pytest.fixture
def service(session_factory, settings, clock, connections):
    return build_notification_service(
        session_factory,
        settings=settings,
        clock=clock,
        fan_out=RealtimeFanOut(connections, timeout=1.0),
    )


@pytest.fixture
def add_user(session_factory):
    """Insert a user row and return its id."""

    async def _add_user(
        role: str = "staff",
        *,
        hotel_id: int = 1,
        is_active: bool = True,
        deleted: bool = False,
        loyalty_tier: str | None = None,
    ) -> int:
        async with session_factory() as session:
            model = UserModel(
                hotel_id=hotel_id,
                name=f"{role.title()} {hotel_id}",
                email=f"{role}.{hotel_id}@example.com",
                role=role,
                loyalty_tier=loyalty_tier,
                is_active=is_active,
                deleted=deleted,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return model.id

    return _add_user


@pytest.fixture
def all_notifications(session_factory):
    """Return every stored notification record, oldest first."""

    async def _all_notifications(**filters: Any):
        async with session_factory() as session:
            statement = select(NotificationModel).order_by(NotificationModel.id)
            for name, value in filters.items():
                statement = statement.where(getattr(NotificationModel, name) == value)
            result = await session.execute(statement)
            return [NotificationRepository._to_entity(model) for model in result.scalars()]

    return _all_notifications


@pytest.fixture
def make_connection():
    """Return a factory of recording websocket stand-ins."""

    return RecordingConnection
