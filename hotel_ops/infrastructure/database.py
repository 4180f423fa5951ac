"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from hotel_ops.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``database_url``.

    SQLite connections share a single static pool so that in-memory databases
    survive across sessions.
    """

    engine_kwargs: dict[str, object] = {"echo": echo}
    if database_url.startswith("sqlite"):
        engine_kwargs.update(
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine_kwargs["pool_pre_ping"] = True
    return create_async_engine(database_url, **engine_kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory whose entities stay usable after commit."""

    return async_sessionmaker(bind=bind, expire_on_commit=False, autoflush=False)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.database_echo)
SessionLocal = build_session_factory(engine)


async def initialize_database(bind: AsyncEngine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from hotel_ops.infrastructure import models  # noqa: F401  # ensure models are imported

    target = bind or engine
    async with target.begin() as connection:
        await connection.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Database schema ready")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session and close it afterwards."""

    async with SessionLocal() as session:
        yield session


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "build_session_factory",
    "engine",
    "get_db",
    "initialize_database",
]
