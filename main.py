from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from hotel_ops.application.notifications import (
    NotificationJobs,
    build_notification_service,
)
from hotel_ops.config import Settings, get_settings
from hotel_ops.infrastructure.database import (
    build_session_factory,
    engine as default_engine,
    initialize_database,
)
from hotel_ops.infrastructure.notifications import (
    NotificationConnectionManager,
    RealtimeFanOut,
    build_sinks,
    notification_manager,
)
from hotel_ops.interfaces.api.routes import register_routes
from hotel_ops.utils import Clock, SystemClock


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the schema and the notification pipeline, then release them on shutdown."""

    state = app.state
    settings: Settings = state.settings
    await initialize_database(state.engine)
    state.notifications = build_notification_service(
        state.session_factory,
        settings=settings,
        clock=state.clock,
        fan_out=RealtimeFanOut(state.connections, timeout=settings.push_timeout_seconds),
        sinks=build_sinks(settings),
    )
    jobs = None
    if settings.scheduler_enabled:
        jobs = NotificationJobs(
            state.notifications.scheduler, state.notifications.sweeps, settings
        )
        jobs.start()
    try:
        yield
    finally:
        if jobs is not None:
            jobs.shutdown()
        await state.engine.dispose()


def create_app(
    settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
    clock: Clock | None = None,
    connections: NotificationConnectionManager | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or get_settings()
    app = FastAPI(title="Hotel Ops", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine or default_engine
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.clock = clock or SystemClock()
    app.state.connections = connections or notification_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
