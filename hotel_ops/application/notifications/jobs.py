"""APScheduler jobs driving the scheduler tick, sweeps and daily summary."""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from hotel_ops.config import Settings
from hotel_ops.utils import resolve_timezone

from .scheduler import NotificationScheduler
from .sweeps import OperationsSweeps

logger = logging.getLogger(__name__)

JOB_RELEASE_DUE = "notifications.release_due"
JOB_MAINTENANCE_OVERDUE = "notifications.maintenance_overdue"
JOB_GUEST_SERVICE_OVERDUE = "notifications.guest_service_overdue"
JOB_DAILY_SUMMARY = "notifications.daily_summary"


def daily_summary_zones(settings: Settings) -> list[str]:
    """Return every hotel zone; each gets its own summary job at the local hour."""

    return sorted({settings.app_timezone, *settings.hotel_timezones.values()})


class NotificationJobs:
    """Own the periodic jobs of the notification pipeline."""

    def __init__(
        self,
        scheduler: NotificationScheduler,
        sweeps: OperationsSweeps,
        settings: Settings,
        backend: AsyncIOScheduler | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._sweeps = sweeps
        self._settings = settings
        self._backend = backend or AsyncIOScheduler(
            timezone=resolve_timezone(settings.app_timezone)
        )

    @property
    def backend(self) -> AsyncIOScheduler:
        return self._backend

    def register(self) -> None:
        settings = self._settings
        self._add(
            JOB_RELEASE_DUE,
            self._scheduler.tick,
            IntervalTrigger(seconds=settings.scheduler_interval_seconds),
        )
        self._add(
            JOB_MAINTENANCE_OVERDUE,
            self._sweeps.sweep_overdue_maintenance,
            IntervalTrigger(seconds=settings.overdue_sweep_interval_seconds),
        )
        self._add(
            JOB_GUEST_SERVICE_OVERDUE,
            self._sweeps.sweep_overdue_guest_services,
            IntervalTrigger(seconds=settings.overdue_sweep_interval_seconds),
        )
        for zone in daily_summary_zones(settings):
            self._add(
                f"{JOB_DAILY_SUMMARY}.{zone}",
                self._sweeps.send_daily_summaries,
                CronTrigger(
                    hour=settings.daily_summary_hour,
                    minute=0,
                    timezone=resolve_timezone(zone),
                ),
                kwargs={"timezone_name": zone},
            )

    def start(self) -> None:
        if self._backend.running:
            return
        self.register()
        self._backend.start()
        logger.info("Notification jobs started")

    def shutdown(self) -> None:
        if self._backend.running:
            self._backend.shutdown(wait=False)
            logger.info("Notification jobs shut down")

    def _add(self, job_id: str, func, trigger, kwargs: dict | None = None) -> None:
        self._backend.add_job(
            func,
            trigger=trigger,
            kwargs=kwargs,
            id=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("Job added: %s", job_id)


__all__ = [
    "JOB_DAILY_SUMMARY",
    "JOB_GUEST_SERVICE_OVERDUE",
    "JOB_MAINTENANCE_OVERDUE",
    "JOB_RELEASE_DUE",
    "NotificationJobs",
    "daily_summary_zones",
]
