"""APScheduler wiring for the periodic scheduling jobs."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from taskboard.application.jobs import JobRunner
from taskboard.config import Settings, get_settings
from taskboard.utils import get_app_timezone

logger = logging.getLogger(__name__)

# Only one scheduler per process, even if startup runs twice.
_scheduler: BackgroundScheduler | None = None


def _overdue_trigger(settings: Settings) -> dict[str, object]:
    if settings.overdue_interval_seconds:
        return {"trigger": "interval", "seconds": settings.overdue_interval_seconds}
    return {
        "trigger": "cron",
        "hour": settings.overdue_cron_hour,
        "minute": settings.overdue_cron_minute,
    }


def build_scheduler(runner: JobRunner, settings: Settings) -> BackgroundScheduler:
    """Create a scheduler with the reminder, overdue, dispatch and digest jobs."""

    scheduler = BackgroundScheduler(timezone=get_app_timezone())
    common = {"replace_existing": True, "max_instances": 1, "coalesce": True}

    scheduler.add_job(
        runner.run_reminders,
        trigger="interval",
        seconds=settings.reminder_interval_seconds,
        id="scan_reminders",
        **common,
    )
    scheduler.add_job(
        runner.run_overdue,
        id="track_overdue",
        **_overdue_trigger(settings),
        **common,
    )
    scheduler.add_job(
        runner.run_dispatch,
        trigger="interval",
        seconds=settings.dispatch_interval_seconds,
        id="dispatch_notifications",
        **common,
    )
    if settings.digest_enabled:
        scheduler.add_job(
            runner.run_digest,
            id="overdue_digest",
            trigger="cron",
            hour=settings.overdue_cron_hour,
            minute=settings.overdue_cron_minute,
            **common,
        )
    return scheduler


def start_scheduler(runner: JobRunner, settings: Settings | None = None) -> BackgroundScheduler | None:
    """Start the background scheduler unless disabled or already running."""

    global _scheduler

    settings = settings or get_settings()
    if not settings.enable_scheduler:
        logger.info("Scheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    if _scheduler is not None:
        logger.info("Scheduler already running, skipping initialization")
        return _scheduler

    _scheduler = build_scheduler(runner, settings)
    _scheduler.start()
    logger.info(
        "Scheduler started: reminders every %ss, dispatch every %ss",
        settings.reminder_interval_seconds,
        settings.dispatch_interval_seconds,
    )
    return _scheduler


def shutdown_scheduler() -> None:
    """Stop the running scheduler, letting in-flight jobs finish."""

    global _scheduler

    if _scheduler is None:
        return
    _scheduler.shutdown(wait=True)
    _scheduler = None
    logger.info("Scheduler stopped")


__all__ = ["build_scheduler", "shutdown_scheduler", "start_scheduler"]
