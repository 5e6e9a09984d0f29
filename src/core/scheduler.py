"""Scheduler for automated jobs (periodic overdue automation pass)."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.core.config import constants, settings
from src.core.scheduler_tracker import retry_job_with_backoff
from src.services import automation_service


logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()

# Jobs reported by the /health/scheduler endpoint
TRACKED_JOBS = [constants.OVERDUE_JOB_ID]


async def run_overdue_automations() -> None:
    """Evaluate ON_OVERDUE automation rules against the current task collection.

    Errors propagate to `retry_job_with_backoff`, which retries and tracks them.
    """
    outcome = await automation_service.run_overdue_check()
    if outcome.fired_rule_ids:
        logger.info(
            "Overdue automations fired %d rule(s), %d notification(s)",
            len(outcome.fired_rule_ids),
            len(outcome.notifications),
        )


async def _overdue_job() -> None:
    await retry_job_with_backoff(run_overdue_automations, constants.OVERDUE_JOB_ID)


def start_scheduler() -> None:
    """Start the scheduler and register all jobs.

    This should be called during FastAPI app startup.
    """
    if not settings.enable_scheduler:
        logger.info("Scheduler disabled by configuration")
        return

    logger.info("Starting scheduler")

    scheduler.add_job(
        _overdue_job,
        trigger=IntervalTrigger(seconds=settings.overdue_check_interval_seconds),
        id=constants.OVERDUE_JOB_ID,
        name="Run Overdue Automation Rules",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info("Scheduled overdue automations job: every %ds", settings.overdue_check_interval_seconds)

    scheduler.start()
    logger.info("Scheduler started successfully")


def stop_scheduler() -> None:
    """Stop the scheduler.

    This should be called during FastAPI app shutdown.
    """
    if not scheduler.running:
        return
    logger.info("Stopping scheduler")
    scheduler.shutdown(wait=True)
    logger.info("Scheduler stopped")
