"""Scheduler driving recurring work (quest timer ticks)."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler


logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()


def start_scheduler() -> None:
    """Start the scheduler.

    This should be called during FastAPI app startup. Timer jobs are added
    and removed by the timer engine as quests are started and paused.
    """
    if scheduler.running:
        return
    logger.info("Starting scheduler")
    scheduler.start()


def stop_scheduler() -> None:
    """Stop the scheduler.

    This should be called during FastAPI app shutdown.
    """
    if not scheduler.running:
        return
    logger.info("Stopping scheduler")
    scheduler.shutdown(wait=False)
    logger.info("Scheduler stopped")
