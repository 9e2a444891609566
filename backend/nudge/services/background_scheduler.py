"""
Background scheduler service for the delivery pass.

Runs one push delivery pass at the top of every minute using APScheduler,
so a single process can serve notifications without an external cron.
"""

from __future__ import annotations

from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from nudge.core.config import get_settings
from nudge.core.exceptions import ConfigurationError
from nudge.core.logger import logger
from nudge.services.push_dispatcher import PushDispatcher


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Push delivery pass every minute
    - At most one pass in flight; missed ticks are coalesced, never replayed
    """

    def __init__(self, dispatcher: PushDispatcher):
        self._dispatcher = dispatcher
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    async def start(self):
        """Start the scheduler."""
        settings = get_settings()

        # Only run scheduler in non-test environments
        if settings.ENVIRONMENT == "test":
            logger.info("Background scheduler disabled in test environment")
            return
        if not settings.DELIVERY_SCHEDULER_ENABLED:
            logger.info("Background scheduler disabled (DELIVERY_SCHEDULER_ENABLED=false)")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._run_delivery_pass,
            CronTrigger(minute="*"),
            id="push_delivery_pass",
            name="Push Delivery Pass",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info("Background scheduler started:\n  - Push delivery pass: every minute")

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Background scheduler stopped")

    async def _run_delivery_pass(self):
        try:
            await self._dispatcher.run_delivery_pass()
        except Exception as e:
            logger.error(f"Scheduled delivery pass failed: {e}")


# ===========================================
# Global Instance
# ===========================================

_scheduler: Optional[BackgroundScheduler] = None


async def get_background_scheduler() -> Optional[BackgroundScheduler]:
    """
    Get the global background scheduler instance.

    Returns None when push delivery is not configured.
    """
    global _scheduler
    if _scheduler is None:
        from nudge.api.deps import get_push_dispatcher

        try:
            dispatcher = get_push_dispatcher()
        except ConfigurationError as e:
            logger.warning(f"Background scheduler not created: {e.message}")
            return None
        _scheduler = BackgroundScheduler(dispatcher)
    return _scheduler


async def start_background_scheduler():
    """Start the global background scheduler."""
    scheduler = await get_background_scheduler()
    if scheduler:
        await scheduler.start()


async def stop_background_scheduler():
    """Stop the global background scheduler."""
    global _scheduler
    if _scheduler:
        await _scheduler.stop()
        _scheduler = None
