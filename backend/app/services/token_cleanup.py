"""
Background Task: Token Cleanup

Periodically deletes session tokens that expired without ever being presented
again. `TokenService.verify_token` already rejects and removes expired tokens
on use; this sweep only keeps abandoned ones from piling up in the table.

Usage:
    job = TokenCleanupJob(token_service, interval_minutes=60)
    job.start()      # on application startup
    # ... app runs ...
    job.stop()       # on application shutdown
"""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.services.token_service import TokenService

logger = logging.getLogger("uvicorn.error")

JOB_ID = "token_cleanup"


class TokenCleanupJob:
    """Owns the scheduler that runs the expired-token sweep."""

    def __init__(self, token_service: TokenService, interval_minutes: int = 60):
        self.token_service = token_service
        self.interval_minutes = interval_minutes
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def run_once(self) -> int:
        """
        Run a single sweep.

        Errors are logged and swallowed so that a temporarily unreachable
        database does not stop future runs; returns 0 in that case.
        """
        try:
            deleted = await self.token_service.cleanup_expired()
        except Exception as e:
            logger.error("[token-cleanup] sweep failed: %s", e, exc_info=True)
            return 0
        if deleted:
            logger.info("[token-cleanup] deleted %s expired tokens", deleted)
        else:
            logger.debug("[token-cleanup] no expired tokens")
        return deleted

    def start(self) -> None:
        """Start the scheduler. Must be called from within the running event loop."""
        if self.running:
            return
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.add_job(
            self.run_once,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            name="Delete expired session tokens",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("[token-cleanup] scheduler started (interval: %s minutes)", self.interval_minutes)

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("[token-cleanup] scheduler stopped")
