"""Background task scheduler for the nightly streak recomputation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .logging_config import get_logger
from .services.recompute import RecomputeSummary

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger("scheduler")

RECOMPUTE_JOB_ID = "recompute_streaks"


class StreakScheduler:
    """Runs the batch streak recomputation once a day."""

    def __init__(self, ctx: AppContext):
        """Initialize the scheduler with app context.

        Args:
            ctx: Application context with repositories and config
        """
        self.ctx = ctx
        self.scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def build_trigger(self) -> CronTrigger:
        """Cron trigger for the configured recompute time."""
        return CronTrigger(
            hour=self.ctx.config.RECOMPUTE_HOUR,
            minute=self.ctx.config.RECOMPUTE_MINUTE,
        )

    def start(self) -> None:
        """Start the background scheduler."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            func=self._run_recompute,
            trigger=self.build_trigger(),
            id=RECOMPUTE_JOB_ID,
            name="Nightly Streak Recomputation",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info(
            "Background scheduler started",
            extra={
                "job_id": RECOMPUTE_JOB_ID,
                "hour": self.ctx.config.RECOMPUTE_HOUR,
                "minute": self.ctx.config.RECOMPUTE_MINUTE,
            },
        )

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def run_now(self) -> RecomputeSummary:
        """Run the recomputation synchronously in the calling thread."""
        return self.ctx.recompute_streaks()

    def _run_recompute(self) -> None:
        try:
            self.ctx.recompute_streaks()
        except Exception as exc:
            logger.error(f"Scheduled streak recomputation failed: {exc}", exc_info=True)


def create_scheduler(ctx: AppContext, *, auto_start: bool = False) -> StreakScheduler:
    """Create and optionally start a streak scheduler.

    Args:
        ctx: Application context
        auto_start: Whether to start the scheduler immediately

    Returns:
        StreakScheduler instance
    """
    scheduler = StreakScheduler(ctx)
    if auto_start:
        scheduler.start()
    return scheduler


__all__ = ["RECOMPUTE_JOB_ID", "StreakScheduler", "create_scheduler"]
