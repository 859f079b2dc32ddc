# backend/portfolio_tracker/services/snapshots/scheduler.py
"""
Daily snapshot trigger.

Wraps an APScheduler BackgroundScheduler with a single cron job that
calls SnapshotService.take_snapshot() at a fixed wall-clock time
(default 17:00 America/Chicago). The same procedure can be run on demand
with run_now().

The scheduler holds no business logic: it opens a session, runs the
service, and logs the outcome.
"""

import logging
from collections.abc import Callable

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from portfolio_tracker.services.snapshots.service import SnapshotResult, SnapshotService
from portfolio_tracker.utils.context import correlation_scope, new_correlation_id

logger = logging.getLogger(__name__)

SNAPSHOT_JOB_ID = "daily_snapshot_job"


class DailySnapshotScheduler:
    """
    Runs the snapshot procedure daily and on demand.

    Example:
        scheduler = DailySnapshotScheduler(service, SessionLocal, hour=17, minute=0)
        scheduler.start()
        ...
        scheduler.shutdown()
    """

    def __init__(
            self,
            service: SnapshotService,
            session_factory: Callable[[], Session],
            hour: int = 17,
            minute: int = 0,
            timezone: str = "America/Chicago",
    ) -> None:
        self._service = service
        self._session_factory = session_factory
        self._hour = hour
        self._minute = minute
        self._timezone = pytz.timezone(timezone)
        self._scheduler: BackgroundScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> BackgroundScheduler:
        """Start the background scheduler with the daily job registered."""
        if self._scheduler is not None:
            return self._scheduler

        scheduler = BackgroundScheduler(timezone=self._timezone)
        scheduler.add_job(
            self._run_job,
            trigger=CronTrigger(hour=self._hour, minute=self._minute, timezone=self._timezone),
            id=SNAPSHOT_JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        scheduler.start()
        self._scheduler = scheduler

        logger.info(
            f"Snapshot scheduler started: daily at "
            f"{self._hour:02d}:{self._minute:02d} {self._timezone.zone}"
        )
        return scheduler

    def shutdown(self) -> None:
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Snapshot scheduler shut down")

    def run_now(self) -> SnapshotResult:
        """
        Take a snapshot immediately in a fresh session.

        Raises:
            StoreError: Loading or persisting failed
        """
        db = self._session_factory()
        try:
            return self._service.take_snapshot(db)
        finally:
            db.close()

    def _run_job(self) -> None:
        # Failures are logged here; the scheduler keeps the job for tomorrow
        with correlation_scope(new_correlation_id("snapshot-job")):
            logger.info("Running scheduled snapshot")
            try:
                result = self.run_now()
            except Exception:
                logger.exception("Scheduled snapshot failed")
                return
            if not result.taken:
                logger.info("Scheduled snapshot skipped: no holdings")
