"""Scheduler that keeps live notification queries in step with the database."""

import threading
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.feed.store import NotificationStore
from app.logging import get_logger
from app.persistence import PersistenceError

logger = get_logger(__name__, component="scheduler")

REFRESH_JOB_ID = "store-refresh"


class StoreRefreshScheduler:
    """
    Wraps APScheduler to call ``store.refresh()`` at a fixed interval.

    Writes made by another process (the HTTP service, a CLI ``notify``)
    only reach live queries through these refreshes.
    """

    def __init__(
        self,
        store: NotificationStore,
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the scheduler service.

        Args:
            store: Store whose live queries are refreshed
            interval_seconds: Interval between refreshes in seconds
            shutdown_event: Optional event to set on shutdown for coordination
        """
        self.store = store
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,  # Prevent overlapping refreshes
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def refresh_once(self) -> int:
        """Run one refresh; database errors are logged and the job keeps its schedule."""
        try:
            return self.store.refresh()
        except PersistenceError as e:
            logger.error(
                f"Store refresh failed: {e}",
                extra={"event": "scheduler.refresh.failed", "error_type": type(e).__name__},
            )
            return 0

    def start(self) -> None:
        """Register the refresh job and start the background thread."""
        trigger = IntervalTrigger(
            seconds=self.interval_seconds,
            timezone=timezone.utc,
        )

        self.scheduler.add_job(
            func=self.refresh_once,
            trigger=trigger,
            id=REFRESH_JOB_ID,
            name="Notification store refresh",
            replace_existing=True,
        )

        self.scheduler.start()

        logger.info(
            f"Scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown the scheduler gracefully.

        Args:
            wait: If True, wait for a running refresh to complete before returning
        """
        logger.info(
            "Shutting down scheduler",
            extra={
                "event": "scheduler.stopping",
                "wait_for_jobs": wait,
            },
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info(
            "Scheduler shutdown complete",
            extra={"event": "scheduler.stopped"}
        )

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(REFRESH_JOB_ID)
        return job.next_run_time if job else None
