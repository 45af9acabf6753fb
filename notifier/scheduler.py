"""
Due-Date Notification Scheduler

Owns the background scheduler that drives the scan cycle and the retention
sweeper. Nothing is registered at import time: top-level wiring constructs a
NotificationScheduler, calls start(), and calls shutdown() on exit.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from .config import NotifierConfig, config as default_config
from .scan import ScanCycle
from .sweeper import RetentionSweeper

logger = logging.getLogger(__name__)

SCAN_JOB_ID = "due_date_scan_job"
SWEEP_JOB_ID = "retention_sweep_job"


class NotificationScheduler:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        config: Optional[NotifierConfig] = None,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self.config = config or default_config
        self.timezone = pytz.timezone(self.config.SCHEDULER_TIMEZONE)
        self.scheduler = scheduler or BackgroundScheduler(timezone=self.timezone)
        self.scan_cycle = ScanCycle(
            session_factory,
            window=timedelta(hours=self.config.DUE_SOON_WINDOW_HOURS),
            write_timeout=self.config.WRITE_TIMEOUT_SECONDS,
            fetch_timeout=self.config.FETCH_TIMEOUT_SECONDS,
            fetch_failure_escalation=self.config.FETCH_FAILURE_ESCALATION,
            display_timezone=self.config.DISPLAY_TIMEZONE,
        )
        self.sweeper = RetentionSweeper(session_factory, horizon=timedelta(days=self.config.RETENTION_DAYS))

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Register both jobs and start the scheduler thread."""
        if self.running:
            logger.warning("Notification scheduler already running")
            return

        # Job 1: Due-date scan (every SCAN_INTERVAL_SECONDS)
        self.scheduler.add_job(
            self.scan_cycle.run,
            "interval",
            seconds=self.config.SCAN_INTERVAL_SECONDS,
            id=SCAN_JOB_ID,
            max_instances=self.config.SCAN_MAX_INSTANCES,
            coalesce=True,
            replace_existing=True
        )

        # Job 2: Retention sweep, once now and then every SWEEP_INTERVAL_HOURS
        self.scheduler.add_job(
            self.sweeper.run,
            "interval",
            hours=self.config.SWEEP_INTERVAL_HOURS,
            id=SWEEP_JOB_ID,
            next_run_time=datetime.now(self.timezone),
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )

        self.scheduler.start()
        logger.info(
            f"🚀 Notification scheduler started: due-date scan (every {self.config.SCAN_INTERVAL_SECONDS:g}s) "
            f"+ retention sweep (every {self.config.SWEEP_INTERVAL_HOURS:g}h, "
            f"keeping {self.config.RETENTION_DAYS} days)"
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop the scheduler; with wait=True running jobs finish first."""
        if not self.running:
            return
        self.scheduler.shutdown(wait=wait)
        logger.info("🛑 Notification scheduler stopped")
