"""
Scan Cycle

One pass over every user's active tasks:

    Fetching -> Classifying -> Emitting

Each task is classified and emitted independently; a failure on one task is
logged and counted, never allowed to abort the batch. Overlapping runs are
safe because every emission goes through the dedup gate.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional
from sqlalchemy.orm import Session

from server.enums import NotificationType
from server.task_queries import list_active_due_soon_or_overdue
from .classifier import LifecycleState, ClassificationError, classify_task, to_utc_naive
from .config import config as notifier_config
from .emitter import AlreadyExists, emit, due_soon_message, overdue_message
from .metrics import SCAN_FAILURES, SCAN_DURATION

logger = logging.getLogger(__name__)

STATE_TO_TYPE = {
    LifecycleState.due_soon: NotificationType.due_soon,
    LifecycleState.overdue: NotificationType.overdue,
}


@dataclass
class ScanReport:
    fetched: int = 0
    due_soon: int = 0
    overdue: int = 0
    emitted: int = 0
    already_notified: int = 0
    failed: int = 0
    skipped: int = 0
    fetch_failed: bool = False


class ScanCycle:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        window: Optional[timedelta] = None,
        write_timeout: Optional[float] = None,
        fetch_timeout: Optional[float] = None,
        fetch_failure_escalation: Optional[int] = None,
        display_timezone: Optional[str] = None,
    ):
        self.session_factory = session_factory
        self.window = window if window is not None else timedelta(hours=notifier_config.DUE_SOON_WINDOW_HOURS)
        self.write_timeout = notifier_config.WRITE_TIMEOUT_SECONDS if write_timeout is None else write_timeout
        self.fetch_timeout = notifier_config.FETCH_TIMEOUT_SECONDS if fetch_timeout is None else fetch_timeout
        self.fetch_failure_escalation = (
            notifier_config.FETCH_FAILURE_ESCALATION if fetch_failure_escalation is None else fetch_failure_escalation
        )
        self.display_timezone = display_timezone or notifier_config.DISPLAY_TIMEZONE
        self.consecutive_fetch_failures = 0

    def run(self, now: Optional[datetime] = None) -> ScanReport:
        now = to_utc_naive(now) if now is not None else datetime.utcnow()
        report = ScanReport()
        started = time.monotonic()
        logger.info(f"🔍 Scanning task due dates (now={now.isoformat()})")

        db = self.session_factory()
        try:
            tasks = self._fetch(db, now, report)
            if tasks is None:
                return report

            for task in tasks:
                self._process(db, task, now, report)
        finally:
            db.close()
            SCAN_DURATION.observe(time.monotonic() - started)

        logger.info(
            f"✅ Scan complete: {report.fetched} fetched, {report.emitted} emitted, "
            f"{report.already_notified} already notified, {report.failed} failed, {report.skipped} skipped"
        )
        return report

    def _fetch(self, db: Session, now: datetime, report: ScanReport):
        try:
            tasks = list_active_due_soon_or_overdue(db, now, self.window, self.fetch_timeout)
            # close the read transaction before per-task writes
            db.commit()
        except Exception:
            db.rollback()
            self.consecutive_fetch_failures += 1
            report.fetch_failed = True
            SCAN_FAILURES.labels(stage="fetch").inc()
            if self.consecutive_fetch_failures >= self.fetch_failure_escalation:
                logger.critical(
                    f"Task fetch failed {self.consecutive_fetch_failures} times in a row; "
                    f"no due-date notifications are being produced",
                    exc_info=True,
                )
            else:
                logger.exception("Task fetch failed, skipping this scan cycle")
            return None

        self.consecutive_fetch_failures = 0
        report.fetched = len(tasks)
        return tasks

    def _process(self, db: Session, task, now: datetime, report: ScanReport) -> None:
        try:
            result = classify_task(task, now, self.window)
        except ClassificationError as e:
            report.skipped += 1
            SCAN_FAILURES.labels(stage="classify").inc()
            logger.warning(f"Task {task.id}: could not classify, skipping: {e}")
            return

        notification_type = STATE_TO_TYPE.get(result.state)
        if notification_type is None:
            return

        if notification_type is NotificationType.due_soon:
            report.due_soon += 1
            build_message = due_soon_message
        else:
            report.overdue += 1
            build_message = overdue_message

        try:
            message = build_message(task.title, to_utc_naive(task.due_date), result.detail, self.display_timezone)
        except Exception:
            report.skipped += 1
            SCAN_FAILURES.labels(stage="classify").inc()
            logger.exception(f"Task {task.id}: could not build {notification_type.value} message, skipping")
            return

        try:
            outcome = emit(
                db,
                user_id=task.user_id,
                task_id=task.id,
                notification_type=notification_type,
                message=message,
                now=now,
                write_timeout=self.write_timeout,
            )
        except Exception:
            report.failed += 1
            SCAN_FAILURES.labels(stage="emit").inc()
            logger.exception(f"Task {task.id}: failed to emit {notification_type.value} notification")
            return

        if isinstance(outcome, AlreadyExists):
            report.already_notified += 1
        else:
            report.emitted += 1
