"""
Retention Sweeper

Deletes notifications older than the retention horizon, whatever their
type or read state.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from sqlalchemy import delete
from sqlalchemy.orm import Session

from server.models import Notification
from .classifier import to_utc_naive
from .config import config as notifier_config
from .metrics import NOTIFICATIONS_SWEPT, SCAN_FAILURES

logger = logging.getLogger(__name__)

DEFAULT_HORIZON = timedelta(days=30)


def sweep(db: Session, now: Optional[datetime] = None, horizon: timedelta = DEFAULT_HORIZON) -> int:
    """Delete notifications created before now - horizon. Returns the count."""
    now = to_utc_naive(now) if now is not None else datetime.utcnow()
    cutoff = now - horizon

    try:
        result = db.execute(
            delete(Notification)
            .where(Notification.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    deleted = result.rowcount or 0
    NOTIFICATIONS_SWEPT.inc(deleted)
    return deleted


class RetentionSweeper:
    def __init__(self, session_factory: Callable[[], Session], horizon: Optional[timedelta] = None):
        self.session_factory = session_factory
        self.horizon = horizon if horizon is not None else timedelta(days=notifier_config.RETENTION_DAYS)

    def run(self, now: Optional[datetime] = None) -> int:
        """Scheduled entry point: failures are logged, the next run retries."""
        db = self.session_factory()
        try:
            deleted = sweep(db, now, self.horizon)
        except Exception:
            SCAN_FAILURES.labels(stage="sweep").inc()
            logger.exception("Retention sweep failed")
            return 0
        finally:
            db.close()

        logger.info(f"🧹 Retention sweep removed {deleted} notifications older than {self.horizon.days} days")
        return deleted
