"""
Notification Emitter

Persists a notification through the dedup gate. The same entry point serves
the scan cycle (due_soon / overdue) and task creation (created).
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
import pytz
from sqlalchemy.orm import Session

from server.enums import NotificationType
from server.models import Notification
from .gate import claim, apply_write_timeout
from .metrics import NOTIFICATIONS_EMITTED, DUPLICATES_SUPPRESSED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlreadyExists:
    task_id: int
    type: NotificationType


def emit(
    db: Session,
    user_id: int,
    task_id: int,
    notification_type: NotificationType,
    message: str,
    now: Optional[datetime] = None,
    write_timeout: Optional[float] = None,
) -> Union[Notification, AlreadyExists]:
    """
    Create the notification unless one of this type exists for the task.

    Commits on success. Store errors roll the transaction back and propagate
    to the caller; a duplicate is not an error and comes back as AlreadyExists.
    """
    notification_type = NotificationType(notification_type)
    values = {
        "user_id": user_id,
        "task_id": task_id,
        "type": notification_type,
        "message": message,
        "read": False,
        "created_at": now or datetime.utcnow(),
    }

    try:
        apply_write_timeout(db, write_timeout)
        notification_id = claim(db, values)
        db.commit()
    except Exception:
        db.rollback()
        raise

    if notification_id is None:
        DUPLICATES_SUPPRESSED.labels(type=notification_type.value).inc()
        return AlreadyExists(task_id=task_id, type=notification_type)

    NOTIFICATIONS_EMITTED.labels(type=notification_type.value).inc()
    logger.info(f"[+] {notification_type.value} notification {notification_id} created for task {task_id}")
    return db.get(Notification, notification_id)


# =========================================================
# MESSAGE BUILDERS
# =========================================================
def _display_date(due_date: datetime, display_timezone: str) -> str:
    tz = pytz.timezone(display_timezone)
    return pytz.utc.localize(due_date).astimezone(tz).strftime("%Y-%m-%d")


def due_soon_message(title: str, due_date: datetime, hours: int, display_timezone: str = "UTC") -> str:
    unit = "hour" if hours == 1 else "hours"
    return (
        f"⏰ Task \"{title}\" is due in {hours} {unit} ({_display_date(due_date, display_timezone)}). "
        f"Make sure to complete it on time!"
    )


def overdue_message(title: str, due_date: datetime, days: int, display_timezone: str = "UTC") -> str:
    late = f" ({days} day{'s' if days != 1 else ''} late)" if days else ""
    return (
        f"⚠️ Task \"{title}\" is overdue{late}! It was due on {_display_date(due_date, display_timezone)}. "
        f"Please complete it as soon as possible."
    )
