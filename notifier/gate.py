"""
Deduplication Gate

Guarantees at most one notification per (task, type). The read-only check
(`should_emit`) is for callers that only want to know; the write path
(`claim`) is an atomic create-if-absent so overlapping scan runs cannot both
insert.
"""
import logging
from typing import Optional
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from server.enums import NotificationType
from server.models import Notification

logger = logging.getLogger(__name__)

UNIQUE_COLUMNS = ["task_id", "type"]


def should_emit(db: Session, task_id: int, notification_type: NotificationType) -> bool:
    """True if no notification of this type exists yet for the task."""
    existing = db.query(Notification.id).filter(
        Notification.task_id == task_id,
        Notification.type == notification_type,
    ).first()
    return existing is None


def apply_write_timeout(db: Session, timeout_seconds: Optional[float]) -> None:
    """
    Bound the current transaction's statements.

    PostgreSQL gets a transaction-scoped statement_timeout; SQLite relies on
    the busy timeout set on the engine.
    """
    if not timeout_seconds:
        return
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text(f"SET LOCAL statement_timeout = {int(timeout_seconds * 1000)}"))


def _conditional_insert(dialect_name: str, values: dict):
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        return None
    return (
        insert(Notification)
        .values(**values)
        .on_conflict_do_nothing(index_elements=UNIQUE_COLUMNS)
        .returning(Notification.id)
    )


def claim(db: Session, values: dict) -> Optional[int]:
    """
    Insert the notification unless one exists for (task_id, type).

    Returns the new row id, or None if the pair was already taken. Does not
    commit; on the unique-constraint path a duplicate rolls the current
    transaction back, so callers run each claim in its own transaction.
    """
    stmt = _conditional_insert(db.get_bind().dialect.name, values)
    if stmt is not None:
        return db.execute(stmt).scalar_one_or_none()

    # No ON CONFLICT support: rely on the unique constraint
    notification = Notification(**values)
    db.add(notification)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.debug(f"Duplicate {values.get('type')} for task {values.get('task_id')} suppressed")
        return None
    return notification.id
