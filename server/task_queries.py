"""
Read-only task queries consumed by the notification scheduler.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy import text
from sqlalchemy.orm import Session
from server.models import Task


@dataclass(frozen=True)
class TaskSnapshot:
    id: int
    user_id: int
    title: str
    due_date: Optional[datetime]
    completed: bool

    @classmethod
    def from_model(cls, task: Task) -> "TaskSnapshot":
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            due_date=task.due_date,
            completed=bool(task.completed),
        )


def list_active_due_soon_or_overdue(
    db: Session,
    now: datetime,
    window: timedelta = timedelta(hours=24),
    timeout_seconds: Optional[float] = None,
) -> List[TaskSnapshot]:
    """
    All users' incomplete tasks whose due date is at or before now + window.

    Tasks without a due date are excluded by the same predicate. Rows are
    detached into snapshots so later commits don't trigger reloads.
    """
    if timeout_seconds and db.get_bind().dialect.name == "postgresql":
        db.execute(text(f"SET LOCAL statement_timeout = {int(timeout_seconds * 1000)}"))

    tasks = db.query(Task).filter(
        Task.completed.is_(False),
        Task.due_date.isnot(None),
        Task.due_date <= now + window,
    ).order_by(Task.id).all()

    return [TaskSnapshot.from_model(task) for task in tasks]
