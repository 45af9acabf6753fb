"""
Task Classifier

Maps a task's due date and completion flag onto a lifecycle state relative
to a given "now". Pure: no clock, no store.

    overdue   : due_date <  now
    due_soon  : now <= due_date <= now + window
    none      : completed, no due date, or due later than the window
"""
import enum
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union
import pytz

DEFAULT_WINDOW = timedelta(hours=24)


class LifecycleState(str, enum.Enum):
    none = "none"
    due_soon = "due_soon"
    overdue = "overdue"


class ClassificationError(ValueError):
    """Raised when a task's due date cannot be interpreted."""


@dataclass(frozen=True)
class Classification:
    state: LifecycleState
    # hours remaining for due_soon, whole days late for overdue
    detail: Optional[int] = None


NONE = Classification(LifecycleState.none)


def to_utc_naive(value: Union[datetime, str]) -> datetime:
    """Normalize a datetime or ISO-8601 string to a naive UTC datetime."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ClassificationError(f"Unparseable due date {value!r}") from e
    if not isinstance(value, datetime):
        raise ClassificationError(f"Unsupported due date type {type(value).__name__}")
    if value.tzinfo is not None:
        value = value.astimezone(pytz.utc).replace(tzinfo=None)
    return value


def classify(
    due_date: Optional[Union[datetime, str]],
    completed: bool,
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
) -> Classification:
    if completed or due_date is None:
        return NONE

    due = to_utc_naive(due_date)
    now = to_utc_naive(now)

    if due < now:
        days_overdue = math.floor((now - due) / timedelta(days=1))
        return Classification(LifecycleState.overdue, max(0, days_overdue))

    if due <= now + window:
        hours = (due - now) / timedelta(hours=1)
        # half-up, not banker's rounding
        return Classification(LifecycleState.due_soon, int(math.floor(hours + 0.5)))

    return NONE


def classify_task(task, now: datetime, window: timedelta = DEFAULT_WINDOW) -> Classification:
    """Classify anything exposing ``due_date`` and ``completed``."""
    return classify(task.due_date, task.completed, now, window)
