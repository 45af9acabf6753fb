from datetime import datetime, timedelta, timezone

import pytest

from notifier.classifier import (
    Classification,
    ClassificationError,
    LifecycleState,
    classify,
    classify_task,
)
from server.task_queries import TaskSnapshot

NOW = datetime(2026, 3, 10, 12, 0, 0)


@pytest.mark.parametrize("due", [
    NOW - timedelta(seconds=1),
    NOW - timedelta(hours=5),
    NOW - timedelta(days=400),
])
def test_past_due_date_is_overdue(due):
    assert classify(due, False, NOW).state is LifecycleState.overdue


@pytest.mark.parametrize("due", [
    NOW,
    NOW + timedelta(minutes=1),
    NOW + timedelta(hours=12),
    NOW + timedelta(hours=24),
])
def test_due_within_window_is_due_soon(due):
    assert classify(due, False, NOW).state is LifecycleState.due_soon


def test_just_past_window_is_none():
    result = classify(NOW + timedelta(hours=24, seconds=1), False, NOW)
    assert result == Classification(LifecycleState.none)


def test_no_due_date_is_none():
    assert classify(None, False, NOW).state is LifecycleState.none


@pytest.mark.parametrize("due", [NOW - timedelta(days=3), NOW + timedelta(hours=2), None])
def test_completed_is_always_none(due):
    assert classify(due, True, NOW).state is LifecycleState.none


def test_overdue_detail_is_whole_days_rounded_down():
    assert classify(NOW - timedelta(days=3), False, NOW).detail == 3
    assert classify(NOW - timedelta(days=3, hours=23), False, NOW).detail == 3
    assert classify(NOW - timedelta(hours=23), False, NOW).detail == 0


def test_due_soon_detail_is_rounded_hours():
    assert classify(NOW + timedelta(hours=12), False, NOW).detail == 12
    assert classify(NOW + timedelta(hours=2, minutes=29), False, NOW).detail == 2
    # half rounds up
    assert classify(NOW + timedelta(hours=2, minutes=30), False, NOW).detail == 3
    assert classify(NOW + timedelta(minutes=10), False, NOW).detail == 0
    assert classify(NOW, False, NOW).detail == 0


def test_aware_datetimes_are_compared_in_utc():
    kolkata = timezone(timedelta(hours=5, minutes=30))
    due = datetime(2026, 3, 10, 19, 30, tzinfo=kolkata)  # 14:00 UTC
    result = classify(due, False, NOW)
    assert result == Classification(LifecycleState.due_soon, 2)


def test_iso_string_due_date_is_parsed():
    assert classify("2026-03-07T12:00:00Z", False, NOW) == Classification(LifecycleState.overdue, 3)


@pytest.mark.parametrize("bad", ["not a date", 12345, object()])
def test_malformed_due_date_raises(bad):
    with pytest.raises(ClassificationError):
        classify(bad, False, NOW)


def test_custom_window():
    due = NOW + timedelta(hours=30)
    assert classify(due, False, NOW).state is LifecycleState.none
    assert classify(due, False, NOW, window=timedelta(hours=48)).state is LifecycleState.due_soon


def test_classify_task_reads_task_fields():
    task = TaskSnapshot(id=1, user_id=7, title="Ship", due_date=NOW + timedelta(hours=5), completed=False)
    assert classify_task(task, NOW) == Classification(LifecycleState.due_soon, 5)
