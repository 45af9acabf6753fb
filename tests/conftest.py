import os
import sys
from datetime import datetime

# Keep the app from starting its own scheduler or touching a real database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_SCHEDULER", "false")

# Add project root to sys.path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from server.database import Base, build_engine, build_session_factory
from server.enums import NotificationType
from server.models import Task, Notification

NOW = datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """File-backed SQLite so several threads get their own connections."""
    engine = build_engine(f"sqlite:///{tmp_path / 'notifications.db'}", connect_args={"timeout": 30})
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_task(db):
    def _make_task(user_id=1, title="Write report", due_in=None, due_date=None, completed=False):
        if due_date is None and due_in is not None:
            due_date = NOW + due_in
        task = Task(user_id=user_id, title=title, due_date=due_date, completed=completed)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task
    return _make_task


@pytest.fixture
def make_notification(db):
    def _make_notification(task, notification_type=NotificationType.created, created_at=NOW, read=False):
        notification = Notification(
            user_id=task.user_id,
            task_id=task.id,
            type=notification_type,
            message=f"{notification_type.value} for {task.title}",
            read=read,
            created_at=created_at,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification
    return _make_notification


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def notifications_for(db):
    def _notifications_for(task_id, notification_type=None):
        query = db.query(Notification).filter(Notification.task_id == task_id)
        if notification_type is not None:
            query = query.filter(Notification.type == notification_type)
        return query.all()
    return _notifications_for
