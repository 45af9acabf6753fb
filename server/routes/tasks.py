from typing import List
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from server.schemas import TaskCreate, TaskResponse, MessageResponse
from server.models import Task, Notification
from server.enums import NotificationType
from server.dependencies import get_db
from notifier.classifier import to_utc_naive
from notifier.emitter import emit

logger = logging.getLogger(__name__)

router = APIRouter()


def format_created_message(task: Task) -> str:
    message = f"🎯 New task created: \"{task.title}\""
    if task.due_date:
        message += f" (Due: {task.due_date.strftime('%Y-%m-%d')})"
    message += "."
    if task.description:
        message += f"\nDescription: {task.description}"
    return message


def _get_owned_task(db: Session, task_id: int, user_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task

# =========================================================
# TASK ENDPOINTS
# =========================================================
@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    user_id: int = Query(...),
    db: Session = Depends(get_db)
):
    task = Task(
        user_id=user_id,
        title=task_data.title,
        description=task_data.description,
        priority=task_data.priority,
        due_date=to_utc_naive(task_data.due_date) if task_data.due_date else None,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    # Creation notice; a failure here must not fail the task creation
    try:
        emit(db, user_id, task.id, NotificationType.created, format_created_message(task))
    except Exception:
        logger.exception(f"Failed to create 'created' notification for task {task.id}")

    db.refresh(task)
    return task


@router.get("/", response_model=List[TaskResponse])
def get_tasks(user_id: int = Query(...), db: Session = Depends(get_db)):
    return db.query(Task).filter(Task.user_id == user_id).order_by(Task.id).all()


@router.patch("/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(task_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    """Flip completion. Existing due_soon/overdue notifications are kept as history."""
    task = _get_owned_task(db, task_id, user_id)
    task.completed = not task.completed
    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    task = _get_owned_task(db, task_id, user_id)

    # Delete all notifications associated with this task
    db.query(Notification).filter(Notification.task_id == task.id).delete(synchronize_session=False)
    db.delete(task)
    db.commit()
    return {"message": "Task deleted"}
