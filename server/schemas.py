from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from server.enums import NotificationType, TaskPriority

# =========================================================
# PYDANTIC SCHEMAS
# =========================================================

# Task Schemas
class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = None

class TaskResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str]
    priority: TaskPriority
    due_date: Optional[datetime]
    completed: bool
    created_at: datetime

    class Config:
        from_attributes = True

# Notification Schemas
class NotificationResponse(BaseModel):
    id: int
    user_id: int
    task_id: int
    type: NotificationType
    message: str
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True

class MessageResponse(BaseModel):
    message: str
