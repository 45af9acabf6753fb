from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc
from sqlalchemy.orm import Session
from server.models import Notification
from server.schemas import NotificationResponse, MessageResponse
from server.dependencies import get_db

router = APIRouter()

# =========================================================
# NOTIFICATION ENDPOINTS
# Callers are already authorized; user_id scopes every query
# =========================================================

@router.get("/", response_model=List[NotificationResponse])
def get_notifications(user_id: int = Query(...), db: Session = Depends(get_db)):
    """Notifications for a user, newest first."""
    return db.query(Notification).filter(
        Notification.user_id == user_id
    ).order_by(desc(Notification.created_at), desc(Notification.id)).all()


@router.patch("/read-all", response_model=MessageResponse)
def mark_all_as_read(user_id: int = Query(...), db: Session = Depends(get_db)):
    db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read.is_(False)
    ).update({Notification.read: True}, synchronize_session=False)
    db.commit()
    return {"message": "All notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(notification_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(notification_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    deleted = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).delete(synchronize_session=False)
    if not deleted:
        db.rollback()
        raise HTTPException(status_code=404, detail="Notification not found")
    db.commit()
    return {"message": "Notification deleted successfully"}


@router.delete("/", response_model=MessageResponse)
def delete_all_notifications(user_id: int = Query(...), db: Session = Depends(get_db)):
    db.query(Notification).filter(Notification.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    return {"message": "All notifications deleted successfully"}
