from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifelog.auth import get_current_user
from lifelog.database import get_db
from lifelog.services.notification_service import NotificationService


router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("")
async def list_notifications(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Latest notifications plus the unread count."""
    return NotificationService.get_all(db, user_id)


@router.post("/read-all")
async def mark_all_as_read(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    NotificationService.mark_all_read(db, user_id)
    return {"message": "All notifications marked as read"}


@router.put("/{notification_id}/read")
async def mark_as_read(notification_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Mark a notification as read."""
    return NotificationService.mark_read(db, user_id, notification_id).to_dict()


@router.delete("/{notification_id}")
async def delete_notification(notification_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a notification."""
    NotificationService.delete(db, user_id, notification_id)
    return {"message": "Notification deleted"}
