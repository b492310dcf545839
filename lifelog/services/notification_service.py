"""
notification_service.py - In-app notifications
Latest notifications with an unread counter, read/read-all and delete.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifelog.config import NOTIFICATIONS_LIMIT
from lifelog.errors import NotFoundError
from lifelog.models.notification import Notification


class NotificationService:
    @staticmethod
    def get_all(db: Session, user_id: int, limit: int = NOTIFICATIONS_LIMIT) -> dict:
        notes = (
            db.query(Notification)
            .filter_by(user_id=user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )
        unread = db.query(Notification).filter_by(user_id=user_id, is_read=False).count()
        return {"notifications": [n.to_dict() for n in notes], "unreadCount": unread}

    @staticmethod
    def _get_owned(db: Session, user_id: int, notification_id: int) -> Notification:
        n = db.query(Notification).filter_by(id=notification_id, user_id=user_id).first()
        if not n:
            raise NotFoundError("Notification not found")
        return n

    @staticmethod
    def mark_read(db: Session, user_id: int, notification_id: int) -> Notification:
        n = NotificationService._get_owned(db, user_id, notification_id)
        try:
            n.is_read = True
            db.commit()
            db.refresh(n)
            return n
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def mark_all_read(db: Session, user_id: int) -> int:
        try:
            updated = (
                db.query(Notification)
                .filter_by(user_id=user_id, is_read=False)
                .update({Notification.is_read: True}, synchronize_session=False)
            )
            db.commit()
            return updated
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, notification_id: int) -> None:
        n = NotificationService._get_owned(db, user_id, notification_id)
        try:
            db.delete(n)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
