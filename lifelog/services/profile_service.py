"""
profile_service.py - The signed-in user's profile
Account fields plus the entry count, expense total and current streak.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifelog.clock import Clock
from lifelog.errors import InternalError, NotFoundError
from lifelog.models.user import User
from lifelog.services.analytics_service import AnalyticsService
from lifelog.services.entry_repository import EntryRepository

logger = logging.getLogger(__name__)


class ProfileService:
    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        u = db.query(User).filter_by(id=user_id).first()
        if not u:
            raise NotFoundError("User not found")
        return u

    @staticmethod
    def get_profile(db: Session, user_id: int, clock: Clock) -> dict:
        u = ProfileService.get_user(db, user_id)
        try:
            repo = EntryRepository(db, clock)
            return {
                **u.to_dict(),
                "entryCount": repo.count(user_id),
                "totalExpenses": repo.total_expense(user_id),
                "streak": AnalyticsService.current_streak(db, user_id, clock),
            }
        except SQLAlchemyError as e:
            logger.error(f"Profile failed for user {user_id}: {e}")
            raise InternalError("Internal server error") from e

    @staticmethod
    def update(db: Session, user_id: int, data: dict) -> User:
        u = ProfileService.get_user(db, user_id)
        try:
            if data.get("name") is not None:
                u.name = data["name"]
            # An explicit null removes the picture
            if "image" in data:
                u.image = data["image"]
            db.commit()
            db.refresh(u)
            return u
        except SQLAlchemyError:
            db.rollback()
            raise
