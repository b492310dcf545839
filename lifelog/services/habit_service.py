"""
habit_service.py - Habits & completion tracking
Creates/renames/deactivates habits, toggles today's completion log, reports
whether each active habit is done today and computes per-habit streaks.
Logs are keyed by (habit_id, log_date) for both reads and writes.
"""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifelog.errors import NotFoundError
from lifelog.models.habit import Habit
from lifelog.models.habit_log import HabitLog
from lifelog.services.streak_service import calculate_streak, longest_streak

logger = logging.getLogger(__name__)


class HabitService:
    @staticmethod
    def get_owned(db: Session, user_id: int, habit_id: int) -> Habit:
        h = db.query(Habit).filter_by(id=habit_id, user_id=user_id).first()
        if not h:
            raise NotFoundError("Habit not found")
        return h

    @staticmethod
    def create(db: Session, user_id: int, name: str) -> Habit:
        try:
            h = Habit(user_id=user_id, name=name)
            db.add(h)
            db.commit()
            db.refresh(h)
            return h
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def update(db: Session, user_id: int, habit_id: int, data: dict) -> Habit:
        h = HabitService.get_owned(db, user_id, habit_id)
        try:
            if data.get("name") is not None:
                h.name = data["name"]
            if data.get("is_active") is not None:
                h.is_active = data["is_active"]
            db.commit()
            db.refresh(h)
            return h
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, habit_id: int) -> None:
        h = HabitService.get_owned(db, user_id, habit_id)
        try:
            db.delete(h)  # logs go with it
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def toggle_log(db: Session, user_id: int, habit_id: int, day: date) -> tuple[HabitLog, bool]:
        """Create today's log as completed, or flip an existing one.

        Returns the log and whether it was newly created.
        """
        HabitService.get_owned(db, user_id, habit_id)
        try:
            log = db.query(HabitLog).filter_by(habit_id=habit_id, log_date=day).first()
            created = log is None
            if created:
                log = HabitLog(habit_id=habit_id, log_date=day, is_completed=True)
                db.add(log)
            else:
                log.is_completed = not log.is_completed
            db.commit()
            db.refresh(log)
            logger.info("habit %s log for %s -> completed=%s", habit_id, day, log.is_completed)
            return log, created
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def completion_today(db: Session, user_id: int, today: date) -> list[dict]:
        """Active habits (oldest first) with today's completion state."""
        habits = (
            db.query(Habit)
            .filter(Habit.user_id == user_id, Habit.is_active.is_(True))
            .order_by(Habit.created_at.asc(), Habit.id.asc())
            .all()
        )
        if not habits:
            return []

        logs = (
            db.query(HabitLog)
            .filter(HabitLog.habit_id.in_([h.id for h in habits]), HabitLog.log_date == today)
            .all()
        )
        done = {log.habit_id: bool(log.is_completed) for log in logs}
        # No log for today means not completed
        return [{"habit": h, "completed_today": done.get(h.id, False)} for h in habits]

    @staticmethod
    def completed_dates(db: Session, habit_id: int) -> list[date]:
        rows = (
            db.query(HabitLog.log_date)
            .filter(HabitLog.habit_id == habit_id, HabitLog.is_completed.is_(True))
            .order_by(HabitLog.log_date.desc())
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def get_streaks(db: Session, user_id: int, today: date) -> list[dict]:
        habits = (
            db.query(Habit)
            .filter(Habit.user_id == user_id, Habit.is_active.is_(True))
            .order_by(Habit.created_at.asc(), Habit.id.asc())
            .all()
        )
        result = []
        for h in habits:
            dates = HabitService.completed_dates(db, h.id)
            result.append({
                "habitId": h.id,
                "habit": h.name,
                "streak": calculate_streak(dates, today),
                "longestStreak": longest_streak(dates),
            })
        return result
