"""
analytics_service.py - Dashboard, highlight & habit views
Fetches fresh rows for one user, runs the streak and aggregation functions over
them and assembles the response dicts. Either the whole response is returned or
an InternalError is raised; there are no partial results.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifelog.clock import Clock
from lifelog.config import RECENT_ENTRIES_LIMIT
from lifelog.errors import InternalError
from lifelog.services import aggregation_service as agg
from lifelog.services.entry_repository import EntryRepository, EntryFilter
from lifelog.services.habit_service import HabitService
from lifelog.services.journal_service import serialize_entry
from lifelog.services.streak_service import calculate_streak

logger = logging.getLogger(__name__)

NONE_LABEL = "None"


def _label(value: Optional[str]) -> str:
    return value if value is not None else NONE_LABEL


class AnalyticsService:

    @staticmethod
    def current_streak(db: Session, user_id: int, clock: Clock) -> int:
        dates = EntryRepository(db, clock).distinct_active_dates(user_id)
        return calculate_streak(dates, clock.today())

    @staticmethod
    def get_dashboard(db: Session, user_id: int, clock: Clock) -> dict:
        """Central dashboard bundle: counts, expense total, streak and top mood."""
        try:
            repo = EntryRepository(db, clock)
            summary = agg.mood_summary(repo.records(user_id))
            return {
                "totalEntries": repo.count(user_id),
                "totalExpenses": repo.total_expense(user_id),
                "streak": AnalyticsService.current_streak(db, user_id, clock),
                "topMood": agg.top_mood(summary),
                "recentEntries": [serialize_entry(e) for e in repo.recent(user_id, RECENT_ENTRIES_LIMIT)],
            }
        except SQLAlchemyError as e:
            logger.error(f"Dashboard failed for user {user_id}: {e}")
            raise InternalError("Internal server error") from e

    @staticmethod
    def get_highlight(db: Session, user_id: int, clock: Clock, entry_filter: Optional[EntryFilter] = None) -> dict:
        """Highlight view; every figure is computed over the same filtered records."""
        try:
            records = EntryRepository(db, clock).records(user_id, entry_filter)
        except SQLAlchemyError as e:
            logger.error(f"Highlight failed for user {user_id}: {e}")
            raise InternalError("Internal server error") from e

        breakdown = agg.monthly_breakdown(records, clock.today().year)
        summary = agg.mood_summary(records)
        return {
            "totalMemories": len(records),
            "mostActiveMonth": _label(agg.most_active_month(breakdown)),
            "topMood": _label(agg.top_mood(summary)),
            # No location data is recorded on entries yet
            "topPlace": NONE_LABEL,
            "monthlyBreakdown": [{"month": b.month, "count": b.count} for b in breakdown],
            "moodSummary": [{"mood": m.mood, "emoji": m.emoji, "count": m.count} for m in summary],
        }

    @staticmethod
    def get_habit_list(db: Session, user_id: int, clock: Clock) -> list[dict]:
        try:
            rows = HabitService.completion_today(db, user_id, clock.today())
        except SQLAlchemyError as e:
            logger.error(f"Habit list failed for user {user_id}: {e}")
            raise InternalError("Internal server error") from e
        return [{**row["habit"].to_dict(), "completedToday": row["completed_today"]} for row in rows]
