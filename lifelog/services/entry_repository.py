"""
entry_repository.py - Read-only access to a user's dated diary activity
Returns distinct active days for streaks and lightweight ActivityRecord tuples
for the aggregation views. Never writes.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from lifelog.clock import Clock
from lifelog.config import STREAK_LOOKBACK_DAYS, FAVORITE_TAG_NAME
from lifelog.errors import ValidationError
from lifelog.models.diary_entry import DiaryEntry
from lifelog.models.tag import Tag, EntryTag


@dataclass(frozen=True)
class ActivityRecord:
    id: int
    occurred_on: date
    mood: str
    tag_names: tuple = ()


@dataclass(frozen=True)
class EntryFilter:
    """Optional narrowing applied to records before any aggregation."""

    mood: Optional[str] = None
    favorite: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("startDate must not be after endDate")

    def matches(self, record: ActivityRecord) -> bool:
        if self.mood and record.mood != self.mood:
            return False
        if self.favorite and FAVORITE_TAG_NAME not in record.tag_names:
            return False
        if self.start_date and record.occurred_on < self.start_date:
            return False
        if self.end_date and record.occurred_on > self.end_date:
            return False
        return True


class EntryRepository:
    def __init__(self, db: Session, clock: Clock):
        self.db = db
        self.clock = clock

    def distinct_active_dates(self, user_id: int) -> list[date]:
        """Distinct local calendar days with at least one entry, newest first."""
        since = self.clock.today() - timedelta(days=STREAK_LOOKBACK_DAYS)
        # One day of slack so entries near midnight in the reference zone are not cut off
        lower = datetime(since.year, since.month, since.day) - timedelta(days=1)
        rows = (
            self.db.query(DiaryEntry.entry_date)
            .filter(DiaryEntry.user_id == user_id, DiaryEntry.entry_date >= lower)
            .all()
        )
        days = {self.clock.to_local_date(row[0]) for row in rows}
        return sorted((d for d in days if d >= since), reverse=True)

    def records(self, user_id: int, entry_filter: Optional[EntryFilter] = None) -> list[ActivityRecord]:
        entry_filter = entry_filter or EntryFilter()
        query = (
            self.db.query(DiaryEntry)
            .options(selectinload(DiaryEntry.entry_tags).selectinload(EntryTag.tag))
            .filter(DiaryEntry.user_id == user_id)
        )
        if entry_filter.mood:
            query = query.filter(DiaryEntry.mood == entry_filter.mood)
        if entry_filter.favorite:
            query = query.filter(
                DiaryEntry.entry_tags.any(EntryTag.tag.has(Tag.name == FAVORITE_TAG_NAME))
            )

        records = [
            ActivityRecord(
                id=entry.id,
                occurred_on=self.clock.to_local_date(entry.entry_date),
                mood=entry.mood,
                tag_names=tuple(et.tag.name for et in entry.entry_tags),
            )
            for entry in query.order_by(DiaryEntry.entry_date.desc()).all()
        ]
        # Date bounds are checked on the local calendar day, not the stored timestamp
        return [r for r in records if entry_filter.matches(r)]

    def count(self, user_id: int) -> int:
        return self.db.query(DiaryEntry).filter(DiaryEntry.user_id == user_id).count()

    def total_expense(self, user_id: int) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(DiaryEntry.expense), 0))
            .filter(DiaryEntry.user_id == user_id)
            .scalar()
        )
        return float(total or 0)

    def recent(self, user_id: int, limit: int) -> list[DiaryEntry]:
        return (
            self.db.query(DiaryEntry)
            .options(selectinload(DiaryEntry.entry_tags).selectinload(EntryTag.tag))
            .filter(DiaryEntry.user_id == user_id)
            .order_by(DiaryEntry.entry_date.desc())
            .limit(limit)
            .all()
        )
