# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from lifelog.models.user import User
from lifelog.models.diary_entry import DiaryEntry
from lifelog.models.tag import Tag, EntryTag
from lifelog.models.habit import Habit
from lifelog.models.habit_log import HabitLog
from lifelog.models.transaction import Transaction
from lifelog.models.notification import Notification

__all__ = [
    "User",
    "DiaryEntry",
    "Tag",
    "EntryTag",
    "Habit",
    "HabitLog",
    "Transaction",
    "Notification",
]
