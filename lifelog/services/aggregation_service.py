"""
aggregation_service.py - Monthly & mood breakdowns
Pure in-memory grouping over ActivityRecords: per-month counts for a calendar
year and per-mood counts with a display emoji. Counts are raw integers; any
percentage or rounding is left to the caller.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from lifelog.services.entry_repository import ActivityRecord, EntryFilter

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
FULL_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

MOOD_EMOJI = {
    "happy": "😊",
    "peaceful": "😌",
    "excited": "🤩",
    "creative": "🎨",
    "reflective": "🤔",
    "sad": "😢",
    "anxious": "😰",
    "angry": "😠",
    "tired": "😴",
}
DEFAULT_MOOD_EMOJI = "🔹"


@dataclass(frozen=True)
class MonthCount:
    month: str
    count: int


@dataclass(frozen=True)
class MoodCount:
    mood: str
    emoji: str
    count: int


def mood_emoji(mood: str) -> str:
    return MOOD_EMOJI.get(mood.lower(), DEFAULT_MOOD_EMOJI)


def filter_records(records: Iterable[ActivityRecord], entry_filter: Optional[EntryFilter]) -> list[ActivityRecord]:
    if entry_filter is None:
        return list(records)
    return [r for r in records if entry_filter.matches(r)]


def monthly_breakdown(records: Iterable[ActivityRecord], year: int) -> list[MonthCount]:
    """Twelve buckets, January first, zero-filled. Records outside `year` are ignored."""
    counts = [0] * 12
    for record in records:
        if record.occurred_on.year == year:
            counts[record.occurred_on.month - 1] += 1
    return [MonthCount(month=MONTH_NAMES[i], count=c) for i, c in enumerate(counts)]


def most_active_month(breakdown: list[MonthCount]) -> Optional[str]:
    """Full name of the busiest month; earliest month wins a tie. None if every bucket is empty."""
    best_index, best_count = None, 0
    for index, bucket in enumerate(breakdown):
        if bucket.count > best_count:
            best_index, best_count = index, bucket.count
    return FULL_MONTH_NAMES[best_index] if best_index is not None else None


def mood_summary(records: Iterable[ActivityRecord]) -> list[MoodCount]:
    counts = Counter(record.mood for record in records)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [MoodCount(mood=mood, emoji=mood_emoji(mood), count=count) for mood, count in ordered]


def top_mood(summary: list[MoodCount]) -> Optional[str]:
    return summary[0].mood if summary else None
