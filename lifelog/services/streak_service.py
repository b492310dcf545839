"""
streak_service.py - Consecutive-day streaks
Counts backward from today over a set of active calendar days. A streak stays
alive through "today" as long as yesterday was active (1 day grace), so users
are not reset before they get around to today's entry.
"""

from datetime import date, datetime, timedelta
from typing import Iterable


def _as_day(value) -> date:
    # datetime is a subclass of date, so it has to be checked first
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_streak(active_dates: Iterable, today: date) -> int:
    """Length of the run of consecutive active days ending today or yesterday."""
    days = {_as_day(d) for d in active_dates}
    if not days:
        return 0

    latest = max(days)
    check = today
    if latest < today:
        yesterday = today - timedelta(days=1)
        if latest < yesterday:
            return 0  # broken
        check = yesterday

    streak = 0
    while check in days:
        streak += 1
        check -= timedelta(days=1)
    return streak


def longest_streak(active_dates: Iterable) -> int:
    """Longest run of consecutive days anywhere in the set."""
    days = sorted({_as_day(d) for d in active_dates})
    best = run = 0
    previous = None
    for d in days:
        run = run + 1 if previous is not None and d - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = d
    return best
