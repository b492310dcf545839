from datetime import date, datetime, timedelta

import pytest

from lifelog.services.streak_service import calculate_streak, longest_streak


def days(start: date, count: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(count)]


def test_five_consecutive_days_ending_today():
    active = days(date(2024, 1, 1), 5)
    assert calculate_streak(active, today=date(2024, 1, 5)) == 5


def test_gap_before_yesterday_breaks_streak():
    active = days(date(2024, 1, 1), 3)
    assert calculate_streak(active, today=date(2024, 1, 5)) == 0


def test_yesterday_only_counts_as_one():
    assert calculate_streak([date(2024, 1, 4)], today=date(2024, 1, 5)) == 1


def test_today_only_counts_as_one():
    assert calculate_streak([date(2024, 1, 5)], today=date(2024, 1, 5)) == 1


def test_empty_set_is_zero():
    assert calculate_streak([], today=date(2024, 1, 5)) == 0


def test_grace_day_counts_run_ending_yesterday():
    active = days(date(2024, 1, 1), 4)  # Jan 1..4, nothing yet on Jan 5
    assert calculate_streak(active, today=date(2024, 1, 5)) == 4


def test_run_stops_at_first_missing_day():
    active = [date(2024, 1, 5), date(2024, 1, 4), date(2024, 1, 2), date(2024, 1, 1)]
    assert calculate_streak(active, today=date(2024, 1, 5)) == 2


def test_duplicate_days_collapse():
    active = [date(2024, 1, 5), date(2024, 1, 5), date(2024, 1, 4)]
    assert calculate_streak(active, today=date(2024, 1, 5)) == 2


def test_datetimes_are_reduced_to_days():
    active = [datetime(2024, 1, 5, 23, 59), datetime(2024, 1, 5, 0, 1), datetime(2024, 1, 4, 12, 0)]
    assert calculate_streak(active, today=date(2024, 1, 5)) == 2


def test_future_entry_does_not_break_todays_streak():
    active = [date(2024, 1, 7), date(2024, 1, 5), date(2024, 1, 4)]
    assert calculate_streak(active, today=date(2024, 1, 5)) == 2


@pytest.mark.parametrize("run_length", [1, 2, 7, 30])
def test_run_ending_today_matches_length(run_length):
    today = date(2024, 3, 1)
    active = days(today - timedelta(days=run_length - 1), run_length)
    # an older, disconnected run must not be counted
    active += days(today - timedelta(days=run_length + 10), 3)
    assert calculate_streak(active, today=today) == run_length


@pytest.mark.parametrize("age", [2, 3, 40])
def test_latest_older_than_yesterday_is_zero(age):
    today = date(2024, 3, 1)
    active = days(today - timedelta(days=age + 5), 6)
    assert calculate_streak(active, today=today) == 0


def test_streak_crosses_month_and_year_boundaries():
    active = days(date(2023, 12, 30), 4)  # Dec 30 .. Jan 2
    assert calculate_streak(active, today=date(2024, 1, 2)) == 4


def test_longest_streak_finds_best_run():
    active = days(date(2024, 1, 1), 3) + days(date(2024, 2, 1), 6) + [date(2024, 3, 1)]
    assert longest_streak(active) == 6
    assert longest_streak([]) == 0
