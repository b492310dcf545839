from datetime import date, datetime

import pytest

from lifelog.clock import FixedClock, parse_query_date, to_storage_datetime
from lifelog.errors import ValidationError

from tests.conftest import TODAY


class TestParseQueryDate:
    def test_plain_date(self):
        assert parse_query_date("2024-03-02", "startDate", FixedClock(TODAY)) == date(2024, 3, 2)

    def test_missing_value(self):
        assert parse_query_date(None, "startDate", FixedClock(TODAY)) is None
        assert parse_query_date("", "startDate", FixedClock(TODAY)) is None

    def test_offset_timestamp_lands_on_reference_day(self):
        utc = FixedClock(TODAY, tz_name="UTC")
        # 22:00 in UTC-5 is already the next day in UTC
        assert parse_query_date("2024-06-14T22:00:00-05:00", "endDate", utc) == date(2024, 6, 15)

        new_york = FixedClock(TODAY, tz_name="America/New_York")
        assert parse_query_date("2024-06-15T01:00:00+00:00", "endDate", new_york) == date(2024, 6, 14)

    def test_naive_timestamp_is_local(self):
        new_york = FixedClock(TODAY, tz_name="America/New_York")
        assert parse_query_date("2024-06-14T23:30:00", "endDate", new_york) == date(2024, 6, 14)

    def test_garbage_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            parse_query_date("last tuesday", "startDate", FixedClock(TODAY))
        assert "startDate" in exc.value.message


class TestStorageDatetime:
    def test_bare_date_is_local_midnight_in_utc(self):
        new_york = FixedClock(TODAY, tz_name="America/New_York")
        assert to_storage_datetime("2024-06-10", new_york) == datetime(2024, 6, 10, 4)

    def test_defaults_to_now(self):
        clock = FixedClock(datetime(2024, 6, 15, 8, 30), tz_name="UTC")
        assert to_storage_datetime(None, clock) == datetime(2024, 6, 15, 8, 30)
