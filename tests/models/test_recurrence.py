"""Unit tests for weekday parsing and repeat counting."""

from datetime import date, datetime

import pytest

from models.event_store import EventStore
from models.exceptions import CalendarValidationError
from models.recurrence import (
    WEEKDAY_LETTERS,
    count_matching_days,
    parse_weekdays,
    repeat_count_until,
)


class TestParseWeekdays:
    """Tests for parse_weekdays."""

    def test_all_letters(self):
        assert parse_weekdays("MTWRFSU") == frozenset(range(7))

    def test_letters_map_to_python_weekdays(self):
        assert WEEKDAY_LETTERS["R"] == 3
        assert WEEKDAY_LETTERS["U"] == 6

    def test_empty_or_none(self):
        assert parse_weekdays(None) == frozenset()
        assert parse_weekdays([]) == frozenset()

    def test_invalid_letter(self):
        with pytest.raises(CalendarValidationError, match="Invalid Weekday"):
            parse_weekdays(["M", "Q"])


class TestCountMatchingDays:
    """Tests for count_matching_days."""

    def test_inclusive_range(self):
        # 2024-04-08 is a Monday
        assert count_matching_days(date(2024, 4, 8), date(2024, 4, 12), "MWF") == 3

    def test_accepts_datetimes(self):
        assert (
            count_matching_days(
                datetime(2024, 4, 8, 23, 0), datetime(2024, 4, 8, 1, 0), ["M"]
            )
            == 1
        )

    def test_inverted_range_is_empty(self):
        assert count_matching_days(date(2024, 4, 12), date(2024, 4, 8), "MTWRF") == 0


class TestRepeatCountUntil:
    """Tests for repeat_count_until."""

    def test_daily(self):
        assert repeat_count_until(date(2024, 3, 20), date(2024, 3, 25)) == 5

    def test_until_on_or_before_start(self):
        assert repeat_count_until(date(2024, 3, 20), date(2024, 3, 20)) == 0
        assert repeat_count_until(date(2024, 3, 20), date(2024, 3, 1), "M") == 0

    def test_weekdays_excludes_base_date(self):
        # Wednesday 2024-04-10 through Wednesday 2024-04-17: F, M, W
        assert repeat_count_until(date(2024, 4, 10), date(2024, 4, 17), "MWF") == 3

    def test_series_ends_on_until(self):
        """The computed count makes the last occurrence land on the until date."""
        store = EventStore()
        start = datetime(2024, 4, 10, 7, 0)
        until = date(2024, 5, 3)

        store.create_event(
            "Gym",
            None,
            start,
            datetime(2024, 4, 10, 8, 0),
            weekdays="MWF",
            repeat_count=repeat_count_until(start, until, "MWF"),
        )

        assert store.events[-1].start.date() == until
        assert len(store.events) == 11
