"""Weekday letters and occurrence counting for recurring events."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Optional, Union

from models.event import as_date
from models.exceptions import CalendarValidationError

# Letters accepted in weekday sets, mapped to datetime.weekday() numbers.
WEEKDAY_LETTERS: dict[str, int] = {
    "M": 0,
    "T": 1,
    "W": 2,
    "R": 3,
    "F": 4,
    "S": 5,
    "U": 6,
}


def parse_weekdays(letters: Optional[Iterable[str]]) -> frozenset[int]:
    """Convert weekday letters to weekday numbers (Monday is 0).

    Letters are M, T, W, R, F, S, U for Monday through Sunday, in any case.
    A single string such as "MWF" is treated as a sequence of letters.

    Args:
        letters: Weekday letters, or None.

    Returns:
        The set of weekday numbers; empty when no letters were given.

    Raises:
        CalendarValidationError: If any letter is not a weekday letter.
    """
    if not letters:
        return frozenset()
    days = set()
    for letter in letters:
        day = WEEKDAY_LETTERS.get(str(letter).strip().upper())
        if day is None:
            raise CalendarValidationError("Invalid Weekday")
        days.add(day)
    return frozenset(days)


def count_matching_days(
    start: Union[date, datetime],
    until: Union[date, datetime],
    weekdays: Iterable[str],
) -> int:
    """Count the days in [start, until] whose weekday is in the set.

    Both ends are inclusive and compared by date only.
    """
    days = parse_weekdays(weekdays)
    current, last = as_date(start), as_date(until)
    count = 0
    while current <= last:
        if current.weekday() in days:
            count += 1
        current += timedelta(days=1)
    return count


def repeat_count_until(
    start: Union[date, datetime],
    until: Union[date, datetime],
    weekdays: Optional[Iterable[str]] = None,
) -> int:
    """Compute the repeat count that extends a series up to a date.

    EventStore.create_event counts generated occurrences after the base
    date: matching weekdays when a weekday set is given, calendar days
    otherwise. This returns the count that makes the last occurrence fall
    on or before ``until``.

    Args:
        start: Date of the base event.
        until: Last date the series may reach (inclusive).
        weekdays: Optional weekday letters.

    Returns:
        Number of occurrences to generate after the base event, never negative.
    """
    first, last = as_date(start), as_date(until)
    if last <= first:
        return 0
    if not weekdays:
        return (last - first).days
    return count_matching_days(first + timedelta(days=1), last, weekdays)
