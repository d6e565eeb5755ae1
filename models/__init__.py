"""Calendar core data models package.

This package contains the event value model, the per-calendar event store,
calendars, and the calendar manager with its cross-calendar copy engine.
"""

from models.exceptions import (
    CalendarError,
    CalendarValidationError,
    DuplicateEventError,
    NoActiveCalendarError,
    NotFoundError,
)
from models.event import Event, Location, Status, build_event
from models.recurrence import count_matching_days, parse_weekdays, repeat_count_until
from models.event_store import PAGE_SIZE, EventStore
from models.calendar import Calendar
from models.calendar_manager import CalendarManager

__all__ = [
    "CalendarError",
    "CalendarValidationError",
    "DuplicateEventError",
    "NoActiveCalendarError",
    "NotFoundError",
    "Event",
    "Location",
    "Status",
    "build_event",
    "count_matching_days",
    "parse_weekdays",
    "repeat_count_until",
    "PAGE_SIZE",
    "EventStore",
    "Calendar",
    "CalendarManager",
]
