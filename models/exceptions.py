"""Domain exceptions raised by the calendar core.

Every error derives from CalendarError so hosts can catch the whole family.
Each class also inherits from the closest built-in exception, which keeps
generic ``except ValueError`` style handling working.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from models.event import Event


class CalendarError(Exception):
    """Base class for all calendar core errors."""


class CalendarValidationError(CalendarError, ValueError):
    """Raised when a value is malformed, missing, or out of range.

    Covers missing subject/start, end before start, unknown location or
    status text, invalid weekday letters, unknown edit properties, inverted
    date ranges, and unknown time zones.
    """


class DuplicateEventError(CalendarError, ValueError):
    """Raised when creating an event whose identity triple already exists.

    Args:
        event: The event that could not be created.
    """

    def __init__(self, event: "Event"):
        self.event = event
        super().__init__(
            "An event with the same subject, start time, and end time already exists"
        )


class NotFoundError(CalendarError, LookupError):
    """Raised when an event, series, or calendar cannot be located.

    Args:
        kind: What was being looked up ("event", "series", "calendar").
        key: The value used for the lookup.
    """

    def __init__(self, kind: str, key: Any):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} not found: {key}")


class NoActiveCalendarError(CalendarError, RuntimeError):
    """Raised when an operation needs an active calendar and none is in use."""

    def __init__(self, message: str = "No calendar is currently in use"):
        self.message = message
        super().__init__(message)
