"""Shared request and response models for API endpoints.

Route modules build their responses from these models so every endpoint
renders events and calendars the same way.
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from models.calendar import Calendar
from models.event import Event


class EventResponse(BaseModel):
    """One event as returned by the API.

    Attributes:
        subject: Event title.
        description: Event description, if any.
        start: Start date-time in the calendar's wall clock.
        end: End date-time in the calendar's wall clock.
        location: PHYSICAL, ONLINE, or None.
        status: PUBLIC, PRIVATE, or None.
        all_day: Whether the event spans 08:00-17:00 on one date.
    """

    subject: str
    description: Optional[str] = None
    start: datetime
    end: datetime
    location: Optional[str] = None
    status: Optional[str] = None
    all_day: bool = False

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            subject=event.subject,
            description=event.description,
            start=event.start,
            end=event.end,
            location=event.location.value if event.location else None,
            status=event.status.value if event.status else None,
            all_day=event.all_day,
        )


class EventListResponse(BaseModel):
    """A list of events with its length.

    Attributes:
        events: The events.
        count: Number of events returned.
    """

    events: list[EventResponse]
    count: int

    @classmethod
    def from_events(cls, events: list[Event]) -> "EventListResponse":
        return cls(
            events=[EventResponse.from_event(event) for event in events],
            count=len(events),
        )


class EventQueryResponse(EventListResponse):
    """Matching events plus their printed listing.

    Attributes:
        text: One line per matching event, newline separated.
    """

    text: str = ""


class StatusResponse(BaseModel):
    """Busy/available status at a moment."""

    at: datetime
    status: Literal["busy", "available"]


class EventViewResponse(EventListResponse):
    """One page of events for a date.

    Attributes:
        day: Date the page starts from.
        events_left: Events starting on or before that date.
    """

    day: date
    events_left: int


class CalendarResponse(BaseModel):
    """A calendar as returned by the API.

    Attributes:
        name: Calendar name.
        timezone: IANA time zone identifier.
        event_count: Number of events stored.
        active: Whether this calendar is currently in use.
    """

    name: str
    timezone: str
    event_count: int
    active: bool = False

    @classmethod
    def from_calendar(cls, calendar: Calendar, active: bool = False) -> "CalendarResponse":
        return cls(
            name=calendar.name,
            timezone=calendar.timezone,
            event_count=calendar.event_count,
            active=active,
        )


class CopyResponse(EventListResponse):
    """Result of a copy operation.

    Attributes:
        target_calendar: Name of the calendar the events were copied into.
    """

    target_calendar: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(description="Short error title")
    detail: str = Field(description="Human-readable explanation")
    type: str = Field(description="Exception class name")
