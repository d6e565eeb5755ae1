"""Event endpoints for the active calendar.

These endpoints create and edit events, query them by date or date-time
range, report busy/available status, and page through upcoming events.
"""

from datetime import date, datetime
from typing import Literal, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, Field, model_validator

from api.dependencies import CalendarManagerDep
from api.models import (
    EventListResponse,
    EventQueryResponse,
    EventResponse,
    EventViewResponse,
    StatusResponse,
)
from models.exceptions import CalendarValidationError
from models.recurrence import repeat_count_until

router = APIRouter(
    prefix="/events",
    tags=["events"],
)


# Request Models


class CreateEventRequest(BaseModel):
    """Request model for creating an event in the active calendar.

    Attributes:
        subject: Event title.
        description: Optional description.
        start: Start date-time (wall clock of the active calendar).
        end: End date-time. Omit for an all-day event (08:00-17:00).
        location: PHYSICAL or ONLINE, any case.
        status: PUBLIC or PRIVATE, any case.
        weekdays: Weekday letters (M, T, W, R, F, S, U) for repeats.
        repeat_count: Number of occurrences to add after the first one.
        until: Last date the repeats may reach. Replaces repeat_count.
    """

    subject: str
    description: Optional[str] = None
    start: datetime
    end: Optional[datetime] = None
    location: Optional[str] = None
    status: Optional[str] = None
    weekdays: list[str] = Field(default_factory=list)
    repeat_count: int = Field(default=0, ge=0)
    until: Optional[date] = None

    @model_validator(mode="after")
    def check_repeat_limit(self) -> "CreateEventRequest":
        if self.until is not None and self.repeat_count:
            raise ValueError("Give either repeat_count or until, not both")
        return self

    def resolved_repeat_count(self) -> int:
        """Number of repeats to generate, derived from ``until`` when given."""
        if self.until is None:
            return self.repeat_count
        return repeat_count_until(self.start, self.until, self.weekdays or None)


class EditEventRequest(BaseModel):
    """Request model for editing one event, a forward run, or a whole series.

    Attributes:
        scope: "single" edits the event at exactly ``start``; "forward"
            edits every event with the subject starting at or after
            ``start``; "series" edits every event with the subject.
        property: Property to change.
        subject: Subject of the event(s) to edit.
        start: Start of the event to edit. Ignored for "series".
        new_value: New value, as text.
    """

    scope: Literal["single", "forward", "series"] = "single"
    property: str
    subject: str
    start: Optional[datetime] = None
    new_value: str


# Route Handlers


@router.post("", response_model=EventListResponse, status_code=status.HTTP_201_CREATED)
async def create_event(request: CreateEventRequest, manager: CalendarManagerDep):
    """Create an event, plus any repeats, in the active calendar.

    Args:
        request: Event fields and repeat settings.
        manager: Calendar manager dependency.

    Returns:
        The created events, first event first.
    """
    events = manager.create_event(
        request.subject,
        request.description,
        request.start,
        request.end,
        location=request.location,
        status=request.status,
        weekdays=request.weekdays,
        repeat_count=request.resolved_repeat_count(),
    )
    return EventListResponse.from_events(events)


@router.post("/edit", response_model=EventListResponse)
async def edit_events(request: EditEventRequest, manager: CalendarManagerDep):
    """Edit one property of the matching events.

    Args:
        request: Scope, property, target event and new value.
        manager: Calendar manager dependency.

    Returns:
        The replacement events.
    """
    if request.scope == "series":
        events = manager.edit_series(
            request.property, request.subject, request.start, request.new_value
        )
        return EventListResponse.from_events(events)

    if request.start is None:
        raise CalendarValidationError("Start date-time cannot be empty")

    if request.scope == "forward":
        events = manager.edit_events(
            request.property, request.subject, request.start, request.new_value
        )
    else:
        events = [
            manager.edit_event(
                request.property, request.subject, request.start, request.new_value
            )
        ]
    return EventListResponse.from_events(events)


@router.get("/on/{day}", response_model=EventQueryResponse)
async def events_on(day: date, manager: CalendarManagerDep):
    """List events that start or end on a date.

    Args:
        day: The date to query.
        manager: Calendar manager dependency.

    Returns:
        Matching events and their printed listing.
    """
    events = manager.events_on(day)
    text = manager.print_date(day)
    response = EventQueryResponse.from_events(events)
    response.text = text
    return response


@router.get("/between", response_model=EventQueryResponse)
async def events_between(start: datetime, end: datetime, manager: CalendarManagerDep):
    """List events lying entirely inside a date-time range.

    Args:
        start: Range start, inclusive.
        end: Range end, inclusive.
        manager: Calendar manager dependency.

    Returns:
        Matching events and their printed listing.
    """
    events = manager.events_within(start, end)
    text = manager.print_date_time_string(start, end)
    response = EventQueryResponse.from_events(events)
    response.text = text
    return response


@router.get("/status", response_model=StatusResponse)
async def get_status(at: datetime, manager: CalendarManagerDep):
    """Report whether any event covers a moment.

    Args:
        at: The moment to check.
        manager: Calendar manager dependency.

    Returns:
        "busy" or "available".
    """
    return StatusResponse(at=at, status=manager.print_status(at))


@router.get("/view", response_model=EventViewResponse)
async def view_events(day: date, manager: CalendarManagerDep):
    """Get one page of events starting on or after a date.

    Args:
        day: First date of the page.
        manager: Calendar manager dependency.

    Returns:
        Up to ten events and the count of events starting on or before the date.
    """
    events = manager.events_to_view(day)
    left = manager.events_left(day)
    return EventViewResponse(
        events=[EventResponse.from_event(event) for event in events],
        count=len(events),
        day=day,
        events_left=left,
    )
