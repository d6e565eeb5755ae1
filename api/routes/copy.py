"""Copy endpoints.

Copies events from the active calendar into another calendar. Times are
converted into the target calendar's time zone and then shifted to the
requested date or date-time.
"""

from datetime import date, datetime

from fastapi import APIRouter
from pydantic import BaseModel

from api.dependencies import CalendarManagerDep
from api.models import CopyResponse, EventResponse
from models.event import Event

router = APIRouter(
    prefix="/copy",
    tags=["copy"],
)


# Request Models


class CopyEventRequest(BaseModel):
    """Request to copy a single event.

    Attributes:
        subject: Subject of the event to copy.
        start: Exact start of the event to copy.
        target_calendar: Name of the destination calendar.
        new_start: Requested start of the copy.
    """

    subject: str
    start: datetime
    target_calendar: str
    new_start: datetime


class CopyDayRequest(BaseModel):
    """Request to copy every event starting on one date."""

    day: date
    target_calendar: str
    new_day: date


class CopyRangeRequest(BaseModel):
    """Request to copy every event overlapping an inclusive date range.

    Attributes:
        start_day: First date of the range.
        end_day: Last date of the range.
        target_calendar: Name of the destination calendar.
        new_start_day: Date the range start moves to.
    """

    start_day: date
    end_day: date
    target_calendar: str
    new_start_day: date


def _copy_response(events: list[Event], target_calendar: str) -> CopyResponse:
    return CopyResponse(
        events=[EventResponse.from_event(event) for event in events],
        count=len(events),
        target_calendar=target_calendar,
    )


# Route Handlers


@router.post("/event", response_model=CopyResponse)
async def copy_event(request: CopyEventRequest, manager: CalendarManagerDep):
    """Copy one event from the active calendar.

    Args:
        request: Event to copy, destination and new start.
        manager: Calendar manager dependency.

    Returns:
        The converted copy.
    """
    event = manager.copy_event(
        request.subject, request.start, request.target_calendar, request.new_start
    )
    return _copy_response([event], request.target_calendar)


@router.post("/on", response_model=CopyResponse)
async def copy_events_on(request: CopyDayRequest, manager: CalendarManagerDep):
    """Copy every event starting on a date.

    Args:
        request: Source date, destination and new date.
        manager: Calendar manager dependency.

    Returns:
        The converted copies.
    """
    events = manager.copy_events_on(request.day, request.target_calendar, request.new_day)
    return _copy_response(events, request.target_calendar)


@router.post("/between", response_model=CopyResponse)
async def copy_events_between(request: CopyRangeRequest, manager: CalendarManagerDep):
    """Copy every event overlapping a date range.

    Args:
        request: Source range, destination and new start date.
        manager: Calendar manager dependency.

    Returns:
        The converted copies.
    """
    events = manager.copy_events_between(
        request.start_day,
        request.end_day,
        request.target_calendar,
        request.new_start_day,
    )
    return _copy_response(events, request.target_calendar)
