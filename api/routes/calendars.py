"""Calendar endpoints.

Provides REST API for creating calendars, renaming or re-zoning them, and
selecting the calendar that event and copy operations work on.
"""

from pydantic import BaseModel, Field

from fastapi import APIRouter, status

from api.dependencies import CalendarManagerDep
from api.models import CalendarResponse

router = APIRouter(
    prefix="/calendars",
    tags=["calendars"],
)


# Request Models


class CreateCalendarRequest(BaseModel):
    """Request to create a new calendar.

    Args:
        name: Calendar name.
        timezone: IANA time zone identifier.
    """

    name: str = Field(description="Calendar name")
    timezone: str = Field(default="UTC", description="IANA time zone identifier")


class EditCalendarRequest(BaseModel):
    """Request to change a calendar's name or time zone.

    Args:
        property: "name" or "timezone".
        new_value: New name or time zone identifier.
    """

    property: str = Field(description="Property to change (name or timezone)")
    new_value: str = Field(description="New value")


class UseCalendarRequest(BaseModel):
    """Request to select the active calendar."""

    name: str = Field(description="Calendar name")


# Route Handlers


@router.get("", response_model=list[CalendarResponse])
async def list_calendars(manager: CalendarManagerDep):
    """List all calendars in creation order.

    Args:
        manager: Calendar manager dependency.

    Returns:
        Every calendar, flagged when active.
    """
    calendars, active = manager.list_calendars()
    return [
        CalendarResponse.from_calendar(calendar, active=calendar is active)
        for calendar in calendars
    ]


@router.post("", response_model=CalendarResponse, status_code=status.HTTP_201_CREATED)
async def create_calendar(request: CreateCalendarRequest, manager: CalendarManagerDep):
    """Create a new calendar.

    Args:
        request: Calendar name and time zone.
        manager: Calendar manager dependency.

    Returns:
        The created calendar.
    """
    calendar = manager.create_calendar(request.name, request.timezone)
    return CalendarResponse.from_calendar(calendar)


@router.patch("/{name}", response_model=CalendarResponse)
async def edit_calendar(name: str, request: EditCalendarRequest, manager: CalendarManagerDep):
    """Rename a calendar or change its time zone.

    The calendar keeps all of its events.

    Args:
        name: Name of the calendar to edit.
        request: Property and new value.
        manager: Calendar manager dependency.

    Returns:
        The edited calendar.
    """
    calendar = manager.edit_calendar(name, request.property, request.new_value)
    return CalendarResponse.from_calendar(
        calendar, active=calendar is manager.active_calendar
    )


@router.post("/use", response_model=CalendarResponse)
async def use_calendar(request: UseCalendarRequest, manager: CalendarManagerDep):
    """Select the calendar that event and copy operations work on.

    Args:
        request: Name of the calendar to use.
        manager: Calendar manager dependency.

    Returns:
        The now active calendar.
    """
    calendar = manager.use_calendar(request.name)
    return CalendarResponse.from_calendar(calendar, active=True)


@router.get("/active", response_model=CalendarResponse)
async def get_active_calendar(manager: CalendarManagerDep):
    """Get the calendar currently in use.

    Raises:
        NoActiveCalendarError: If no calendar has been selected.
    """
    calendar = manager.require_active_calendar()
    return CalendarResponse.from_calendar(calendar, active=True)
