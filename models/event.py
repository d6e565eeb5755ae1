"""Calendar event value model."""

from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from models.exceptions import CalendarValidationError

# All-day events span the working day of their start date.
ALL_DAY_START = time(8, 0)
ALL_DAY_END = time(17, 0)

_DATETIME = TypeAdapter(datetime)


class _TextEnum(str, Enum):
    """String enum parsed case-insensitively from caller text."""

    @classmethod
    def parse(cls, value: Union[str, "_TextEnum"]) -> "_TextEnum":
        """Parse a member from its name, ignoring case.

        Args:
            value: Member or text such as "physical" or "Private".

        Returns:
            The matching enum member.

        Raises:
            CalendarValidationError: If the text names no member.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise CalendarValidationError(
                f"Invalid {cls.__name__.lower()}: {value}"
            ) from None


class Location(_TextEnum):
    """Where an event takes place."""

    PHYSICAL = "PHYSICAL"
    ONLINE = "ONLINE"


class Status(_TextEnum):
    """Visibility of an event."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class Event(BaseModel):
    """One concrete occurrence on a calendar.

    Events are immutable. Editing builds a new Event which replaces the old one
    in its store. Two events are equal when their identity triple
    (subject, start, end) is equal, whatever their other fields hold.

    Times are naive wall-clock datetimes in the owning calendar's time zone.

    Args:
        subject: Event title, never empty.
        description: Optional longer description.
        start: Start date-time.
        end: End date-time. When omitted the event becomes an all-day event
            spanning 08:00-17:00 on the start date.
        location: PHYSICAL, ONLINE, or None.
        status: PUBLIC, PRIVATE, or None.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = Field(min_length=1, description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    start: datetime = Field(description="Start date-time (wall clock)")
    end: datetime = Field(description="End date-time (wall clock)")
    location: Optional[Location] = Field(default=None, description="Event location")
    status: Optional[Status] = Field(default=None, description="Event status")

    @model_validator(mode="before")
    @classmethod
    def apply_all_day_default(cls, data: Any) -> Any:
        """Turn an event without an end into an 08:00-17:00 all-day event.

        The supplied start's time of day is discarded in that case.
        """
        if not isinstance(data, dict):
            return data
        start = data.get("start")
        if data.get("end") is None and start is not None:
            day = _DATETIME.validate_python(start).date()
            data = {
                **data,
                "start": datetime.combine(day, ALL_DAY_START),
                "end": datetime.combine(day, ALL_DAY_END),
            }
        return data

    @field_validator("start", "end")
    @classmethod
    def validate_wall_clock(cls, value: datetime) -> datetime:
        """Reject zone-aware datetimes; zones belong to calendars."""
        if value.tzinfo is not None:
            raise ValueError("Event times must be naive wall-clock datetimes")
        return value

    @field_validator("location", mode="before")
    @classmethod
    def parse_location(cls, value: Any) -> Optional[Location]:
        if value is None:
            return None
        return Location.parse(value)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, value: Any) -> Optional[Status]:
        if value is None:
            return None
        return Status.parse(value)

    @model_validator(mode="after")
    def validate_time_range(self) -> "Event":
        if self.end < self.start:
            raise ValueError("End date-time cannot be before start date-time")
        return self

    @property
    def identity(self) -> tuple[str, datetime, datetime]:
        """The (subject, start, end) triple used for equality and lookup."""
        return (self.subject, self.start, self.end)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    @property
    def all_day(self) -> bool:
        """Whether this event spans exactly 08:00-17:00 on a single date."""
        return (
            self.start.date() == self.end.date()
            and self.start.time() == ALL_DAY_START
            and self.end.time() == ALL_DAY_END
        )

    def falls_on(self, day: date) -> bool:
        """Check whether the event starts or ends on the given date."""
        return self.start.date() == day or self.end.date() == day

    def is_within(self, range_start: datetime, range_end: datetime) -> bool:
        """Check whether the event lies entirely inside a range (inclusive)."""
        return range_start <= self.start and self.end <= range_end

    def overlaps(self, range_start: datetime, range_end: datetime) -> bool:
        """Check whether the event shares any moment with a range (inclusive)."""
        return self.start <= range_end and range_start <= self.end

    def contains(self, moment: datetime) -> bool:
        """Check whether a moment falls inside the event (inclusive)."""
        return self.start <= moment <= self.end

    def overlaps_days(self, first_day: date, last_day: date) -> bool:
        """Check whether the event touches any day of an inclusive day range."""
        return self.overlaps(
            datetime.combine(first_day, time.min), datetime.combine(last_day, time.max)
        )

    def with_changes(self, **changes: Any) -> "Event":
        """Build a validated copy of this event with some fields replaced.

        Args:
            **changes: Field values to replace.

        Returns:
            A new Event.

        Raises:
            CalendarValidationError: If the resulting event is invalid.
        """
        fields = {
            "subject": self.subject,
            "description": self.description,
            "start": self.start,
            "end": self.end,
            "location": self.location,
            "status": self.status,
        }
        fields.update(changes)
        return build_event(**fields)


def build_event(
    subject: Optional[str],
    start: Optional[datetime],
    end: Optional[datetime] = None,
    description: Optional[str] = None,
    location: Union[Location, str, None] = None,
    status: Union[Status, str, None] = None,
) -> Event:
    """Validate the given fields and build an Event.

    Args:
        subject: Event title. Required.
        start: Start date-time. Required.
        end: End date-time, or None for an all-day event.
        description: Optional description.
        location: Location member or its name (any case).
        status: Status member or its name (any case).

    Returns:
        The new immutable Event.

    Raises:
        CalendarValidationError: If subject or start is missing, end is
            before start, or location/status text is not recognized.
    """
    if not subject:
        raise CalendarValidationError("Subject cannot be empty")
    if start is None:
        raise CalendarValidationError("Start date-time cannot be empty")
    try:
        return Event(
            subject=subject,
            description=description,
            start=start,
            end=end,
            location=location,
            status=status,
        )
    except ValidationError as e:
        raise CalendarValidationError(describe_validation_error(e)) from e


def parse_datetime(value: Union[datetime, str]) -> datetime:
    """Parse an ISO-8601 date-time given as text.

    Args:
        value: A datetime, or text such as "2024-03-20T14:30".

    Returns:
        The parsed datetime.

    Raises:
        CalendarValidationError: If the text is not a valid date-time.
    """
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise CalendarValidationError(f"Invalid date-time: {value}") from None


def require_wall_clock(moment: datetime, label: str = "Date-time") -> datetime:
    """Reject a timezone-aware datetime used to query or look up events.

    Stored events hold naive wall-clock times, which cannot be compared with
    aware values.

    Raises:
        CalendarValidationError: If ``moment`` carries a tzinfo.
    """
    if moment.tzinfo is not None:
        raise CalendarValidationError(f"{label} must be a naive wall-clock date-time")
    return moment


def as_date(value: Union[date, datetime]) -> date:
    """Get the calendar date of a date or datetime."""
    return value.date() if isinstance(value, datetime) else value


def describe_validation_error(exc: ValidationError) -> str:
    """Reduce a pydantic ValidationError to its first human-readable message."""
    error = exc.errors()[0]
    cause = error.get("ctx", {}).get("error")
    if cause is not None:
        return str(cause)
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error['msg']}" if field else error["msg"]
