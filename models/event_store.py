"""Ordered per-calendar event storage."""

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

from pydantic import BaseModel, Field

from models.event import (
    Event,
    Location,
    Status,
    build_event,
    parse_datetime,
    require_wall_clock,
)
from models.exceptions import (
    CalendarValidationError,
    DuplicateEventError,
    NotFoundError,
)
from models.recurrence import parse_weekdays

logger = logging.getLogger(__name__)

# Maximum number of events returned by events_to_view.
PAGE_SIZE = 10


def _edit_subject(event: Event, value: str) -> Event:
    return event.with_changes(subject=value)


def _edit_start(event: Event, value: Union[str, datetime]) -> Event:
    new_start = parse_datetime(value)
    if new_start > event.end:
        raise CalendarValidationError("New start time cannot be after end time")
    return event.with_changes(start=new_start)


def _edit_end(event: Event, value: Union[str, datetime]) -> Event:
    new_end = parse_datetime(value)
    if new_end < event.start:
        raise CalendarValidationError("New end time cannot be before start time")
    return event.with_changes(end=new_end)


def _edit_description(event: Event, value: str) -> Event:
    return event.with_changes(description=value)


def _edit_location(event: Event, value: Union[str, Location]) -> Event:
    return event.with_changes(location=Location.parse(value))


def _edit_status(event: Event, value: Union[str, Status]) -> Event:
    return event.with_changes(status=Status.parse(value))


_EDITORS: dict[str, Callable[[Event, object], Event]] = {
    "subject": _edit_subject,
    "start": _edit_start,
    "end": _edit_end,
    "description": _edit_description,
    "location": _edit_location,
    "status": _edit_status,
}


def validate_property(property_name: str) -> str:
    """Normalize an editable property name.

    Args:
        property_name: One of subject, start, end, description, location,
            status, in any case.

    Returns:
        The lower-cased property name.

    Raises:
        CalendarValidationError: If the property cannot be edited.
    """
    name = (property_name or "").strip().lower()
    if name not in _EDITORS:
        raise CalendarValidationError(f"Invalid property: {property_name}")
    return name


def _format_time(moment: datetime) -> str:
    return moment.isoformat(timespec="minutes")


def _line_prefix(event: Event) -> str:
    if event.location is None:
        return "* "
    return f"* {event.location.value} "


class EventStore(BaseModel):
    """Chronologically ordered events of a single calendar.

    Events are kept sorted by start date, then start time. Events sharing a
    start keep their insertion order. Occurrences generated for a recurring
    series and pasted events are appended as they come.

    Args:
        events: Stored events in display order.
    """

    events: list[Event] = Field(
        default_factory=list, description="Stored events in display order"
    )

    # ===== Lookup =====

    def _index_of(self, subject: str, start: datetime) -> Optional[int]:
        require_wall_clock(start, "Start date-time")
        for index, event in enumerate(self.events):
            if event.subject == subject and event.start == start:
                return index
        return None

    def find_event(self, subject: str, start: datetime) -> Optional[Event]:
        """Get the event with exactly this subject and start.

        Returns:
            The matching event, or None.
        """
        index = self._index_of(subject, start)
        return None if index is None else self.events[index]

    def contains(self, event: Event) -> bool:
        """Check whether an event with the same identity triple is stored."""
        return event in self.events

    # ===== Creation =====

    def create_event(
        self,
        subject: str,
        description: Optional[str],
        start: datetime,
        end: Optional[datetime],
        location: Union[Location, str, None] = None,
        status: Union[Status, str, None] = None,
        weekdays: Optional[Iterable[str]] = None,
        repeat_count: int = 0,
    ) -> list[Event]:
        """Create an event and, optionally, its recurring occurrences.

        With ``repeat_count`` > 0 and no weekdays, one occurrence is generated
        on each of the following ``repeat_count`` days. With weekdays, the
        walk continues day by day until ``repeat_count`` occurrences land on
        a listed weekday. Generated occurrences reuse the base event's times
        of day and are appended without duplicate checks.

        Args:
            subject: Event title.
            description: Optional description.
            start: Start date-time.
            end: End date-time, or None for an all-day event.
            location: Location member or name.
            status: Status member or name.
            weekdays: Optional weekday letters (M, T, W, R, F, S, U).
            repeat_count: Number of occurrences to generate after the base event.

        Returns:
            The created events, base event first.

        Raises:
            CalendarValidationError: If any field, weekday letter, or the
                repeat count is invalid. Nothing is stored in that case.
            DuplicateEventError: If the base event already exists.
        """
        if repeat_count < 0:
            raise CalendarValidationError("Repeat count cannot be negative")
        days = parse_weekdays(weekdays)
        base = build_event(
            subject=subject,
            start=start,
            end=end,
            description=description,
            location=location,
            status=status,
        )
        if self.contains(base):
            raise DuplicateEventError(base)

        occurrences = self._expand(base, days, repeat_count)

        self._insert_sorted(base)
        self.events.extend(occurrences)

        logger.info(
            "Created event '%s' at %s with %d repeat(s)",
            base.subject,
            base.start.isoformat(),
            len(occurrences),
        )
        return [base, *occurrences]

    def _expand(
        self, base: Event, days: frozenset[int], repeat_count: int
    ) -> list[Event]:
        """Generate the occurrences that follow a base event."""
        span = base.end.date() - base.start.date()
        current = base.start.date()
        occurrences: list[Event] = []
        while len(occurrences) < repeat_count:
            current += timedelta(days=1)
            if days and current.weekday() not in days:
                continue
            occurrences.append(
                base.with_changes(
                    start=datetime.combine(current, base.start.time()),
                    end=datetime.combine(current + span, base.end.time()),
                )
            )
        return occurrences

    def _insert_sorted(self, event: Event) -> None:
        """Insert by start, after any events with the same or earlier start."""
        if not self.events or self.events[-1].start <= event.start:
            self.events.append(event)
            return
        for index in range(len(self.events) - 1, -1, -1):
            if self.events[index].start <= event.start:
                self.events.insert(index + 1, event)
                return
        self.events.insert(0, event)

    def paste(self, events: Iterable[Event]) -> int:
        """Append events that are not already stored.

        Events whose identity triple is already present are skipped silently.

        Args:
            events: Events to add.

        Returns:
            Number of events actually added.
        """
        added = 0
        for event in events:
            if self.contains(event):
                logger.debug(
                    "Skipping duplicate '%s' at %s", event.subject, event.start.isoformat()
                )
                continue
            self.events.append(event)
            added += 1
        return added

    # ===== Editing =====

    def edit_event(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        new_value: Union[str, datetime, Location, Status],
    ) -> Event:
        """Edit one property of the single event matching subject and start.

        Args:
            property_name: Property to change (subject, start, end,
                description, location, status).
            subject: Subject of the event to edit.
            start: Exact start of the event to edit.
            new_value: New property value. Start/end accept ISO-8601 text.

        Returns:
            The replacement event.

        Raises:
            CalendarValidationError: If the property or value is invalid.
            NotFoundError: If no event matches.
        """
        field = validate_property(property_name)
        index = self._index_of(subject, start)
        if index is None:
            raise NotFoundError("event", f"{subject} at {_format_time(start)}")
        return self._replace([index], field, new_value)[0]

    def edit_events(
        self,
        property_name: str,
        subject: str,
        start: datetime,
        new_value: Union[str, datetime, Location, Status],
    ) -> list[Event]:
        """Edit every event with this subject starting on or after ``start``.

        Raises:
            CalendarValidationError: If the property or value is invalid.
            NotFoundError: If no event matches.
        """
        field = validate_property(property_name)
        require_wall_clock(start, "Start date-time")
        indices = [
            index
            for index, event in enumerate(self.events)
            if event.subject == subject and event.start >= start
        ]
        if not indices:
            raise NotFoundError("series", f"{subject} from {_format_time(start)}")
        return self._replace(indices, field, new_value)

    def edit_series(
        self,
        property_name: str,
        subject: str,
        start: Optional[datetime],
        new_value: Union[str, datetime, Location, Status],
    ) -> list[Event]:
        """Edit every event with this subject, whatever its date.

        ``start`` is accepted for symmetry with the other edits and ignored.

        Raises:
            CalendarValidationError: If the property or value is invalid.
            NotFoundError: If no event matches.
        """
        field = validate_property(property_name)
        indices = [
            index for index, event in enumerate(self.events) if event.subject == subject
        ]
        if not indices:
            raise NotFoundError("series", subject)
        return self._replace(indices, field, new_value)

    def _replace(self, indices: list[int], field: str, new_value: object) -> list[Event]:
        """Apply an edit at each index, writing only once every edit succeeded."""
        editor = _EDITORS[field]
        updated = [editor(self.events[index], new_value) for index in indices]
        for index, event in zip(indices, updated):
            self.events[index] = event
        logger.info("Edited %s of %d event(s)", field, len(updated))
        return updated

    # ===== Queries =====

    def events_on(self, day: date) -> list[Event]:
        """Get events that start or end on the given date."""
        return [event for event in self.events if event.falls_on(day)]

    def events_within(self, range_start: datetime, range_end: datetime) -> list[Event]:
        """Get events lying entirely inside [range_start, range_end]."""
        require_wall_clock(range_start, "Range start")
        require_wall_clock(range_end, "Range end")
        return [
            event for event in self.events if event.is_within(range_start, range_end)
        ]

    def is_busy(self, moment: datetime) -> bool:
        """Check whether any event covers the moment, ends included."""
        require_wall_clock(moment)
        return any(event.contains(moment) for event in self.events)

    def print_date(self, day: date) -> str:
        """Render events that start or end on a date, one line each."""
        return "\n".join(
            f"{_line_prefix(event)}{event.subject} on {event.start.date().isoformat()}"
            for event in self.events_on(day)
        )

    def print_date_time_string(self, range_start: datetime, range_end: datetime) -> str:
        """Render events contained in a date-time range, one line each."""
        return "\n".join(
            f"{_line_prefix(event)}{event.subject} between "
            f"{_format_time(event.start)} and {_format_time(event.end)}"
            for event in self.events_within(range_start, range_end)
        )

    def print_status(self, moment: datetime) -> str:
        """Report "busy" if an event covers the moment, else "available"."""
        return "busy" if self.is_busy(moment) else "available"

    # ===== Paging =====

    def events_left(self, day: date) -> int:
        """Count events starting on or before the given date."""
        return sum(1 for event in self.events if event.start.date() <= day)

    def events_to_view(self, day: date) -> list[Event]:
        """Get up to PAGE_SIZE events starting on or after the given date."""
        upcoming = [event for event in self.events if event.start.date() >= day]
        return upcoming[:PAGE_SIZE]
