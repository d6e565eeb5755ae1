"""Calendar registry, active-calendar selection, and cross-calendar copying.

The CalendarManager is the entry point callers use. It keeps the list of
calendars, remembers which one is in use, forwards event operations to the
active calendar's EventStore, and copies events between calendars while
converting their wall-clock times between time zones.
"""

import logging
import threading
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr, ValidationError

from models.calendar import Calendar
from models.event import (
    Event,
    Location,
    Status,
    as_date,
    describe_validation_error,
    require_wall_clock,
)
from models.event_store import EventStore
from models.exceptions import (
    CalendarValidationError,
    NoActiveCalendarError,
    NotFoundError,
)
from models.timezones import convert_wall_clock

logger = logging.getLogger(__name__)


def _build_calendar(**fields: Any) -> Calendar:
    try:
        return Calendar(**fields)
    except ValidationError as e:
        raise CalendarValidationError(describe_validation_error(e)) from e


class CalendarManager(BaseModel):
    """Registry of calendars and the cross-calendar copy engine.

    Calendar names are not unique. Lookups by name resolve to the most
    recently added calendar with that name.

    Every public operation runs under one re-entrant lock, so a single
    manager may be shared by a threaded host.

    Attributes:
        calendars: Calendars in creation order.
        active_calendar: Calendar targeted by event operations and used as
            the source of copies, or None until one is selected.
    """

    calendars: list[Calendar] = Field(default_factory=list)
    active_calendar: Optional[Calendar] = None

    _operation_lock: Any = PrivateAttr(default_factory=threading.RLock)

    # ===== Calendar Registry =====

    def _index_of(self, name: str) -> int:
        for index in range(len(self.calendars) - 1, -1, -1):
            if self.calendars[index].name == name:
                return index
        raise NotFoundError("calendar", name)

    def get_calendar(self, name: str) -> Calendar:
        """Get the most recently added calendar with this name.

        Raises:
            NotFoundError: If no calendar has this name.
        """
        with self._operation_lock:
            return self.calendars[self._index_of(name)]

    def list_calendars(self) -> tuple[list[Calendar], Optional[Calendar]]:
        """Get a snapshot of the registry and the calendar in use.

        Returns:
            A copy of the calendar list in creation order, and the active
            calendar or None.
        """
        with self._operation_lock:
            return list(self.calendars), self.active_calendar

    def create_calendar(self, name: str, timezone: str = "UTC") -> Calendar:
        """Create a calendar and add it to the registry.

        Args:
            name: Calendar name. Duplicates are allowed.
            timezone: IANA time zone identifier.

        Returns:
            The new calendar.

        Raises:
            CalendarValidationError: If the name is empty or the zone unknown.
        """
        with self._operation_lock:
            calendar = _build_calendar(name=name, timezone=timezone, store=EventStore())
            self.calendars.append(calendar)
            logger.info("Created calendar '%s' (%s)", name, timezone)
            return calendar

    def edit_calendar(self, name: str, property_name: str, new_value: str) -> Calendar:
        """Change a calendar's name or time zone.

        The calendar entry is rebuilt in place and keeps its EventStore. If the
        edited calendar was active, the active reference follows the new entry.

        Args:
            name: Name of the calendar to edit.
            property_name: "name" or "timezone", in any case.
            new_value: New name or IANA time zone identifier.

        Returns:
            The rebuilt calendar.

        Raises:
            NotFoundError: If no calendar has this name.
            CalendarValidationError: If the property or new value is invalid.
        """
        with self._operation_lock:
            index = self._index_of(name)
            current = self.calendars[index]
            field = (property_name or "").strip().lower()
            if field == "name":
                rebuild = current.renamed
            elif field == "timezone":
                rebuild = current.with_timezone
            else:
                raise CalendarValidationError(f"Invalid property: {property_name}")
            try:
                updated = rebuild(new_value)
            except ValidationError as e:
                raise CalendarValidationError(describe_validation_error(e)) from e

            self.calendars[index] = updated
            if self.active_calendar is current:
                self.active_calendar = updated
            logger.info("Edited %s of calendar '%s' to '%s'", field, name, new_value)
            return updated

    def use_calendar(self, name: str) -> Calendar:
        """Select the calendar that event operations and copies work on.

        Raises:
            NotFoundError: If no calendar has this name. The active calendar
                is left unchanged.
        """
        with self._operation_lock:
            self.active_calendar = self.calendars[self._index_of(name)]
            logger.debug("Using calendar '%s'", name)
            return self.active_calendar

    def require_active_calendar(self) -> Calendar:
        """Get the active calendar.

        Raises:
            NoActiveCalendarError: If no calendar is in use.
        """
        if self.active_calendar is None:
            raise NoActiveCalendarError()
        return self.active_calendar

    @property
    def active_store(self) -> EventStore:
        """EventStore of the active calendar.

        Raises:
            NoActiveCalendarError: If no calendar is in use.
        """
        return self.require_active_calendar().store

    # ===== Active Calendar Operations =====

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
        """Create an event (and its repeats) in the active calendar.

        See EventStore.create_event.
        """
        with self._operation_lock:
            return self.active_store.create_event(
                subject,
                description,
                start,
                end,
                location=location,
                status=status,
                weekdays=weekdays,
                repeat_count=repeat_count,
            )

    def edit_event(
        self, property_name: str, subject: str, start: datetime, new_value: Any
    ) -> Event:
        with self._operation_lock:
            return self.active_store.edit_event(property_name, subject, start, new_value)

    def edit_events(
        self, property_name: str, subject: str, start: datetime, new_value: Any
    ) -> list[Event]:
        with self._operation_lock:
            return self.active_store.edit_events(property_name, subject, start, new_value)

    def edit_series(
        self, property_name: str, subject: str, start: Optional[datetime], new_value: Any
    ) -> list[Event]:
        with self._operation_lock:
            return self.active_store.edit_series(property_name, subject, start, new_value)

    def events_on(self, day: date) -> list[Event]:
        with self._operation_lock:
            return self.active_store.events_on(day)

    def events_within(self, range_start: datetime, range_end: datetime) -> list[Event]:
        with self._operation_lock:
            return self.active_store.events_within(range_start, range_end)

    def print_date(self, day: date) -> str:
        with self._operation_lock:
            return self.active_store.print_date(day)

    def print_date_time_string(self, range_start: datetime, range_end: datetime) -> str:
        with self._operation_lock:
            return self.active_store.print_date_time_string(range_start, range_end)

    def print_status(self, moment: datetime) -> str:
        with self._operation_lock:
            return self.active_store.print_status(moment)

    def events_left(self, day: date) -> int:
        with self._operation_lock:
            return self.active_store.events_left(day)

    def events_to_view(self, day: date) -> list[Event]:
        with self._operation_lock:
            return self.active_store.events_to_view(day)

    # ===== Copying =====

    def _convert(
        self,
        event: Event,
        source: Calendar,
        target: Calendar,
        shift: timedelta = timedelta(0),
        days: timedelta = timedelta(0),
    ) -> Event:
        """Move an event into the target calendar's wall clock, then shift it.

        ``shift`` is an exact duration applied to the instant. ``days`` is
        added to the converted wall-clock times, so the local time of day in
        the target zone survives a DST change.
        """
        start = convert_wall_clock(event.start, source.timezone, target.timezone, shift)
        end = convert_wall_clock(event.end, source.timezone, target.timezone, shift)
        return event.with_changes(start=start + days, end=end + days)

    def copy_event(
        self,
        subject: str,
        start: datetime,
        target_calendar: str,
        new_start: datetime,
    ) -> Event:
        """Copy one event from the active calendar to another calendar.

        The event is converted to the target zone (same instant) and then moved
        by ``new_start - event.start``. The copy is skipped silently when the
        target already holds an identical event.

        Args:
            subject: Subject of the event to copy.
            start: Exact start of the event to copy.
            target_calendar: Name of the destination calendar.
            new_start: Requested start, used to compute the shift.

        Returns:
            The converted event.

        Raises:
            NoActiveCalendarError: If no calendar is in use.
            CalendarValidationError: If a date-time is timezone-aware.
            NotFoundError: If the event or the target calendar does not exist.
        """
        with self._operation_lock:
            require_wall_clock(new_start, "New start date-time")
            source = self.require_active_calendar()
            target = self.get_calendar(target_calendar)
            event = source.store.find_event(subject, start)
            if event is None:
                raise NotFoundError("event", f"{subject} at {start.isoformat()}")

            copied = self._convert(event, source, target, new_start - event.start)
            target.store.paste([copied])
            logger.info(
                "Copied '%s' from '%s' to '%s' at %s",
                subject,
                source.name,
                target.name,
                copied.start.isoformat(),
            )
            return copied

    def copy_events_on(
        self,
        day: Union[date, datetime],
        target_calendar: str,
        new_day: Union[date, datetime],
    ) -> list[Event]:
        """Copy every event starting on a date to another calendar.

        Each event is converted to the target zone and its wall-clock times
        are then moved by ``new_day - day`` whole days. A 10:00 event stays at
        10:00 even when the move crosses a DST change.

        Returns:
            The converted events, including any the target already held.

        Raises:
            NoActiveCalendarError: If no calendar is in use.
            NotFoundError: If the target calendar does not exist.
        """
        with self._operation_lock:
            source = self.require_active_calendar()
            target = self.get_calendar(target_calendar)
            day, new_day = as_date(day), as_date(new_day)
            shift = new_day - day

            copied = [
                self._convert(event, source, target, days=shift)
                for event in source.store.events
                if event.start.date() == day
            ]
            added = target.store.paste(copied)
            logger.info(
                "Copied %d event(s) on %s to '%s' (%d new)",
                len(copied),
                day.isoformat(),
                target.name,
                added,
            )
            return copied

    def copy_events_between(
        self,
        start_day: Union[date, datetime],
        end_day: Union[date, datetime],
        target_calendar: str,
        new_start_day: Union[date, datetime],
    ) -> list[Event]:
        """Copy every event overlapping an inclusive day range.

        Events that only partly overlap the range are included. All events are
        converted to the target zone and their wall-clock times are moved by
        ``new_start_day - start_day`` whole days.

        Returns:
            The converted events, including any the target already held.

        Raises:
            CalendarValidationError: If end_day is before start_day.
            NoActiveCalendarError: If no calendar is in use.
            NotFoundError: If the target calendar does not exist.
        """
        with self._operation_lock:
            start_day, end_day = as_date(start_day), as_date(end_day)
            if end_day < start_day:
                raise CalendarValidationError("End date must be after start date")
            source = self.require_active_calendar()
            target = self.get_calendar(target_calendar)
            shift = as_date(new_start_day) - start_day

            copied = [
                self._convert(event, source, target, days=shift)
                for event in source.store.events
                if event.overlaps_days(start_day, end_day)
            ]
            added = target.store.paste(copied)
            logger.info(
                "Copied %d event(s) between %s and %s to '%s' (%d new)",
                len(copied),
                start_day.isoformat(),
                end_day.isoformat(),
                target.name,
                added,
            )
            return copied
