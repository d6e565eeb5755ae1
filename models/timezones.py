"""Time zone helpers for moving wall-clock times between calendars.

Events store naive wall-clock datetimes. A calendar's zone gives them
meaning, so copying an event to a calendar in another zone re-expresses
the same instant in the target zone's wall clock.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.exceptions import CalendarValidationError


def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA time zone identifier.

    Args:
        name: Identifier such as "America/New_York".

    Returns:
        The ZoneInfo for that identifier.

    Raises:
        CalendarValidationError: If the identifier is not recognized.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise CalendarValidationError(f"Invalid timezone '{name}': {e}") from None


def convert_wall_clock(
    moment: datetime, source_zone: str, target_zone: str, shift: timedelta = timedelta(0)
) -> datetime:
    """Re-express a wall-clock time from one zone in another.

    The moment is read as local time in ``source_zone``, converted to the
    same instant in ``target_zone``, then moved by ``shift`` as an exact
    duration. Shifting happens in UTC so that DST transitions in the target
    zone do not stretch or shrink the shift.

    Args:
        moment: Naive wall-clock datetime in the source zone.
        source_zone: IANA identifier of the source calendar.
        target_zone: IANA identifier of the target calendar.
        shift: Exact duration to add after conversion.

    Returns:
        Naive wall-clock datetime in the target zone.
    """
    source = get_zone(source_zone)
    target = get_zone(target_zone)
    instant = moment.replace(tzinfo=source).astimezone(timezone.utc)
    return (instant + shift).astimezone(target).replace(tzinfo=None)
