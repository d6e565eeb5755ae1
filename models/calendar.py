"""Calendar model: a named, zoned container for one event store."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.event_store import EventStore
from models.timezones import get_zone


class Calendar(BaseModel):
    """A named calendar with its own time zone and events.

    Renaming or re-zoning through ``renamed``/``with_timezone`` yields a new
    Calendar that shares the same EventStore, so editing a calendar never
    discards its events.

    Args:
        name: Calendar display name.
        timezone: IANA time zone identifier for the calendar's wall clock.
        store: Events belonging to this calendar.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(min_length=1, description="Calendar display name")
    timezone: str = Field(default="UTC", description="IANA time zone identifier")
    store: EventStore = Field(
        default_factory=EventStore, description="Events in this calendar"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Validate timezone is a recognized IANA timezone identifier.

        Args:
            value: Timezone identifier to validate.

        Returns:
            The validated timezone identifier.

        Raises:
            ValueError: If timezone is not recognized.
        """
        get_zone(value)
        return value

    def set_timezone(self, timezone: str) -> None:
        """Change the calendar's zone without touching its events.

        Raises:
            CalendarValidationError: If the zone is not recognized.
        """
        get_zone(timezone)
        self.timezone = timezone

    def renamed(self, name: str) -> "Calendar":
        """Get a copy with a new name sharing this calendar's store."""
        return Calendar(name=name, timezone=self.timezone, store=self.store)

    def with_timezone(self, timezone: str) -> "Calendar":
        """Get a copy with a new zone sharing this calendar's store."""
        return Calendar(name=self.name, timezone=timezone, store=self.store)

    @property
    def event_count(self) -> int:
        """Get number of events in this calendar.

        Returns:
            Number of events.
        """
        return len(self.store.events)
