"""Service settings read from the environment.

Values come from process environment variables, after a ``.env`` file in the
working directory (if any) has been loaded:

    CALENDAR_DEFAULT_NAME      Calendar created and selected at startup (optional).
    CALENDAR_DEFAULT_TIMEZONE  IANA zone of that calendar (default: UTC).
    CALENDAR_LOG_LEVEL         Root log level (default: INFO).
"""

import logging
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from models.timezones import get_zone


class Settings(BaseModel):
    """Runtime configuration for the calendar service.

    Args:
        default_calendar: Name of a calendar to create and use at startup.
        default_timezone: Time zone for the default calendar.
        log_level: Name of the root logging level.
    """

    default_calendar: Optional[str] = Field(
        default=None, description="Calendar created and selected at startup"
    )
    default_timezone: str = Field(
        default="UTC", description="Time zone of the default calendar"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("default_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        get_zone(value)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate the log level names a standard logging level.

        Raises:
            ValueError: If the level is unknown.
        """
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Build settings from the environment.

        Args:
            load_env_file: Whether to load a ``.env`` file first.

        Returns:
            Populated Settings instance.
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))
        return cls(
            default_calendar=os.environ.get("CALENDAR_DEFAULT_NAME") or None,
            default_timezone=os.environ.get("CALENDAR_DEFAULT_TIMEZONE", "UTC"),
            log_level=os.environ.get("CALENDAR_LOG_LEVEL", "INFO"),
        )
