"""Dependency injection providers for the FastAPI application.

This module defines dependencies that can be injected into route handlers,
providing access to the shared CalendarManager.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from models.calendar_manager import CalendarManager
from settings import Settings

logger = logging.getLogger(__name__)


# Global state
# Calendars live in memory only, so one manager is shared by every request
_calendar_manager: CalendarManager | None = None


def get_calendar_manager() -> CalendarManager:
    """Get the shared CalendarManager instance.

    This function is a FastAPI dependency. Route handlers that declare a
    ``CalendarManagerDep`` parameter receive the shared manager.

    Returns:
        The shared CalendarManager instance.

    Raises:
        RuntimeError: If the manager hasn't been initialized yet.
    """
    if _calendar_manager is None:
        raise RuntimeError(
            "CalendarManager not initialized. Call initialize_calendar_manager() first."
        )

    return _calendar_manager


def initialize_calendar_manager(settings: Optional[Settings] = None) -> CalendarManager:
    """Initialize the shared CalendarManager instance.

    This should be called once when the FastAPI app starts up. When the
    settings name a default calendar, it is created and selected.

    Args:
        settings: Service settings; defaults are used when omitted.

    Returns:
        The newly created CalendarManager instance.
    """
    global _calendar_manager

    settings = settings or Settings()
    _calendar_manager = CalendarManager()

    if settings.default_calendar:
        _calendar_manager.create_calendar(
            settings.default_calendar, settings.default_timezone
        )
        _calendar_manager.use_calendar(settings.default_calendar)
        logger.info(
            "Default calendar '%s' (%s) is active",
            settings.default_calendar,
            settings.default_timezone,
        )

    return _calendar_manager


def shutdown_calendar_manager() -> None:
    """Drop the shared CalendarManager when the app shuts down."""
    global _calendar_manager

    _calendar_manager = None


# Type alias for dependency injection
CalendarManagerDep = Annotated[CalendarManager, Depends(get_calendar_manager)]
