"""Main entry point for the calendar service FastAPI application.

This module creates and configures the FastAPI app instance that serves the
REST API for managing calendars, their events, and cross-calendar copies.

To run the development server:
    uvicorn main:app --reload

To run in production:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_calendar_manager, shutdown_calendar_manager
from api.exceptions import (
    calendar_validation_handler,
    duplicate_event_handler,
    generic_exception_handler,
    no_active_calendar_handler,
    not_found_handler,
    validation_exception_handler,
)
from api.routes import calendars as calendar_routes
from api.routes import copy as copy_routes
from api.routes import events as events_routes
from models.exceptions import (
    CalendarValidationError,
    DuplicateEventError,
    NoActiveCalendarError,
    NotFoundError,
)
from settings import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Reads settings from the environment, configures logging, and creates the
    shared CalendarManager before the app starts handling requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting calendar service")
    initialize_calendar_manager(settings)

    yield

    logger.info("Shutting down calendar service")
    shutdown_calendar_manager()


app = FastAPI(
    title="Calendar Service",
    description="API for managing calendars and events across time zones",
    version="0.1.0",
    lifespan=lifespan,
)

# Register exception handlers
# Order matters: specific exceptions before general ones
app.add_exception_handler(NotFoundError, not_found_handler)
app.add_exception_handler(DuplicateEventError, duplicate_event_handler)
app.add_exception_handler(NoActiveCalendarError, no_active_calendar_handler)
app.add_exception_handler(CalendarValidationError, calendar_validation_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(calendar_routes.router)
app.include_router(events_routes.router)
app.include_router(copy_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message.

    Returns:
        A dictionary with a welcome message.
    """
    return {
        "message": "Welcome to the Calendar Service API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring.

    Returns:
        A dictionary indicating the service is healthy.
    """
    return {"status": "healthy"}
