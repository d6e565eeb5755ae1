"""Exception handlers for the calendar FastAPI application.

This module converts calendar core exceptions into consistent JSON
responses. Every error body carries ``error``, ``detail`` and ``type``.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from models.exceptions import (
    CalendarValidationError,
    DuplicateEventError,
    NoActiveCalendarError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, exc: Exception, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "detail": str(exc),
            "type": type(exc).__name__,
            **extra,
        },
    )


async def calendar_validation_handler(request: Request, exc: CalendarValidationError):
    """Handle CalendarValidationError exceptions.

    Returns a 400 for values that passed request parsing but were rejected by
    the calendar core (bad weekday letter, end before start, unknown zone).

    Args:
        request: The incoming request that triggered the error.
        exc: The CalendarValidationError exception.

    Returns:
        JSONResponse with 400 status.
    """
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid Value", exc)


async def not_found_handler(request: Request, exc: NotFoundError):
    """Handle NotFoundError exceptions.

    Returns a 404 naming what kind of thing was missing and the lookup key.

    Args:
        request: The incoming request that triggered the error.
        exc: The NotFoundError exception.

    Returns:
        JSONResponse with 404 status.
    """
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        "Not Found",
        exc,
        kind=exc.kind,
        key=str(exc.key),
    )


async def duplicate_event_handler(request: Request, exc: DuplicateEventError):
    """Handle DuplicateEventError exceptions with a 409 (Conflict)."""
    return _error_response(
        status.HTTP_409_CONFLICT,
        "Duplicate Event",
        exc,
        subject=exc.event.subject,
    )


async def no_active_calendar_handler(request: Request, exc: NoActiveCalendarError):
    """Handle NoActiveCalendarError exceptions.

    Returns a 409 (Conflict) indicating a calendar must be selected first.

    Args:
        request: The incoming request that triggered the error.
        exc: The NoActiveCalendarError exception.

    Returns:
        JSONResponse with 409 status.
    """
    return _error_response(
        status.HTTP_409_CONFLICT,
        "No Active Calendar",
        exc,
        suggestion="Select a calendar with POST /calendars/use",
    )


async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised while building responses or models.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValidationError exception.

    Returns:
        JSONResponse with validation error details.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": "The request data failed validation",
            "type": "ValidationError",
            "validation_errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions.

    Logs the full exception and returns a generic 500 so stack traces are
    not exposed to clients.

    Args:
        request: The incoming request that triggered the error.
        exc: The exception that was raised.

    Returns:
        JSONResponse with generic error message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": type(exc).__name__,
        },
    )
