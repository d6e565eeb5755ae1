"""Unit tests for API error handling.

Tests for the calendar exception classes and the handlers that turn them
into consistent JSON responses.
"""

import asyncio
import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi import status
from pydantic import BaseModel, ValidationError

from api.exceptions import (
    calendar_validation_handler,
    duplicate_event_handler,
    generic_exception_handler,
    no_active_calendar_handler,
    not_found_handler,
    validation_exception_handler,
)
from api.models import ErrorResponse
from models.exceptions import (
    CalendarError,
    CalendarValidationError,
    DuplicateEventError,
    NoActiveCalendarError,
    NotFoundError,
)
from tests.fixtures.calendar import create_event


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def body(response):
    """Decode a JSONResponse body."""
    return json.loads(response.body)


# =============================================================================
# Exception Class Tests
# =============================================================================


class TestExceptionHierarchy:
    """Tests for the calendar exception classes."""

    @pytest.mark.parametrize(
        "exc, builtin",
        [
            (CalendarValidationError("bad"), ValueError),
            (DuplicateEventError(create_event()), ValueError),
            (NotFoundError("event", "X"), LookupError),
            (NoActiveCalendarError(), RuntimeError),
        ],
    )
    def test_inherits_from_base_and_builtin(self, exc, builtin):
        assert isinstance(exc, CalendarError)
        assert isinstance(exc, builtin)

    def test_not_found_message(self):
        exc = NotFoundError("calendar", "Home")

        assert str(exc) == "Calendar not found: Home"
        assert exc.kind == "calendar"
        assert exc.key == "Home"

    def test_duplicate_stores_event(self):
        event = create_event()

        exc = DuplicateEventError(event)

        assert exc.event is event

    def test_no_active_default_message(self):
        assert str(NoActiveCalendarError()) == "No calendar is currently in use"


# =============================================================================
# Handler Tests
# =============================================================================


class TestCalendarHandlers:
    """Tests for the calendar exception handlers."""

    def test_validation_returns_400(self):
        response = run_async(
            calendar_validation_handler(MagicMock(), CalendarValidationError("Invalid Weekday"))
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert body(response) == {
            "error": "Invalid Value",
            "detail": "Invalid Weekday",
            "type": "CalendarValidationError",
        }

    def test_not_found_returns_404_with_key(self):
        exc = NotFoundError("event", "Standup at 2024-03-20T09:00")

        response = run_async(not_found_handler(MagicMock(), exc))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert body(response)["kind"] == "event"
        assert body(response)["key"] == "Standup at 2024-03-20T09:00"

    def test_duplicate_returns_409(self):
        exc = DuplicateEventError(create_event("Review"))

        response = run_async(duplicate_event_handler(MagicMock(), exc))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert body(response)["subject"] == "Review"

    def test_no_active_calendar_returns_409(self):
        response = run_async(no_active_calendar_handler(MagicMock(), NoActiveCalendarError()))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "POST /calendars/use" in body(response)["suggestion"]

    def test_bodies_match_error_response_model(self):
        response = run_async(
            calendar_validation_handler(MagicMock(), CalendarValidationError("bad"))
        )

        ErrorResponse.model_validate(body(response))


class TestValidationExceptionHandler:
    """Tests for the pydantic ValidationError handler."""

    def test_returns_422_with_errors(self):
        class Reading(BaseModel):
            at: datetime

        with pytest.raises(ValidationError) as exc_info:
            Reading(at="not a date")

        response = run_async(validation_exception_handler(MagicMock(), exc_info.value))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        errors = body(response)["validation_errors"]
        assert errors[0]["loc"] == ["at"]


class TestGenericExceptionHandler:
    """Tests for the catch-all handler."""

    def test_returns_500_without_details(self):
        request = MagicMock()
        request.method = "GET"
        request.url.path = "/events/view"

        response = run_async(generic_exception_handler(request, KeyError("secret")))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert body(response)["detail"] == "An unexpected error occurred"
        assert "secret" not in response.body.decode()
