"""Integration tests for event endpoints.

This module tests:
- POST /events - Create an event and its repeats
- POST /events/edit - Edit one event, a forward run, or a whole series
- GET /events/on/{day} - Events starting or ending on a date
- GET /events/between - Events inside a date-time range
- GET /events/status - Busy/available status
- GET /events/view - One page of upcoming events
"""

from datetime import datetime


def create(client, **fields):
    """POST an event with default times and return the response."""
    payload = {
        "subject": "Standup",
        "start": "2024-03-20T09:00:00",
        "end": "2024-03-20T09:30:00",
    }
    payload.update(fields)
    return client.post("/events", json=payload)


class TestCreateEvent:
    """Tests for POST /events."""

    def test_create_event(self, client_with_calendar):
        client, manager = client_with_calendar

        response = create(client, location="online", status="private")

        assert response.status_code == 201
        data = response.json()
        assert data["count"] == 1
        event = data["events"][0]
        assert event["subject"] == "Standup"
        assert event["start"] == "2024-03-20T09:00:00"
        assert event["location"] == "ONLINE"
        assert event["status"] == "PRIVATE"
        assert event["all_day"] is False
        assert manager.active_calendar.event_count == 1

    def test_all_day_event(self, client_with_calendar):
        client, _ = client_with_calendar

        response = client.post(
            "/events", json={"subject": "Offsite", "start": "2024-03-20T14:30:00"}
        )

        event = response.json()["events"][0]
        assert event["start"] == "2024-03-20T08:00:00"
        assert event["end"] == "2024-03-20T17:00:00"
        assert event["all_day"] is True

    def test_weekday_repeats(self, client_with_calendar):
        client, _ = client_with_calendar

        response = create(
            client,
            subject="Gym",
            start="2024-04-10T07:00:00",
            end="2024-04-10T08:00:00",
            weekdays=["M", "W", "F"],
            repeat_count=10,
        )

        assert response.status_code == 201
        assert response.json()["count"] == 11

    def test_repeats_until_date(self, client_with_calendar):
        client, manager = client_with_calendar

        response = create(
            client,
            subject="Gym",
            start="2024-04-10T07:00:00",
            end="2024-04-10T08:00:00",
            weekdays=["M", "W", "F"],
            until="2024-05-03",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["count"] == 11
        assert data["events"][-1]["start"] == "2024-05-03T07:00:00"
        assert manager.active_calendar.event_count == 11

    def test_daily_repeats_until_date(self, client_with_calendar):
        client, _ = client_with_calendar

        response = create(client, until="2024-03-24")

        assert response.json()["count"] == 5

    def test_until_and_repeat_count_together_returns_422(self, client_with_calendar):
        client, manager = client_with_calendar

        response = create(client, repeat_count=3, until="2024-03-24")

        assert response.status_code == 422
        assert manager.active_calendar.event_count == 0

    def test_duplicate_returns_409(self, client_with_calendar):
        client, manager = client_with_calendar
        create(client)

        response = create(client)

        assert response.status_code == 409
        assert response.json()["subject"] == "Standup"
        assert manager.active_calendar.event_count == 1

    def test_invalid_weekday_returns_400(self, client_with_calendar):
        client, manager = client_with_calendar

        response = create(client, weekdays=["M", "X"], repeat_count=3)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid Weekday"
        assert manager.active_calendar.event_count == 0

    def test_end_before_start_returns_400(self, client_with_calendar):
        client, _ = client_with_calendar

        response = create(client, end="2024-03-20T08:00:00")

        assert response.status_code == 400

    def test_negative_repeat_count_returns_422(self, client_with_calendar):
        client, _ = client_with_calendar

        response = create(client, repeat_count=-1)

        assert response.status_code == 422

    def test_without_active_calendar_returns_409(self, client_with_manager):
        client, _ = client_with_manager

        response = create(client)

        assert response.status_code == 409


class TestEditEvents:
    """Tests for POST /events/edit."""

    def test_single_scope(self, client_with_calendar):
        client, manager = client_with_calendar
        create(client, subject="X", repeat_count=1)

        response = client.post(
            "/events/edit",
            json={
                "property": "status",
                "subject": "X",
                "start": "2024-03-20T09:00:00",
                "new_value": "private",
            },
        )

        assert response.status_code == 200
        assert response.json()["count"] == 1
        statuses = [event.status for event in manager.active_store.events]
        assert [s.value if s else None for s in statuses] == ["PRIVATE", None]

    def test_forward_scope(self, client_with_calendar):
        client, _ = client_with_calendar
        create(client, subject="X", repeat_count=2)

        response = client.post(
            "/events/edit",
            json={
                "scope": "forward",
                "property": "location",
                "subject": "X",
                "start": "2024-03-21T09:00:00",
                "new_value": "physical",
            },
        )

        assert response.json()["count"] == 2

    def test_series_scope_without_start(self, client_with_calendar):
        client, manager = client_with_calendar
        create(client, subject="X", repeat_count=2)

        response = client.post(
            "/events/edit",
            json={
                "scope": "series",
                "property": "subject",
                "subject": "X",
                "new_value": "Y",
            },
        )

        assert response.json()["count"] == 3
        assert {event.subject for event in manager.active_store.events} == {"Y"}

    def test_single_scope_requires_start(self, client_with_calendar):
        client, _ = client_with_calendar
        create(client, subject="X")

        response = client.post(
            "/events/edit",
            json={"property": "status", "subject": "X", "new_value": "public"},
        )

        assert response.status_code == 400

    def test_missing_event_returns_404(self, client_with_calendar):
        client, _ = client_with_calendar

        response = client.post(
            "/events/edit",
            json={
                "property": "status",
                "subject": "Nope",
                "start": "2024-03-20T09:00:00",
                "new_value": "public",
            },
        )

        assert response.status_code == 404
        assert response.json()["kind"] == "event"

    def test_forward_scope_rejects_aware_start(self, client_with_calendar):
        client, manager = client_with_calendar
        create(client, subject="X", repeat_count=1)

        response = client.post(
            "/events/edit",
            json={
                "scope": "forward",
                "property": "location",
                "subject": "X",
                "start": "2024-03-20T09:00:00Z",
                "new_value": "online",
            },
        )

        assert response.status_code == 400
        assert "naive wall-clock" in response.json()["detail"]
        assert all(event.location is None for event in manager.active_store.events)

    def test_unknown_scope_returns_422(self, client_with_calendar):
        client, _ = client_with_calendar

        response = client.post(
            "/events/edit",
            json={"scope": "all", "property": "status", "subject": "X", "new_value": "public"},
        )

        assert response.status_code == 422


class TestQueries:
    """Tests for the read-only event queries."""

    def test_events_on(self, client_with_calendar):
        client, _ = client_with_calendar
        create(client, location="physical")
        create(client, subject="Later", start="2024-03-21T09:00:00", end="2024-03-21T10:00:00")

        response = client.get("/events/on/2024-03-20")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["text"] == "* PHYSICAL Standup on 2024-03-20"

    def test_events_between_exact_bounds(self, client_with_calendar):
        client, _ = client_with_calendar
        create(
            client,
            subject="AnotherEvent",
            start="2025-04-20T08:00:00",
            end="2025-04-20T09:30:00",
        )

        inside = client.get(
            "/events/between",
            params={"start": "2025-04-20T08:00:00", "end": "2025-04-20T09:30:00"},
        )
        outside = client.get(
            "/events/between",
            params={"start": "2025-04-20T08:01:00", "end": "2025-04-20T09:30:00"},
        )

        assert inside.json()["count"] == 1
        assert inside.json()["text"] == (
            "* AnotherEvent between 2025-04-20T08:00 and 2025-04-20T09:30"
        )
        assert outside.json()["count"] == 0
        assert outside.json()["text"] == ""

    def test_status(self, client_with_calendar):
        client, _ = client_with_calendar
        create(client, start="2025-04-20T08:00:00", end="2025-04-20T09:30:00")

        busy = client.get("/events/status", params={"at": "2025-04-20T08:00:00"})
        free = client.get("/events/status", params={"at": "2024-03-20T14:30:00"})

        assert busy.json()["status"] == "busy"
        assert free.json()["status"] == "available"
        assert datetime.fromisoformat(busy.json()["at"]) == datetime(2025, 4, 20, 8, 0)

    def test_events_between_rejects_aware_range(self, client_with_calendar):
        client, _ = client_with_calendar
        create(client)

        response = client.get(
            "/events/between",
            params={"start": "2024-03-20T00:00:00Z", "end": "2024-03-21T00:00:00Z"},
        )

        assert response.status_code == 400

    def test_status_rejects_aware_moment(self, client_with_calendar):
        client, _ = client_with_calendar
        create(client)

        response = client.get("/events/status", params={"at": "2024-03-20T09:30:00+00:00"})

        assert response.status_code == 400

    def test_view_pages_ten_events(self, client_with_calendar):
        client, _ = client_with_calendar
        client.post(
            "/events",
            json={"subject": "Daily", "start": "2024-03-01T09:00:00", "repeat_count": 14},
        )

        response = client.get("/events/view", params={"day": "2024-03-01"})

        data = response.json()
        assert data["count"] == 10
        assert len(data["events"]) == 10
        assert data["day"] == "2024-03-01"
        assert data["events_left"] == 1

    def test_query_without_active_calendar_returns_409(self, client_with_manager):
        client, _ = client_with_manager

        response = client.get("/events/on/2024-03-20")

        assert response.status_code == 409
