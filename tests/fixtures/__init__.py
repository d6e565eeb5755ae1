"""Test fixtures for the calendar service.

This package provides reusable test fixtures:
- calendar: Event, EventStore, and CalendarManager factories
- api: TestClient wired to a fresh CalendarManager
"""
