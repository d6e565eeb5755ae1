"""Pytest configuration and shared fixtures."""

# Import all fixtures from the fixture modules
pytest_plugins = [
    "tests.fixtures.calendar",
    "tests.fixtures.api",
]
