"""Pytest configuration and shared fixtures."""

import pytest

# Load environment variables from .env file at test startup
# so CALENDAR_* overrides are visible before fixtures are created
from dotenv import load_dotenv
load_dotenv()

# Import all fixtures from the fixture modules
pytest_plugins = [
    "tests.fixtures.events",
    "tests.fixtures.engine",
    "tests.fixtures.api",
]
