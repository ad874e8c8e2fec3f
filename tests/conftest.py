# tests/conftest.py
"""
Shared fixtures for the progress engine tests.

Record builders live in factories.py; this module holds the fixtures that
tie them to a plan year and the HTTP test client.
"""

import pytest
from fastapi.testclient import TestClient

from northstar.main import app
from northstar.services.time_windows import get_year_dates

PLAN_YEAR = 2026


@pytest.fixture
def plan_year():
    return PLAN_YEAR


@pytest.fixture
def year_window():
    """Jan 1 through Dec 31 of the plan year."""
    return get_year_dates(PLAN_YEAR)


@pytest.fixture
def api_client():
    """FastAPI test client for the progress endpoints."""
    return TestClient(app)
