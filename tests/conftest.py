"""Pytest configuration helpers.

Ensure the project root is on sys.path so tests can import the
`provider_match` package when pytest is invoked from the repository root or an
isolated test runner, and provide a small shared provider roster.
"""

import sys
from datetime import date
from pathlib import Path

import pytest


def pytest_configure():
    # Insert the repository root (parent of the tests directory) at the front
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


SERVICE_DAY = date(2025, 6, 23)
SF_LAT, SF_LON = 37.7749, -122.4194


@pytest.fixture
def sample_providers():
    """Three San Francisco area providers who all offer cleaning on SERVICE_DAY.

    provider1 sits on the customer, provider2 is ~0.6 miles away and provider3
    is in Oakland, ~8.3 miles away.
    """
    from provider_match.models import AvailabilitySlot, Location, Provider, ServiceCapability, SkillLevel

    return [
        Provider(
            id="provider1",
            name="John Doe",
            rating=4.5,
            completed_jobs=120,
            max_travel_distance=20,
            location=Location(latitude=SF_LAT, longitude=SF_LON),
            capabilities=[
                ServiceCapability(service_id="cleaning", skill_level=SkillLevel.EXPERT),
                ServiceCapability(service_id="gardening", skill_level=SkillLevel.INTERMEDIATE),
            ],
            availability=[
                AvailabilitySlot(date=SERVICE_DAY, start_time="08:00", end_time="17:00"),
                AvailabilitySlot(date=date(2025, 6, 24), start_time="09:00", end_time="18:00"),
            ],
        ),
        Provider(
            id="provider2",
            name="Jane Smith",
            rating=5.0,
            completed_jobs=50,
            max_travel_distance=15,
            location=Location(latitude=37.7833, longitude=-122.4167),
            capabilities=[
                ServiceCapability(service_id="cleaning", skill_level=SkillLevel.INTERMEDIATE),
                ServiceCapability(service_id="plumbing", skill_level=SkillLevel.EXPERT),
            ],
            availability=[AvailabilitySlot(date=SERVICE_DAY, start_time="10:00", end_time="19:00")],
        ),
        Provider(
            id="provider3",
            name="Bob Johnson",
            rating=3.8,
            completed_jobs=200,
            max_travel_distance=30,
            location=Location(latitude=37.8044, longitude=-122.2711),
            capabilities=[
                ServiceCapability(service_id="cleaning", skill_level=SkillLevel.BEGINNER),
                ServiceCapability(service_id="electrical", skill_level=SkillLevel.EXPERT),
            ],
            availability=[AvailabilitySlot(date=SERVICE_DAY, start_time="09:00", end_time="16:00")],
        ),
    ]


@pytest.fixture
def make_request():
    """Factory for cleaning requests on SERVICE_DAY at the SF reference point."""
    from provider_match.models import BookingRequest, Location, TimeWindow

    def _make(**overrides):
        fields = {
            "service_id": "cleaning",
            "date": SERVICE_DAY,
            "time_slot": TimeWindow(start_time="10:00", end_time="14:00"),
            "location": Location(latitude=SF_LAT, longitude=SF_LON),
        }
        fields.update(overrides)
        return BookingRequest(**fields)

    return _make


@pytest.fixture
def mock_secrets(monkeypatch):
    """
    Replace Streamlit's secrets store with a plain nested dict.

    Returns the dict so tests can fill in the keys they need.
    """
    secrets = {}
    monkeypatch.setattr("provider_match.utils.config.st.secrets", secrets, raising=False)
    return secrets
