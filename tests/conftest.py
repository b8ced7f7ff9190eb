"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest

# Keep the API and store away from the real database
os.environ.setdefault(
    "PET_SCHEDULE_DB_PATH", str(Path(tempfile.mkdtemp(prefix="pet-schedule-")) / "test.db")
)

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from faker import Faker  # noqa: E402

from models.events import CalendarEntry, Client, Pet, Template  # noqa: E402
from services.classifier import classify  # noqa: E402


@pytest.fixture
def make_entry():
    """Factory for raw calendar entries; start/end accept ISO strings."""
    counter = {"n": 0}

    def _make(title: str, start: str, end: str, **kwargs) -> CalendarEntry:
        counter["n"] += 1
        return CalendarEntry(
            id=kwargs.pop("id", f"evt-{counter['n']}"),
            calendar_id=kwargs.pop("calendar_id", "primary"),
            title=title,
            start=datetime.fromisoformat(start),
            end=datetime.fromisoformat(end),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_work_entry(make_entry):
    """Factory for classified entries."""

    def _make(title: str, start: str, end: str, **kwargs):
        return classify(make_entry(title, start, end, **kwargs))

    return _make


@pytest.fixture
def monday():
    return date(2024, 1, 8)


@pytest.fixture
def templates():
    return [
        Template(id="t1", name="Visit", duration_minutes=30, service_type="drop-in"),
        Template(id="t2", name="Overnight", duration_minutes=720, service_type="overnight"),
        Template(id="t3", name="Walk", duration_minutes=60, service_type="walk"),
    ]


@pytest.fixture
def clients():
    return [
        Client(id="c1", name="Johnson Family", pets=[Pet(name="Max"), Pet(name="Bella")]),
        Client(id="c2", name="Smith", email="smith@example.com", pets=[Pet(name="Tucker")]),
        Client(id="c3", name="Garcia", address="12 Oak Street", pets=[Pet(name="Luna")]),
    ]


@pytest.fixture
def fake_roster():
    """Larger roster of realistic clients, deterministic across runs."""
    fake = Faker()
    fake.seed_instance(1234)
    return [
        Client(
            id=f"fake-{idx}",
            name=f"{fake.last_name()} Household",
            email=fake.email(),
            address=fake.street_address(),
            pets=[Pet(name=f"Pet{idx}")],
        )
        for idx in range(25)
    ]
