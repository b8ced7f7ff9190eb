"""
Data models for multi-visit bookings.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from models.events import CalendarEntry

BookingKind = Literal["daily-visits", "overnight-stay"]


@dataclass
class VisitSlot:
    """
    One visit per day at time (HH:MM).

    duration_minutes of 0 means "use the template's duration".
    """
    time: str
    duration_minutes: int = 0
    template_id: str | None = None


@dataclass
class OvernightConfig:
    arrival_time: str  # HH:MM on the start date
    departure_time: str  # HH:MM on the end date
    template_id: str | None = None


@dataclass
class DropInConfig:
    time: str
    duration_minutes: int = 0
    template_id: str | None = None


@dataclass
class RecurrenceConfig:
    client_label: str
    start_date: date
    end_date: date
    booking_kind: BookingKind = "daily-visits"
    visits: list[VisitSlot] = field(default_factory=list)
    weekend_visits: list[VisitSlot] | None = None
    overnight: OvernightConfig | None = None
    drop_in: DropInConfig | None = None
    location: str | None = None
    calendar_id: str = "generated"


@dataclass
class Conflict:
    """An existing entry that overlaps a generated one."""
    existing: CalendarEntry
    generated: CalendarEntry


@dataclass
class GeneratedSummary:
    total_entries: int
    total_days: int
    total_minutes: int
    unique_dates: list[str]
