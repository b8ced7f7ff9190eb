"""
Data models for calendar entries, clients and visit templates.

Entries arrive from the calendar collaborator (or the multi-visit generator)
as plain dataclasses; the classifier returns EnrichedEntry copies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

EntryStatus = Literal["confirmed", "tentative", "cancelled"]

ServiceType = Literal[
    "drop-in", "walk", "overnight", "housesit", "meet-greet", "nail-trim", "other"
]

SERVICE_TYPES: tuple[str, ...] = (
    "drop-in", "walk", "overnight", "housesit", "meet-greet", "nail-trim", "other"
)


@dataclass
class Attendee:
    """Calendar attendee as reported by the provider."""
    display_name: str | None = None
    email: str | None = None


@dataclass
class CalendarEntry:
    """Raw calendar entry."""
    id: str
    calendar_id: str
    title: str
    start: datetime
    end: datetime
    description: str | None = None
    location: str | None = None
    all_day: bool = False
    status: EntryStatus = "confirmed"
    recurring_event_id: str | None = None
    attendees: list[Attendee] = field(default_factory=list)

    @property
    def duration_minutes(self) -> int:
        return max(0, int((self.end - self.start).total_seconds() // 60))


@dataclass
class EnrichedEntry(CalendarEntry):
    """
    Calendar entry plus classification results.

    is_overnight implies is_work; extracted_client_label and service_type
    are only populated for work entries.
    """
    is_work: bool = False
    is_overnight: bool = False
    extracted_client_label: str | None = None
    service_type: ServiceType | None = None
    service_duration_minutes: int = 0


@dataclass
class Pet:
    name: str
    species: str | None = None


@dataclass
class Client:
    """Client record from the roster collaborator (read-only here)."""
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    pets: list[Pet] = field(default_factory=list)

    @property
    def pet_names(self) -> list[str]:
        return [p.name for p in self.pets if p.name]


@dataclass
class Template:
    """Appointment template used to fill in visit durations and titles."""
    id: str
    name: str
    duration_minutes: int
    service_type: ServiceType = "drop-in"
