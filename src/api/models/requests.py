"""Pydantic request models for API endpoints."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from core.config import DEFAULT_MATCH_THRESHOLD
from models.events import Attendee, CalendarEntry, Client, Pet, Template
from models.visits import DropInConfig, OvernightConfig, RecurrenceConfig, VisitSlot
from models.workload import (
    ThresholdConfig,
    WorkloadLimits,
    WorkloadOptions,
    WorkloadThresholds,
)


class AttendeeIn(BaseModel):
    display_name: str | None = None
    email: str | None = None


class CalendarEntryIn(BaseModel):
    """Calendar entry as sent by the calendar collaborator."""

    id: str
    calendar_id: str = "primary"
    title: str = ""
    start: datetime
    end: datetime
    description: str | None = None
    location: str | None = None
    all_day: bool = False
    status: Literal["confirmed", "tentative", "cancelled"] = "confirmed"
    recurring_event_id: str | None = None
    attendees: list[AttendeeIn] = []

    def to_entry(self) -> CalendarEntry:
        """Domain entry with wall-clock (offset-free) start/end."""
        data = self.model_dump(exclude={"attendees", "start", "end"})
        return CalendarEntry(
            **data,
            start=self.start.replace(tzinfo=None),
            end=self.end.replace(tzinfo=None),
            attendees=[Attendee(**a.model_dump()) for a in self.attendees],
        )


class ClassifyRequest(BaseModel):
    entries: list[CalendarEntryIn]


# =============================================================================
# WORKLOAD
# =============================================================================


class ThresholdIn(BaseModel):
    comfortable: float
    busy: float
    high: float


class ThresholdsIn(BaseModel):
    daily: ThresholdIn | None = None
    weekly: ThresholdIn | None = None
    monthly: ThresholdIn | None = None

    def to_thresholds(self) -> WorkloadThresholds:
        defaults = WorkloadThresholds()
        return WorkloadThresholds(
            **{
                period: ThresholdConfig(**value.model_dump()) if value else getattr(defaults, period)
                for period, value in (
                    ("daily", self.daily),
                    ("weekly", self.weekly),
                    ("monthly", self.monthly),
                )
            }
        )


class WorkloadOptionsIn(BaseModel):
    include_travel_time: bool | None = None
    travel_minutes_per_leg: int | None = Field(default=None, ge=0)
    thresholds: ThresholdsIn | None = None
    week_starts_on: int | None = Field(default=None, ge=0, le=6)

    def to_options(self, reference_date: date | None = None) -> WorkloadOptions:
        overrides = self.model_dump(exclude_none=True, exclude={"thresholds"})
        if self.thresholds:
            overrides["thresholds"] = self.thresholds.to_thresholds()
        return WorkloadOptions(reference_date=reference_date, **overrides)


class LimitsIn(BaseModel):
    max_visits_per_day: int | None = Field(default=None, ge=0)
    max_hours_per_day: float | None = Field(default=None, ge=0)
    max_hours_per_week: float | None = Field(default=None, ge=0)
    warning_ratio: float | None = Field(default=None, gt=0, le=1)

    def to_limits(self) -> WorkloadLimits:
        return WorkloadLimits(**self.model_dump(exclude_none=True))


class DailyWorkloadRequest(BaseModel):
    date: date
    entries: list[CalendarEntryIn]
    options: WorkloadOptionsIn = WorkloadOptionsIn()


class RangeWorkloadRequest(BaseModel):
    start_date: date
    end_date: date
    entries: list[CalendarEntryIn]
    options: WorkloadOptionsIn = WorkloadOptionsIn()


class SummaryRequest(BaseModel):
    period: Literal["daily", "weekly", "monthly"]
    reference_date: date
    entries: list[CalendarEntryIn]
    options: WorkloadOptionsIn = WorkloadOptionsIn()


class WarningsRequest(BaseModel):
    date: date
    entries: list[CalendarEntryIn]
    options: WorkloadOptionsIn = WorkloadOptionsIn()
    limits: LimitsIn = LimitsIn()


# =============================================================================
# MULTI-VISIT
# =============================================================================


class VisitSlotIn(BaseModel):
    time: str
    duration_minutes: int = 0
    template_id: str | None = None


class OvernightIn(BaseModel):
    arrival_time: str
    departure_time: str
    template_id: str | None = None


class DropInIn(BaseModel):
    time: str
    duration_minutes: int = 0
    template_id: str | None = None


class RecurrenceConfigIn(BaseModel):
    client_label: str
    start_date: date
    end_date: date
    booking_kind: Literal["daily-visits", "overnight-stay"] = "daily-visits"
    visits: list[VisitSlotIn] = []
    weekend_visits: list[VisitSlotIn] | None = None
    overnight: OvernightIn | None = None
    drop_in: DropInIn | None = None
    location: str | None = None
    calendar_id: str = "generated"

    def to_config(self) -> RecurrenceConfig:
        return RecurrenceConfig(
            client_label=self.client_label,
            start_date=self.start_date,
            end_date=self.end_date,
            booking_kind=self.booking_kind,
            visits=[VisitSlot(**v.model_dump()) for v in self.visits],
            weekend_visits=(
                [VisitSlot(**v.model_dump()) for v in self.weekend_visits]
                if self.weekend_visits is not None
                else None
            ),
            overnight=OvernightConfig(**self.overnight.model_dump()) if self.overnight else None,
            drop_in=DropInConfig(**self.drop_in.model_dump()) if self.drop_in else None,
            location=self.location,
            calendar_id=self.calendar_id,
        )


class TemplateIn(BaseModel):
    id: str
    name: str
    duration_minutes: int = Field(ge=0)
    service_type: Literal[
        "drop-in", "walk", "overnight", "housesit", "meet-greet", "nail-trim", "other"
    ] = "drop-in"

    def to_template(self) -> Template:
        return Template(**self.model_dump())


class GenerateVisitsRequest(BaseModel):
    config: RecurrenceConfigIn
    templates: list[TemplateIn] = []
    existing: list[CalendarEntryIn] = []


# =============================================================================
# CLIENT MATCHING
# =============================================================================


class PetIn(BaseModel):
    name: str
    species: str | None = None


class ClientIn(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    pets: list[PetIn] = []

    def to_client(self) -> Client:
        data = self.model_dump(exclude={"pets"})
        return Client(**data, pets=[Pet(**p.model_dump()) for p in self.pets])


class SuggestRequest(BaseModel):
    title: str
    label: str | None = None
    clients: list[ClientIn]
    threshold: float = Field(default=DEFAULT_MATCH_THRESHOLD, ge=0, le=1)


class MappingRequest(BaseModel):
    label: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
