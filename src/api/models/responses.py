"""Pydantic response models for API endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FromDomain(BaseModel):
    """Base for responses built from domain dataclasses."""

    model_config = ConfigDict(from_attributes=True)


class CalendarEntryOut(FromDomain):
    id: str
    calendar_id: str
    title: str
    start: datetime
    end: datetime
    location: str | None = None
    all_day: bool = False
    status: str = "confirmed"


class EnrichedEntryOut(CalendarEntryOut):
    is_work: bool
    is_overnight: bool
    extracted_client_label: str | None = None
    service_type: str | None = None
    service_duration_minutes: int


class WorkloadMetricOut(FromDomain):
    date: date
    work_minutes: int
    travel_minutes: int
    total_minutes: int
    event_count: int
    level: str


class BusiestDayOut(FromDomain):
    date: date
    hours: float


class WorkloadSummaryOut(FromDomain):
    period: str
    start_date: date
    end_date: date
    total_work_hours: float
    total_travel_hours: float
    average_daily_hours: float
    busiest_day: BusiestDayOut
    level: str
    event_count: int
    metrics: list[WorkloadMetricOut]


class WorkloadWarningOut(FromDomain):
    kind: str
    severity: str
    current: float
    limit: float
    percentage: int
    message: str


class ValidationResponse(BaseModel):
    valid: bool
    errors: list[str]


class ConflictOut(FromDomain):
    existing: CalendarEntryOut
    generated: CalendarEntryOut


class GeneratedSummaryOut(FromDomain):
    total_entries: int
    total_days: int
    total_minutes: int
    unique_dates: list[str]


class GenerateVisitsResponse(BaseModel):
    entries: list[CalendarEntryOut]
    conflicts: list[ConflictOut]
    summary: GeneratedSummaryOut
    preview: str


class ClientSuggestionOut(FromDomain):
    client_id: str
    client_name: str
    confidence: float
    reasons: list[str]
    source: str


class MappingResponse(BaseModel):
    label: str
    client_id: str | None
    mapping_count: int
