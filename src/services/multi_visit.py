"""
Multi-visit generation and conflict detection.

Turns a recurrence config (daily visits or an overnight stay) into calendar
entries, and checks them against an existing schedule.
"""

import logging
import uuid
from collections import defaultdict
from datetime import date, datetime, timedelta

from core.validation import parse_time, validate_recurrence_config
from models.events import CalendarEntry, Template
from models.visits import Conflict, GeneratedSummary, RecurrenceConfig, VisitSlot
from services.workload import each_day

logger = logging.getLogger(__name__)

DEFAULT_VISIT_TITLE = "Drop-In Visit"
DEFAULT_OVERNIGHT_TITLE = "Overnight"


def validate(config: RecurrenceConfig) -> list[str]:
    """All problems with config; empty if it can be generated."""
    return validate_recurrence_config(config)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def slots_for_date(config: RecurrenceConfig, day: date) -> list[VisitSlot]:
    """Weekend override slots on Saturday/Sunday when given, else the default slots."""
    if is_weekend(day) and config.weekend_visits:
        return config.weekend_visits
    return config.visits


def combine(day: date, hhmm: str) -> datetime:
    return datetime.combine(day, parse_time(hhmm))


def _find_template(templates: list[Template], template_id: str | None) -> Template | None:
    if template_id is None:
        return None
    for template in templates:
        if template.id == template_id:
            return template
    logger.debug("Template %s not found, using zero-length entry", template_id)
    return None


def _title(client_label: str, template: Template | None, default: str) -> str:
    return f"{client_label.strip()} - {template.name if template else default}"


def _entry(config: RecurrenceConfig, title: str, start: datetime, end: datetime) -> CalendarEntry:
    return CalendarEntry(
        id=str(uuid.uuid4()),
        calendar_id=config.calendar_id,
        title=title,
        start=start,
        end=end,
        location=config.location,
    )


def _visit(
    config: RecurrenceConfig,
    day: date,
    hhmm: str,
    duration_minutes: int,
    template_id: str | None,
    templates: list[Template],
) -> CalendarEntry:
    template = _find_template(templates, template_id)
    minutes = duration_minutes or (template.duration_minutes if template else 0)
    start = combine(day, hhmm)
    return _entry(
        config,
        _title(config.client_label, template, DEFAULT_VISIT_TITLE),
        start,
        start + timedelta(minutes=minutes),
    )


def generate(config: RecurrenceConfig, templates: list[Template]) -> list[CalendarEntry]:
    """
    Generate calendar entries for a booking.

    Daily visits: every day in [start, end] gets its slots (weekend overrides
    on Saturday/Sunday). Overnight stay: one entry from arrival on the start
    date to departure on the end date, plus one drop-in on the start date
    when configured.

    Unknown template ids don't abort the batch; the visit is created with a
    zero-length duration unless the slot sets its own.

    Raises:
        ValueError: if the config fails validation (one error per line)
    """
    errors = validate(config)
    if errors:
        raise ValueError("\n".join(errors))

    entries = []

    if config.booking_kind == "daily-visits":
        for day in each_day(config.start_date, config.end_date):
            for slot in slots_for_date(config, day):
                entries.append(
                    _visit(config, day, slot.time, slot.duration_minutes, slot.template_id, templates)
                )
        return entries

    overnight = config.overnight
    template = _find_template(templates, overnight.template_id)
    start = combine(config.start_date, overnight.arrival_time)
    end = combine(config.end_date, overnight.departure_time)
    if end <= start:
        # Same-day booking whose departure is earlier than arrival: leave next morning
        end += timedelta(days=1)
    entries.append(
        _entry(config, _title(config.client_label, template, DEFAULT_OVERNIGHT_TITLE), start, end)
    )

    if config.drop_in is not None:
        drop_in = config.drop_in
        entries.append(
            _visit(
                config,
                config.start_date,
                drop_in.time,
                drop_in.duration_minutes,
                drop_in.template_id,
                templates,
            )
        )

    return entries


def overlaps(a: CalendarEntry, b: CalendarEntry) -> bool:
    """Half-open interval overlap; entries that only touch don't overlap."""
    return a.start < b.end and b.start < a.end


def detect_conflicts(existing: list[CalendarEntry], generated: list[CalendarEntry]) -> list[Conflict]:
    """Every (existing, generated) pair whose time ranges overlap."""
    return [
        Conflict(existing=current, generated=new)
        for new in generated
        for current in existing
        if overlaps(current, new)
    ]


# =============================================================================
# PREVIEW HELPERS
# =============================================================================


def summarize_generated(entries: list[CalendarEntry]) -> GeneratedSummary:
    unique_dates = sorted({e.start.date().isoformat() for e in entries})
    return GeneratedSummary(
        total_entries=len(entries),
        total_days=len(unique_dates),
        total_minutes=sum(e.duration_minutes for e in entries),
        unique_dates=unique_dates,
    )


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_preview(entries: list[CalendarEntry]) -> str:
    """
    Human-readable preview grouped by day:

        Sat, Jan 6:
          • Fluffy - Drop-In Visit (9:00 AM - 9:30 AM)
    """
    grouped: dict[date, list[CalendarEntry]] = defaultdict(list)
    for entry in sorted(entries, key=lambda e: e.start):
        grouped[entry.start.date()].append(entry)

    lines = []
    for day, day_entries in grouped.items():
        lines.append(f"{day.strftime('%a, %b')} {day.day}:")
        for entry in day_entries:
            lines.append(f"  • {entry.title} ({_clock(entry.start)} - {_clock(entry.end)})")
    return "\n".join(lines)
