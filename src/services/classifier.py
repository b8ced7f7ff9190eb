"""
Event classification: work vs personal, service type, client label.

The pattern tables below are evaluated in list order. Personal rules always
run before work rules, and the first matching service-type rule wins.
"""

import logging
import re
from dataclasses import dataclass, fields
from datetime import date, datetime, time

from core.config import (
    CLIENT_LABEL_SEPARATORS,
    DEFAULT_SERVICE_MINUTES,
    DURATION_TOKENS,
    HOUSESIT_MINUTES,
    OVERNIGHT_DAILY_CAP_MINUTES,
    OVERNIGHT_MIN_HOURS,
    OVERNIGHT_MINUTES,
)
from models.events import CalendarEntry, EnrichedEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """A named title pattern."""
    name: str
    pattern: re.Pattern

    def matches(self, title: str) -> bool:
        return bool(self.pattern.search(title))


@dataclass(frozen=True)
class ServiceRule:
    """Title pattern -> service type, optionally with a fixed duration."""
    service_type: str
    pattern: re.Pattern
    fixed_minutes: int | None = None


# =============================================================================
# PATTERN TABLES
# =============================================================================

# "ON" is matched upper-case only so that ordinary words like "on" don't turn an
# entry into an overnight stay. The other abbreviations match in any case.
DURATION = re.compile(r"\b(" + "|".join(str(t) for t in DURATION_TOKENS) + r")\b")
MEET_GREET = re.compile(r"\b(?:mg|m&g|meet\s*(?:&|and)?\s*greet)\b", re.IGNORECASE)
HOUSESIT = re.compile(r"\b(?:hs|house\s*-?\s*sit(?:ting)?)\b", re.IGNORECASE)
OVERNIGHT = re.compile(r"\b(?:ON|(?i:over\s*-?\s*night))\b")
NAIL_TRIM = re.compile(r"\b(?:nt|nail\s*trims?)\b", re.IGNORECASE)
WALK = re.compile(r"\b(?:walk|walks|walking)\b", re.IGNORECASE)
DROP_IN = re.compile(r"\b(?:drop[\s-]?ins?|visits?)\b", re.IGNORECASE)
NAME_DASH = re.compile(r"^([A-Za-z]+(?:\s*(?:&|and|,)\s*[A-Za-z]+)*)\s*[-–—]\s*", re.IGNORECASE)

PERSONAL_RULES: list[Rule] = [
    Rule("admin", re.compile(r"\b(?:admin|administration|administrative|paperwork|bookkeeping|billing)\b", re.I)),
    Rule("off-marker", re.compile(r"^\s*✨\s*off\s*✨", re.I)),
    Rule("day-off", re.compile(r"\b(?:day\s*off|off\s*day|no\s*work)\b", re.I)),
    Rule("appointment", re.compile(r"\b(?:doctor|dentist|medical|appointment|appt)\b|\bdr\.", re.I)),
    Rule("personal", re.compile(r"\b(?:personal|private|family)\b", re.I)),
    Rule("blocked", re.compile(r"\b(?:blocked|busy|unavailable|break)\b", re.I)),
    Rule("holiday", re.compile(r"\b(?:holiday|vacation|pto|time\s*off)\b", re.I)),
    Rule("meal", re.compile(r"\b(?:lunch|dinner|breakfast|meal)\b", re.I)),
    Rule("travel", re.compile(r"\b(?:flight|airport|travel(?!.*time))\b", re.I)),
    Rule("entertainment", re.compile(r"\b(?:movie|concert|show|game|party)\b", re.I)),
    Rule("self-care", re.compile(r"\b(?:me\s*time|self[\s-]*care|gym|workout|exercise)\b", re.I)),
]

WORK_RULES: list[Rule] = [
    Rule("duration", DURATION),
    Rule("meet-greet", MEET_GREET),
    Rule("housesit", HOUSESIT),
    Rule("overnight", OVERNIGHT),
    Rule("nail-trim", NAIL_TRIM),
    Rule("walk", WALK),
    Rule("drop-in", DROP_IN),
    Rule("name-dash", NAME_DASH),
]

SERVICE_RULES: list[ServiceRule] = [
    ServiceRule("meet-greet", MEET_GREET),
    ServiceRule("housesit", HOUSESIT, HOUSESIT_MINUTES),
    ServiceRule("overnight", OVERNIGHT, OVERNIGHT_MINUTES),
    ServiceRule("nail-trim", NAIL_TRIM),
    ServiceRule("walk", WALK),
    ServiceRule("drop-in", DROP_IN),
    # A bare duration ("Fluffy - 30") is a drop-in
    ServiceRule("drop-in", DURATION),
]

SERVICE_TYPE_LABELS = {
    "drop-in": "Drop-In Visit",
    "walk": "Walk",
    "overnight": "Overnight",
    "housesit": "Housesit",
    "meet-greet": "Meet & Greet",
    "nail-trim": "Nail Trim",
    "other": "Other",
}


# =============================================================================
# TITLE RULES
# =============================================================================


def first_matching_rule(title: str, rules: list[Rule]) -> Rule | None:
    """Return the first rule (in priority order) whose pattern matches title."""
    for rule in rules:
        if rule.matches(title):
            return rule
    return None


def is_definitely_personal(title: str) -> bool:
    return first_matching_rule(title, PERSONAL_RULES) is not None


def is_work_title(title: str | None) -> bool:
    """
    Decide whether a title describes pet-sitting work.

    Empty titles and any personal match are never work, regardless of how many
    work patterns also match.
    """
    if not title or not title.strip():
        return False
    if is_definitely_personal(title):
        return False
    return first_matching_rule(title, WORK_RULES) is not None


def extract_service_info(title: str) -> tuple[str, int]:
    """Return (service_type, duration_minutes) for a work title."""
    duration = DEFAULT_SERVICE_MINUTES
    duration_match = DURATION.search(title)
    if duration_match:
        duration = int(duration_match.group(1))

    for rule in SERVICE_RULES:
        if rule.pattern.search(title):
            if rule.fixed_minutes is not None:
                return rule.service_type, rule.fixed_minutes
            return rule.service_type, duration

    return "other", duration


def extract_client_label(title: str) -> str:
    """
    Pull the client/pet label out of a title.

    "Bella & Max - 30" -> "Bella & Max"; "Smith | walk" -> "Smith".
    Falls back to the whole trimmed title.
    """
    match = NAME_DASH.match(title)
    if match:
        return match.group(1).strip()

    for separator in CLIENT_LABEL_SEPARATORS:
        idx = title.find(separator)
        if idx > 0:
            return title[:idx].strip()

    return title.strip()


def _attendee_label(entry: CalendarEntry) -> str | None:
    for attendee in entry.attendees:
        if attendee.display_name and attendee.display_name.strip():
            return attendee.display_name.strip()
        if attendee.email:
            return attendee.email.split("@")[0]
    return None


# =============================================================================
# DURATIONS
# =============================================================================


def detect_overnight(entry: CalendarEntry) -> bool:
    """Housesit/overnight keyword, or a long entry that crosses midnight."""
    if HOUSESIT.search(entry.title or "") or OVERNIGHT.search(entry.title or ""):
        return True

    hours = (entry.end - entry.start).total_seconds() / 3600
    return hours >= OVERNIGHT_MIN_HOURS and entry.start.date() != entry.end.date()


def _is_overnight(entry: CalendarEntry) -> bool:
    if isinstance(entry, EnrichedEntry):
        return entry.is_overnight
    return detect_overnight(entry)


def calculate_overnight_nights(entry: CalendarEntry) -> int:
    """Nights covered by an overnight entry (at least 1), else 0."""
    if not _is_overnight(entry):
        return 0
    return max(1, (entry.end.date() - entry.start.date()).days)


def day_bounds(day: date, tzinfo=None) -> tuple[datetime, datetime]:
    return (
        datetime.combine(day, time.min, tzinfo=tzinfo),
        datetime.combine(day, time.max, tzinfo=tzinfo),
    )


def duration_for_day(entry: CalendarEntry, day: date) -> int:
    """
    Minutes of entry that fall on day.

    Overnight entries are capped at 12 hours per day so a multi-day stay
    doesn't dominate each day's total.
    """
    day_start, day_end = day_bounds(day, entry.start.tzinfo)

    if entry.start > day_end or entry.end < day_start:
        return 0

    effective_start = max(entry.start, day_start)
    effective_end = min(entry.end, day_end)
    minutes = int((effective_end - effective_start).total_seconds() // 60)

    if _is_overnight(entry):
        minutes = min(minutes, OVERNIGHT_DAILY_CAP_MINUTES)

    return max(0, minutes)


# =============================================================================
# CLASSIFICATION
# =============================================================================


def classify(entry: CalendarEntry) -> EnrichedEntry:
    """Return an EnrichedEntry copy of entry with work/service fields filled in."""
    base = {f.name: getattr(entry, f.name) for f in fields(CalendarEntry)}

    if not is_work_title(entry.title):
        logger.debug("Entry %s classified as personal: %r", entry.id, entry.title)
        return EnrichedEntry(**base)

    service_type, minutes = extract_service_info(entry.title)
    label = extract_client_label(entry.title)
    if not re.search(r"[A-Za-z]", label):
        label = _attendee_label(entry) or label

    logger.debug("Entry %s classified as %s for %r", entry.id, service_type, label)
    return EnrichedEntry(
        **base,
        is_work=True,
        is_overnight=detect_overnight(entry),
        extracted_client_label=label,
        service_type=service_type,
        service_duration_minutes=minutes,
    )


def classify_all(entries: list[CalendarEntry]) -> list[EnrichedEntry]:
    return [classify(entry) for entry in entries]


def service_type_label(service_type: str | None) -> str:
    return SERVICE_TYPE_LABELS.get(service_type or "other", "Other")
