"""
Parsing of raw calendar provider payloads into CalendarEntry objects.

Fetching is done by the calendar collaborator; this module only converts the
Google-Calendar-shaped dicts it hands over (or an exported JSON file of them).
"""

import json
import logging
from datetime import datetime, time
from pathlib import Path

from models.events import Attendee, CalendarEntry

logger = logging.getLogger(__name__)

VALID_STATUSES = {"confirmed", "tentative", "cancelled"}


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp to a naive wall-clock datetime.

    Timestamps are expected to be in one zone already; any offset is dropped
    rather than converted.
    """
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


def parse_event(raw: dict, calendar_id: str) -> CalendarEntry:
    """Parse a provider event dict into our format."""
    start_raw = raw.get("start") or {}
    end_raw = raw.get("end") or {}
    all_day = not start_raw.get("dateTime")

    if all_day:
        start = datetime.combine(datetime.fromisoformat(start_raw["date"]).date(), time.min)
        end_date = end_raw.get("date") or start_raw["date"]
        end = datetime.combine(datetime.fromisoformat(end_date).date(), time(23, 59, 59))
    else:
        start = parse_timestamp(start_raw["dateTime"])
        end = parse_timestamp(end_raw.get("dateTime") or start_raw["dateTime"])

    status = raw.get("status") or "confirmed"
    if status not in VALID_STATUSES:
        status = "confirmed"

    attendees = [
        Attendee(display_name=a.get("displayName"), email=a.get("email"))
        for a in raw.get("attendees") or []
    ]

    return CalendarEntry(
        id=raw.get("id", ""),
        calendar_id=calendar_id,
        title=raw.get("summary") or "Untitled Event",
        description=raw.get("description"),
        location=raw.get("location"),
        start=start,
        end=end,
        all_day=all_day,
        status=status,
        recurring_event_id=raw.get("recurringEventId"),
        attendees=attendees,
    )


def load_entries(path: Path, calendar_id: str = "primary") -> list[CalendarEntry]:
    """
    Load entries from an exported JSON file.

    Accepts either a list of events or a provider response with an "items" key.
    Events that can't be parsed are skipped.
    """
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    raw_events = payload.get("items", []) if isinstance(payload, dict) else payload

    entries = []
    for idx, raw in enumerate(raw_events):
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object event at index %d: %r", idx, raw)
            continue
        try:
            entries.append(parse_event(raw, calendar_id))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping unparseable event %s: %s", raw.get("id", idx), e)
    return entries
