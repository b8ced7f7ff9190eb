"""
Input validation for date ranges and multi-visit booking configs.

Validators accumulate every problem into a list of human-readable messages
instead of stopping at the first one.
"""

import re
from datetime import date, time

from models.visits import RecurrenceConfig, VisitSlot

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def parse_time(value: str | None) -> time | None:
    """Parse 'HH:MM' (24h). Returns None if malformed."""
    if not value:
        return None
    match = TIME_PATTERN.match(value.strip())
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def validate_date_range(start: date | None, end: date | None) -> list[str]:
    errors = []
    if start is None or end is None:
        errors.append("Start and end dates are required")
    elif start > end:
        errors.append(f"Start date {start.isoformat()} must not be after end date {end.isoformat()}")
    return errors


def _validate_slots(slots: list[VisitSlot], label: str) -> list[str]:
    errors = []
    for idx, slot in enumerate(slots, start=1):
        if parse_time(slot.time) is None:
            errors.append(f"{label} {idx}: invalid time '{slot.time}' (expected HH:MM)")
        if slot.duration_minutes < 0:
            errors.append(f"{label} {idx}: duration cannot be negative")
    return errors


def validate_recurrence_config(config: RecurrenceConfig) -> list[str]:
    """
    Validate a multi-visit booking config.

    Checks:
    1. Client label is present
    2. Start date is on or before end date
    3. The booking kind has what it needs (visit slots / overnight times)
    4. Every time string is HH:MM
    """
    errors = []

    if not config.client_label or not config.client_label.strip():
        errors.append("Client name is required")

    errors.extend(validate_date_range(config.start_date, config.end_date))

    if config.booking_kind == "daily-visits":
        if not config.visits:
            errors.append("At least one visit slot is required")
        errors.extend(_validate_slots(config.visits, "Visit slot"))
        errors.extend(_validate_slots(config.weekend_visits or [], "Weekend slot"))
    elif config.booking_kind == "overnight-stay":
        overnight = config.overnight
        if overnight is None:
            errors.append("Overnight configuration is required for overnight stay")
        else:
            if parse_time(overnight.arrival_time) is None:
                errors.append(f"Overnight: invalid arrival time '{overnight.arrival_time}' (expected HH:MM)")
            if parse_time(overnight.departure_time) is None:
                errors.append(f"Overnight: invalid departure time '{overnight.departure_time}' (expected HH:MM)")
        if config.drop_in is not None:
            if parse_time(config.drop_in.time) is None:
                errors.append(f"Drop-in: invalid time '{config.drop_in.time}' (expected HH:MM)")
            if config.drop_in.duration_minutes < 0:
                errors.append("Drop-in: duration cannot be negative")
    else:
        errors.append(f"Unknown booking kind '{config.booking_kind}'")

    return errors
