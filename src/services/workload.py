"""
Workload metrics, levels and burnout warnings.

All functions are pure over the entries passed in; classify entries first
(services.classifier) so that is_work/is_overnight are populated.
"""

import calendar
from datetime import date, timedelta

from core.validation import validate_date_range
from models.events import EnrichedEntry
from models.workload import (
    DEFAULT_THRESHOLDS,
    BusiestDay,
    Period,
    ThresholdConfig,
    WorkloadLevel,
    WorkloadLimits,
    WorkloadMetric,
    WorkloadOptions,
    WorkloadSummary,
    WorkloadThresholds,
    WorkloadWarning,
)
from services.classifier import day_bounds, duration_for_day

WORKLOAD_LABELS = {
    "none": "No Work",
    "comfortable": "Comfortable",
    "busy": "Busy",
    "high": "High",
    "burnout": "Burnout Risk",
}


# =============================================================================
# LEVELS
# =============================================================================


def classify_level(hours: float, config: ThresholdConfig) -> WorkloadLevel:
    """Bucket hours with inclusive upper bounds; zero or less is 'none'."""
    if hours <= 0:
        return "none"
    if hours <= config.comfortable:
        return "comfortable"
    if hours <= config.busy:
        return "busy"
    if hours <= config.high:
        return "high"
    return "burnout"


def workload_level(
    hours: float, period: Period, thresholds: WorkloadThresholds = DEFAULT_THRESHOLDS
) -> WorkloadLevel:
    return classify_level(hours, thresholds.for_period(period))


def workload_label(level: WorkloadLevel) -> str:
    return WORKLOAD_LABELS.get(level, "No Work")


def format_hours(hours: float) -> str:
    """Format hours for display: '45 min', '2h', '2h 30m'."""
    whole = int(hours)
    minutes = round((hours - whole) * 60)
    if minutes == 60:
        whole, minutes = whole + 1, 0
    if whole == 0:
        return f"{minutes} min"
    if minutes == 0:
        return f"{whole}h"
    return f"{whole}h {minutes}m"


# =============================================================================
# DAILY METRICS
# =============================================================================


def event_overlaps_day(entry: EnrichedEntry, day: date) -> bool:
    day_start, day_end = day_bounds(day, entry.start.tzinfo)
    return entry.start <= day_end and entry.end >= day_start


def entries_for_date(entries: list[EnrichedEntry], day: date) -> list[EnrichedEntry]:
    return [e for e in entries if event_overlaps_day(e, day)]


def estimate_travel_minutes(work_entries: list[EnrichedEntry], minutes_per_leg: int) -> int:
    """
    Estimate travel time as a number of legs.

    Each visit costs two legs (there and back) unless it is at the same
    location as the visit right before it, in which case only the return leg
    is counted.
    """
    legs = 0
    ordered = sorted(work_entries, key=lambda e: e.start)
    previous = None

    for entry in ordered:
        if previous is not None and entry.location and entry.location == previous.location:
            legs += 1
        else:
            legs += 2
        previous = entry

    return legs * minutes_per_leg


def daily_metric(
    day: date, entries: list[EnrichedEntry], options: WorkloadOptions | None = None
) -> WorkloadMetric:
    """Workload for one day from the work entries that overlap it."""
    options = options or WorkloadOptions()

    work_entries = [e for e in entries_for_date(entries, day) if e.is_work]
    work_minutes = sum(duration_for_day(e, day) for e in work_entries)

    travel_minutes = 0
    if options.include_travel_time:
        travel_minutes = estimate_travel_minutes(work_entries, options.travel_minutes_per_leg)

    total_minutes = work_minutes + travel_minutes
    return WorkloadMetric(
        date=day,
        work_minutes=work_minutes,
        travel_minutes=travel_minutes,
        total_minutes=total_minutes,
        event_count=len(work_entries),
        level=workload_level(total_minutes / 60, "daily", options.thresholds),
    )


def each_day(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def range_metrics(
    start: date,
    end: date,
    entries: list[EnrichedEntry],
    options: WorkloadOptions | None = None,
) -> list[WorkloadMetric]:
    """
    One metric per calendar day in [start, end].

    Raises:
        ValueError: if start is after end
    """
    errors = validate_date_range(start, end)
    if errors:
        raise ValueError("\n".join(errors))

    return [daily_metric(day, entries, options) for day in each_day(start, end)]


# =============================================================================
# PERIOD SUMMARIES
# =============================================================================


def period_range(period: Period, reference: date, week_starts_on: int = 6) -> tuple[date, date]:
    """First and last day of the period containing reference."""
    if period == "daily":
        return reference, reference
    if period == "weekly":
        offset = (reference.weekday() - week_starts_on) % 7
        start = reference - timedelta(days=offset)
        return start, start + timedelta(days=6)
    if period == "monthly":
        last_day = calendar.monthrange(reference.year, reference.month)[1]
        return reference.replace(day=1), reference.replace(day=last_day)
    raise ValueError(f"Unknown period '{period}'")


def period_summary(
    period: Period, entries: list[EnrichedEntry], options: WorkloadOptions | None = None
) -> WorkloadSummary:
    """
    Summarize workload for the day/week/month containing options.reference_date.

    The average is over the days actually in the period, and the busiest day
    is the first day holding the maximum total.
    """
    options = options or WorkloadOptions()
    reference = options.reference_date or date.today()
    start, end = period_range(period, reference, options.week_starts_on)

    metrics = range_metrics(start, end, entries, options)

    work_minutes = sum(m.work_minutes for m in metrics)
    travel_minutes = sum(m.travel_minutes for m in metrics)
    total_hours = (work_minutes + travel_minutes) / 60

    busiest = BusiestDay(date=start, hours=0.0)
    for metric in metrics:
        if metric.total_hours > busiest.hours:
            busiest = BusiestDay(date=metric.date, hours=metric.total_hours)

    return WorkloadSummary(
        period=period,
        start_date=start,
        end_date=end,
        total_work_hours=work_minutes / 60,
        total_travel_hours=travel_minutes / 60,
        average_daily_hours=total_hours / len(metrics),
        busiest_day=busiest,
        level=workload_level(total_hours, period, options.thresholds),
        event_count=sum(m.event_count for m in metrics),
        metrics=metrics,
    )


# =============================================================================
# WARNINGS
# =============================================================================

WARNING_MESSAGES = {
    "daily-visit-count": (
        "You've reached your daily visit limit ({limit:g} visits)",
        "Approaching daily visit limit ({current:g}/{limit:g})",
    ),
    "daily-hours": (
        "You've reached your daily hours limit ({limit:g}h)",
        "Approaching daily hours limit ({current:.1f}/{limit:g}h)",
    ),
    "weekly-hours": (
        "You've reached your weekly hours limit ({limit:g}h)",
        "Approaching weekly hours limit ({current:.1f}/{limit:g}h)",
    ),
}


def _warning(kind: str, current: float, limit: float, warning_ratio: float) -> WorkloadWarning | None:
    if limit <= 0:
        return None

    ratio = current / limit
    if ratio < warning_ratio:
        return None

    severity = "critical" if ratio >= 1 else "warning"
    critical_msg, warning_msg = WARNING_MESSAGES[kind]
    template = critical_msg if severity == "critical" else warning_msg
    return WorkloadWarning(
        kind=kind,
        severity=severity,
        current=current,
        limit=limit,
        percentage=round(ratio * 100),
        message=template.format(current=current, limit=limit),
    )


def workload_warnings(
    day_metric: WorkloadMetric,
    week_hours: float,
    limits: WorkloadLimits | None = None,
) -> list[WorkloadWarning]:
    """
    Compare a day's metric and the week's hours against configured caps.

    Each kind is checked independently, so all three can fire at once.
    """
    limits = limits or WorkloadLimits()
    checks = [
        ("daily-visit-count", day_metric.event_count, limits.max_visits_per_day),
        ("daily-hours", day_metric.total_hours, limits.max_hours_per_day),
        ("weekly-hours", week_hours, limits.max_hours_per_week),
    ]

    warnings = []
    for kind, current, limit in checks:
        warning = _warning(kind, current, limit, limits.warning_ratio)
        if warning:
            warnings.append(warning)
    return warnings


def check_workload(
    day: date,
    entries: list[EnrichedEntry],
    options: WorkloadOptions | None = None,
    limits: WorkloadLimits | None = None,
) -> list[WorkloadWarning]:
    """Warnings for day, counting weekly hours from the start of its week through day."""
    options = options or WorkloadOptions()
    week_start, _ = period_range("weekly", day, options.week_starts_on)

    week_metrics = range_metrics(week_start, day, entries, options)
    week_hours = sum(m.total_hours for m in week_metrics)

    return workload_warnings(week_metrics[-1], week_hours, limits)
