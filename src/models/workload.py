"""
Data models for workload metrics, thresholds and warnings.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from core.config import (
    DEFAULT_DAILY_THRESHOLDS,
    DEFAULT_MONTHLY_THRESHOLDS,
    DEFAULT_WEEKLY_THRESHOLDS,
    INCLUDE_TRAVEL_TIME,
    MAX_HOURS_PER_DAY,
    MAX_HOURS_PER_WEEK,
    MAX_VISITS_PER_DAY,
    TRAVEL_MINUTES_PER_LEG,
    WARNING_RATIO,
    WEEK_STARTS_ON,
)

WorkloadLevel = Literal["none", "comfortable", "busy", "high", "burnout"]
Period = Literal["daily", "weekly", "monthly"]
WarningKind = Literal["daily-visit-count", "daily-hours", "weekly-hours"]
Severity = Literal["warning", "critical"]


@dataclass(frozen=True)
class ThresholdConfig:
    """
    Ascending hour boundaries for one period.

    comfortable < busy < high is expected but not enforced; out-of-order values
    simply produce out-of-order buckets.
    """
    comfortable: float
    busy: float
    high: float


@dataclass(frozen=True)
class WorkloadThresholds:
    daily: ThresholdConfig = ThresholdConfig(*DEFAULT_DAILY_THRESHOLDS)
    weekly: ThresholdConfig = ThresholdConfig(*DEFAULT_WEEKLY_THRESHOLDS)
    monthly: ThresholdConfig = ThresholdConfig(*DEFAULT_MONTHLY_THRESHOLDS)

    def for_period(self, period: Period) -> ThresholdConfig:
        return getattr(self, period)


DEFAULT_THRESHOLDS = WorkloadThresholds()


@dataclass(frozen=True)
class WorkloadOptions:
    """Caller-supplied aggregation options."""
    include_travel_time: bool = INCLUDE_TRAVEL_TIME
    travel_minutes_per_leg: int = TRAVEL_MINUTES_PER_LEG
    thresholds: WorkloadThresholds = DEFAULT_THRESHOLDS
    week_starts_on: int = WEEK_STARTS_ON
    reference_date: date | None = None


@dataclass(frozen=True)
class WorkloadLimits:
    """Hard caps that drive warnings."""
    max_visits_per_day: int = MAX_VISITS_PER_DAY
    max_hours_per_day: float = MAX_HOURS_PER_DAY
    max_hours_per_week: float = MAX_HOURS_PER_WEEK
    warning_ratio: float = WARNING_RATIO


@dataclass
class WorkloadMetric:
    """Workload for a single calendar day."""
    date: date
    work_minutes: int
    travel_minutes: int
    total_minutes: int
    event_count: int
    level: WorkloadLevel

    @property
    def total_hours(self) -> float:
        return self.total_minutes / 60


@dataclass
class BusiestDay:
    date: date
    hours: float


@dataclass
class WorkloadSummary:
    """Aggregate workload over a day, week or month."""
    period: Period
    start_date: date
    end_date: date
    total_work_hours: float
    total_travel_hours: float
    average_daily_hours: float
    busiest_day: BusiestDay
    level: WorkloadLevel
    event_count: int
    metrics: list[WorkloadMetric] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return self.total_work_hours + self.total_travel_hours


@dataclass
class WorkloadWarning:
    kind: WarningKind
    severity: Severity
    current: float
    limit: float
    percentage: int
    message: str = ""
