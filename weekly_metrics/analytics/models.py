"""Output models for analytics and aggregation calculations."""

from dataclasses import dataclass

from ..models.weekly_record import Page, WeekPeriod, WeeklyRecord
from .stats import ChangeDirection, TrendDirection


# =============================================================================
# REACH
# =============================================================================


@dataclass(frozen=True)
class ReachRange:
    """Lowest and highest weekly reach (never summed)."""

    min: int
    max: int


@dataclass(frozen=True)
class ReachComparison:
    """Reach change between two weeks."""

    difference: int
    percent_change: float  # One decimal, 0 when the first week is 0
    interpretation: ChangeDirection


@dataclass(frozen=True)
class ReachTrend:
    """Reach trend over a page's weeks, first vs last."""

    average: int
    min: int
    max: int
    trend: ChangeDirection
    overall_change: float
    week_count: int


@dataclass(frozen=True)
class ReachDisplay:
    """Formatted reach value, with a warning when it is an average."""

    display_value: str
    warning: str | None = None


# =============================================================================
# WEEKLY ANALYTICS
# =============================================================================


@dataclass(frozen=True)
class TrendSummary:
    """Average and direction over an ordered value series."""

    average: int | float
    trend: TrendDirection
    change_percent: float


@dataclass(frozen=True)
class WeekTrend:
    """One week's values and change vs the previous week."""

    period: WeekPeriod
    reach: int
    engagements: int
    reach_change: float
    engagements_change: float


@dataclass(frozen=True)
class BestWorst:
    """Best and worst weekly record for a metric (first match on ties)."""

    best: WeeklyRecord | None
    worst: WeeklyRecord | None


@dataclass(frozen=True)
class MetricStatistics:
    """Descriptive statistics for one metric.

    total is a plain sum and is only a valid aggregate for summable metrics.
    """

    min: int
    max: int
    average: int
    median: int | float
    total: int


@dataclass(frozen=True)
class MetricProfile:
    """Statistics, best/worst period and volatility for one metric."""

    statistics: MetricStatistics
    best_week: WeekPeriod | None
    worst_week: WeekPeriod | None
    volatility: int


@dataclass(frozen=True)
class PageSummary:
    """Full-history summary for a single page."""

    page: Page
    total_weeks: int
    reach: MetricProfile
    engagements: MetricProfile
    trends: list[WeekTrend]


@dataclass(frozen=True)
class RankedPage:
    """Page position by a metric value (1-based, no shared ranks)."""

    rank: int
    page: Page
    value: int
    status: str


@dataclass(frozen=True)
class GrowthStreak:
    """Longest run of strictly increasing weeks for a page."""

    page: Page
    consecutive_weeks: int
    total_weeks: int


@dataclass(frozen=True)
class PeriodComparison:
    """Statistics for two record sets and their change.

    Reach change compares averages; engagements change compares totals.
    """

    first_reach: MetricStatistics
    first_engagements: MetricStatistics
    second_reach: MetricStatistics
    second_engagements: MetricStatistics
    reach_change: float
    engagements_change: float


# =============================================================================
# AGGREGATION
# =============================================================================


@dataclass(frozen=True)
class GroupMetrics:
    """Registry-checked aggregate of a group of weekly records."""

    total_engagements: int  # sum
    average_reach: int  # mean, never a sum
    count: int


@dataclass(frozen=True)
class PageAggregate:
    page: Page
    weeks: list[WeeklyRecord]
    metrics: GroupMetrics


@dataclass(frozen=True)
class WeekAggregate:
    """All pages for one period."""

    period: WeekPeriod
    pages: list[WeeklyRecord]
    metrics: GroupMetrics


@dataclass(frozen=True)
class MonthAggregate:
    year: int
    month: int
    month_name: str
    weeks: list[WeeklyRecord]
    metrics: GroupMetrics


@dataclass(frozen=True)
class QuarterAggregate:
    year: int
    quarter: int
    weeks: list[WeeklyRecord]
    metrics: GroupMetrics


@dataclass(frozen=True)
class SummaryMetrics:
    total_engagements: int
    average_reach: int


@dataclass(frozen=True)
class DatasetSummary:
    """Counts of distinct weeks and pages plus dataset-wide metrics."""

    total_weeks: int
    total_pages: int
    total_data_points: int
    metrics: SummaryMetrics


@dataclass(frozen=True)
class TimeseriesPoint:
    period: WeekPeriod
    reach: int
    engagements: int
    status: str


@dataclass(frozen=True)
class PageTimeseries:
    """Chronological series for one page."""

    page: Page
    timeseries: list[TimeseriesPoint]
    summary: GroupMetrics


@dataclass(frozen=True)
class WeekComparisonEntry:
    page: Page
    reach: int
    engagements: int
    status: str


@dataclass(frozen=True)
class EngagementShare:
    page: Page
    engagements: int
    percentage: float  # One decimal


@dataclass(frozen=True)
class PivotRow:
    page: Page
    weeks: dict[str, int]  # period_key -> metric value


@dataclass(frozen=True)
class PivotTable:
    """Pages as rows, period keys as columns."""

    pages: list[str]
    weeks: list[str]
    data: dict[str, PivotRow]
    metric: str
