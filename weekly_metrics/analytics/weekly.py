"""Week-based analytics: changes, trends, statistics and rankings.

All functions are pure: inputs are never mutated and orderings are applied
to copies. Chronological order always means ascending ISO `start_date`
strings, which also holds across a year boundary ("2025-12-29" < "2026-01-05").
"""

from collections.abc import Mapping, Sequence

from ..config import DEFAULT_TREND_THRESHOLD_PCT
from ..models.weekly_record import WeeklyRecord
from .models import (
    BestWorst,
    GrowthStreak,
    MetricProfile,
    MetricStatistics,
    PageSummary,
    PeriodComparison,
    RankedPage,
    TrendSummary,
    WeekTrend,
)
from .registry import MetricKey, resolve_numeric_metric
from .stats import (
    classify_trend,
    mean_half_up,
    median_half_up,
    percent_one_decimal,
    population_std,
    round_half_up,
)


def _chronological(records: Sequence[WeeklyRecord]) -> list[WeeklyRecord]:
    return sorted(records, key=lambda r: r.period.start_date)


def _values(records: Sequence[WeeklyRecord], metric: MetricKey) -> list[int]:
    return [r.metrics.value(metric.value) for r in records]


def week_over_week_change(current: int | float, previous: int | float) -> float:
    """Percent change from previous to current, one decimal, half-up.

    A previous value of 0 yields 100 when current is positive, else 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return percent_one_decimal(current - previous, previous)


def average_trend(
    values: Sequence[int | float],
    threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT,
) -> TrendSummary:
    """Average and direction of an ordered series, first vs last value."""
    if not values:
        return TrendSummary(average=0, trend="neutral", change_percent=0.0)
    if len(values) == 1:
        return TrendSummary(average=values[0], trend="neutral", change_percent=0.0)

    change = week_over_week_change(values[-1], values[0])
    return TrendSummary(
        average=mean_half_up(values),
        trend=classify_trend(change, threshold_pct),
        change_percent=change,
    )


def week_to_week_trend(records: Sequence[WeeklyRecord]) -> list[WeekTrend]:
    """Per-week values with change vs the preceding week (first week: 0)."""
    trends: list[WeekTrend] = []
    previous: WeeklyRecord | None = None

    for current in _chronological(records):
        trends.append(
            WeekTrend(
                period=current.period,
                reach=current.metrics.reach,
                engagements=current.metrics.engagements,
                reach_change=(
                    week_over_week_change(
                        current.metrics.reach, previous.metrics.reach
                    )
                    if previous is not None
                    else 0.0
                ),
                engagements_change=(
                    week_over_week_change(
                        current.metrics.engagements, previous.metrics.engagements
                    )
                    if previous is not None
                    else 0.0
                ),
            )
        )
        previous = current

    return trends


def best_and_worst_week(
    records: Sequence[WeeklyRecord], metric: MetricKey | str = MetricKey.REACH
) -> BestWorst:
    """Highest and lowest record by metric.

    Linear scan with strict comparisons, so the first record wins ties.
    Presort the input if a different tie-break is needed.
    """
    key = resolve_numeric_metric(metric)
    if not records:
        return BestWorst(best=None, worst=None)

    best = worst = records[0]
    for record in records:
        value = record.metrics.value(key.value)
        if value > best.metrics.value(key.value):
            best = record
        if value < worst.metrics.value(key.value):
            worst = record

    return BestWorst(best=best, worst=worst)


def metric_statistics(
    records: Sequence[WeeklyRecord], metric: MetricKey | str = MetricKey.REACH
) -> MetricStatistics:
    """min, max, average, median and total for a metric.

    total is always computed, reach included. It must not be presented as a
    reach aggregate; the registry policy for reach is the average.
    """
    key = resolve_numeric_metric(metric)
    if not records:
        return MetricStatistics(min=0, max=0, average=0, median=0, total=0)

    values = _values(records, key)
    total = sum(values)
    return MetricStatistics(
        min=min(values),
        max=max(values),
        average=round_half_up(total / len(values)),
        median=median_half_up(values),
        total=total,
    )


def volatility(
    records: Sequence[WeeklyRecord], metric: MetricKey | str = MetricKey.REACH
) -> int:
    """Population standard deviation of the metric, rounded half-up.

    Fewer than two records yields 0.
    """
    key = resolve_numeric_metric(metric)
    if len(records) < 2:
        return 0
    return round_half_up(population_std(_values(records, key)))


def rank_pages_by_metric(
    records: Sequence[WeeklyRecord], metric: MetricKey | str = MetricKey.ENGAGEMENTS
) -> list[RankedPage]:
    """Rank records descending by metric.

    Ranks run 1..n without sharing; ties keep input order (stable sort).
    """
    key = resolve_numeric_metric(metric)
    ordered = sorted(records, key=lambda r: r.metrics.value(key.value), reverse=True)
    return [
        RankedPage(
            rank=position,
            page=record.page,
            value=record.metrics.value(key.value),
            status=record.status,
        )
        for position, record in enumerate(ordered, start=1)
    ]


def find_consistent_growth(
    records_by_page: Mapping[str, Sequence[WeeklyRecord]],
    metric: MetricKey | str = MetricKey.ENGAGEMENTS,
    min_weeks: int = 2,
) -> list[GrowthStreak]:
    """Pages whose longest run of strictly increasing weeks is >= min_weeks.

    The run counts increases, so [10, 20, 30, 25] has a run of 2. A page
    needs at least min_weeks + 1 records to be considered.
    """
    key = resolve_numeric_metric(metric)
    streaks: list[GrowthStreak] = []

    for page_records in records_by_page.values():
        if len(page_records) < min_weeks + 1:
            continue

        ordered = _chronological(page_records)
        values = _values(ordered, key)

        run = longest = 0
        for previous, current in zip(values, values[1:]):
            if current > previous:
                run += 1
                longest = max(longest, run)
            else:
                run = 0

        if longest >= min_weeks:
            streaks.append(
                GrowthStreak(
                    page=ordered[0].page,
                    consecutive_weeks=longest,
                    total_weeks=len(ordered),
                )
            )

    return sorted(streaks, key=lambda s: s.consecutive_weeks, reverse=True)


def _metric_profile(records: Sequence[WeeklyRecord], metric: MetricKey) -> MetricProfile:
    extremes = best_and_worst_week(records, metric)
    return MetricProfile(
        statistics=metric_statistics(records, metric),
        best_week=extremes.best.period if extremes.best else None,
        worst_week=extremes.worst.period if extremes.worst else None,
        volatility=volatility(records, metric),
    )


def generate_page_summary(records: Sequence[WeeklyRecord]) -> PageSummary | None:
    """Summary of one page's full history. None for empty input."""
    if not records:
        return None

    return PageSummary(
        page=records[0].page,
        total_weeks=len(records),
        reach=_metric_profile(records, MetricKey.REACH),
        engagements=_metric_profile(records, MetricKey.ENGAGEMENTS),
        trends=week_to_week_trend(records),
    )


def compare_periods(
    first: Sequence[WeeklyRecord], second: Sequence[WeeklyRecord]
) -> PeriodComparison:
    """Compare two record sets, e.g. two months of one page."""
    first_reach = metric_statistics(first, MetricKey.REACH)
    first_engagements = metric_statistics(first, MetricKey.ENGAGEMENTS)
    second_reach = metric_statistics(second, MetricKey.REACH)
    second_engagements = metric_statistics(second, MetricKey.ENGAGEMENTS)

    return PeriodComparison(
        first_reach=first_reach,
        first_engagements=first_engagements,
        second_reach=second_reach,
        second_engagements=second_engagements,
        reach_change=week_over_week_change(second_reach.average, first_reach.average),
        engagements_change=week_over_week_change(
            second_engagements.total, first_engagements.total
        ),
    )
