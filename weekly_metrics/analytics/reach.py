"""Reach handling.

Reach counts unique people per week. Week 41 reaching 100,000 people and
week 42 reaching 120,000 does not mean 220,000 people were reached: many are
in both weeks. The only sanctioned way to combine reach across weeks is the
arithmetic mean.
"""

import logging
from collections.abc import Sequence
from typing import Any

from ..config import DEFAULT_REACH_SUM_WARNING_THRESHOLD, DEFAULT_TREND_THRESHOLD_PCT
from ..models.weekly_record import WeeklyRecord
from .models import ReachComparison, ReachDisplay, ReachRange, ReachTrend
from .registry import (
    AggregationCheck,
    AggregationMethod,
    MetricKey,
    format_metric_value,
    warning_message,
)
from .stats import classify_change, mean_half_up, percent_one_decimal

logger = logging.getLogger(__name__)

# Operation names that imply adding reach values together
_SUMMING_OPERATIONS = ("sum", "total", "add")
AGGREGATED_REACH_WARNING = "This is an average. Reach can not be summed across weeks."


def can_sum_reach() -> bool:
    """Reach is never summable."""
    return False


def average_reach(values: Sequence[int]) -> int:
    """Mean reach, rounded half-up. Empty input yields 0."""
    return mean_half_up(values)


def average_reach_from_records(records: Sequence[WeeklyRecord]) -> int:
    return average_reach([r.metrics.reach for r in records])


def reach_range(values: Sequence[int]) -> ReachRange:
    if not values:
        return ReachRange(min=0, max=0)
    return ReachRange(min=min(values), max=max(values))


def validate_reach_operation(operation: str) -> AggregationCheck:
    """Reject operation names that would add reach values together."""
    lowered = operation.lower()
    if any(op in lowered for op in _SUMMING_OPERATIONS):
        return AggregationCheck(
            is_valid=False,
            error_message=f"WARNING: {warning_message(MetricKey.REACH)}",
            expected_method=AggregationMethod.AVERAGE,
        )
    return AggregationCheck(is_valid=True, expected_method=AggregationMethod.AVERAGE)


def detect_incorrect_reach_sum(
    candidate_value: int,
    period_count: int,
    threshold: int = DEFAULT_REACH_SUM_WARNING_THRESHOLD,
) -> str | None:
    """Flag an aggregated reach value that looks like a sum.

    Heuristic only: values above `threshold` over more than one week are
    suspicious. Smaller erroneous sums go undetected.
    """
    if period_count <= 1:
        return None

    if candidate_value > threshold:
        message = (
            f"WARNING: This reach value ({candidate_value:,}) looks suspiciously "
            f"high. Was reach summed across {period_count} weeks instead of "
            f"averaged?"
        )
        logger.warning(message)
        return message
    return None


def compare_reach_between_weeks(
    first_week_reach: int,
    second_week_reach: int,
    threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT,
) -> ReachComparison:
    """Difference and percent change from the first week to the second."""
    difference = second_week_reach - first_week_reach
    percent_change = (
        percent_one_decimal(difference, first_week_reach)
        if first_week_reach > 0
        else 0.0
    )
    return ReachComparison(
        difference=difference,
        percent_change=percent_change,
        interpretation=classify_change(percent_change, threshold_pct),
    )


def analyze_reach_trend(
    records: Sequence[WeeklyRecord],
    threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT,
) -> ReachTrend | None:
    """Average, range and first-vs-last direction of reach."""
    if not records:
        return None

    ordered = sorted(records, key=lambda r: r.period.start_date)
    values = [r.metrics.reach for r in ordered]
    spread = reach_range(values)
    comparison = compare_reach_between_weeks(values[0], values[-1], threshold_pct)

    return ReachTrend(
        average=average_reach(values),
        min=spread.min,
        max=spread.max,
        trend=comparison.interpretation,
        overall_change=comparison.percent_change,
        week_count=len(ordered),
    )


def group_reach_by_month(records: Sequence[WeeklyRecord]) -> dict[str, int]:
    """Average reach per "YYYY_MM" month key."""
    grouped: dict[str, list[int]] = {}
    for record in records:
        key = f"{record.period.year}_{record.period.month:02d}"
        grouped.setdefault(key, []).append(record.metrics.reach)
    return {key: average_reach(values) for key, values in grouped.items()}


def export_reach_data(records: Sequence[WeeklyRecord]) -> dict[str, Any] | None:
    """Weekly reach values with the average and aggregation metadata."""
    if not records:
        return None

    return {
        "weekly_reach": [
            {
                "period": r.period.display_string,
                "reach": r.metrics.reach,
                "is_aggregated": False,
            }
            for r in records
        ],
        "average_reach": average_reach_from_records(records),
        "metadata": {
            "warning": (
                "Reach counts unique people per week and can NOT be summed "
                "across periods."
            ),
            "aggregation_method": AggregationMethod.AVERAGE.value,
            "week_count": len(records),
        },
    }


def format_reach_for_display(reach: int, is_aggregated: bool = False) -> ReachDisplay:
    """Thousands-separated reach; aggregated values carry the average warning."""
    return ReachDisplay(
        display_value=format_metric_value(MetricKey.REACH, reach),
        warning=AGGREGATED_REACH_WARNING if is_aggregated else None,
    )
