"""Numeric helpers shared by the analytics and aggregation modules."""

import math
from collections.abc import Sequence
from typing import Literal

import numpy as np

TrendDirection = Literal["increasing", "decreasing", "neutral"]
ChangeDirection = Literal["increase", "decrease", "neutral"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity.

    Python's round() uses banker's rounding (round(2.5) == 2); reported
    figures here must round 2.5 to 3.
    """
    return int(math.floor(value + 0.5))


def percent_one_decimal(numerator: float, denominator: float) -> float:
    """numerator / denominator as a percentage with one decimal, half-up.

    Caller guarantees denominator != 0.
    """
    return round_half_up(numerator / denominator * 100 * 10) / 10


def mean_half_up(values: Sequence[int | float]) -> int:
    """Arithmetic mean rounded half-up. Empty input yields 0."""
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def median_half_up(values: Sequence[int | float]) -> int | float:
    """Textbook median; an even count averages the middle pair (half-up).

    Empty input yields 0.
    """
    if not values:
        return 0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return round_half_up((ordered[mid - 1] + ordered[mid]) / 2)
    return ordered[mid]


def population_std(values: Sequence[int | float]) -> float:
    """Population standard deviation (ddof=0). Fewer than 2 values yields 0."""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64)))


def classify_trend(change_pct: float, threshold_pct: float) -> TrendDirection:
    """Map a percent change onto increasing / decreasing / neutral."""
    if change_pct > threshold_pct:
        return "increasing"
    if change_pct < -threshold_pct:
        return "decreasing"
    return "neutral"


def classify_change(change_pct: float, threshold_pct: float) -> ChangeDirection:
    """Map a percent change onto increase / decrease / neutral."""
    if change_pct > threshold_pct:
        return "increase"
    if change_pct < -threshold_pct:
        return "decrease"
    return "neutral"
