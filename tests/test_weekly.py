"""Tests for week-based analytics."""

import pytest
from conftest import make_record

from weekly_metrics.analytics.registry import MetricKey
from weekly_metrics.analytics.stats import median_half_up, round_half_up
from weekly_metrics.analytics.weekly import (
    average_trend,
    best_and_worst_week,
    compare_periods,
    find_consistent_growth,
    generate_page_summary,
    metric_statistics,
    rank_pages_by_metric,
    volatility,
    week_over_week_change,
    week_to_week_trend,
)
from weekly_metrics.exceptions import UnknownMetricError


# =============================================================================
# NUMERIC HELPERS
# =============================================================================


class TestRounding:
    def test_half_up_not_bankers(self) -> None:
        """2.5 should round to 3, unlike round()."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.4) == 2

    def test_median_odd(self) -> None:
        assert median_half_up([30, 10, 20]) == 20

    def test_median_even_averages_middle_pair(self) -> None:
        assert median_half_up([10, 20, 30, 40]) == 25


class TestWeekOverWeekChange:
    """Tests for week_over_week_change()."""

    def test_increase(self) -> None:
        assert week_over_week_change(120, 100) == 20.0

    def test_decrease_one_decimal(self) -> None:
        assert week_over_week_change(2, 3) == -33.3

    def test_zero_previous_positive_current(self) -> None:
        assert week_over_week_change(50, 0) == 100.0

    def test_zero_previous_zero_current(self) -> None:
        assert week_over_week_change(0, 0) == 0.0

    def test_unchanged(self) -> None:
        assert week_over_week_change(7, 7) == 0.0


class TestAverageTrend:
    def test_increasing(self) -> None:
        result = average_trend([100, 110, 130])
        assert result.trend == "increasing"
        assert result.change_percent == 30.0
        assert result.average == 113

    def test_single_value(self) -> None:
        result = average_trend([42])
        assert result.average == 42
        assert result.trend == "neutral"

    def test_empty(self) -> None:
        result = average_trend([])
        assert (result.average, result.trend, result.change_percent) == (0, "neutral", 0.0)

    def test_small_change_is_neutral(self) -> None:
        assert average_trend([100, 104]).trend == "neutral"


# =============================================================================
# RECORD ANALYTICS
# =============================================================================


class TestWeekToWeekTrend:
    """Tests for week_to_week_trend()."""

    def test_first_week_has_zero_change(self, two_weeks) -> None:
        trends = week_to_week_trend(two_weeks)
        assert trends[0].reach_change == 0.0
        assert trends[0].engagements_change == 0.0

    def test_changes(self, two_weeks) -> None:
        trends = week_to_week_trend(list(reversed(two_weeks)))
        assert [t.period.week for t in trends] == [41, 42]
        assert trends[1].reach_change == 20.0
        assert trends[1].engagements_change == 40.0

    def test_year_boundary_order(self) -> None:
        records = [
            make_record("p1", 1, year=2026, reach=10),
            make_record("p1", 52, year=2025, reach=20),
        ]
        trends = week_to_week_trend(records)
        assert [(t.period.year, t.period.week) for t in trends] == [(2025, 52), (2026, 1)]

    def test_does_not_mutate_input(self, two_weeks) -> None:
        reversed_input = list(reversed(two_weeks))
        week_to_week_trend(reversed_input)
        assert reversed_input[0].period.week == 42


class TestBestAndWorst:
    def test_reach_default(self, dataset) -> None:
        result = best_and_worst_week(dataset.for_page("p2"))
        assert result.best.period.week == 41
        assert result.worst.period.week == 42

    def test_first_match_on_ties(self) -> None:
        records = [
            make_record("p1", 41, engagements=5),
            make_record("p1", 42, engagements=5),
        ]
        result = best_and_worst_week(records, "engagements")
        assert result.best.period.week == 41
        assert result.worst.period.week == 41

    def test_empty(self) -> None:
        result = best_and_worst_week([])
        assert result.best is None and result.worst is None

    def test_metadata_metric_rejected(self, two_weeks) -> None:
        with pytest.raises(UnknownMetricError):
            best_and_worst_week(two_weeks, "status")


class TestMetricStatistics:
    def test_reach(self, two_weeks) -> None:
        stats = metric_statistics(two_weeks, MetricKey.REACH)
        assert (stats.min, stats.max, stats.average, stats.median) == (
            100_000,
            120_000,
            110_000,
            110_000,
        )

    def test_engagements_total(self, two_weeks) -> None:
        assert metric_statistics(two_weeks, "engagements").total == 1200

    def test_empty(self) -> None:
        stats = metric_statistics([])
        assert stats.total == 0 and stats.median == 0


class TestVolatility:
    def test_population_std(self) -> None:
        records = [
            make_record("p1", 41, reach=2),
            make_record("p1", 42, reach=4),
            make_record("p1", 43, reach=4),
            make_record("p1", 44, reach=4),
            make_record("p1", 45, reach=5),
            make_record("p1", 46, reach=5),
            make_record("p1", 47, reach=7),
            make_record("p1", 48, reach=9),
        ]
        assert volatility(records) == 2

    def test_single_record(self) -> None:
        assert volatility([make_record(reach=100)]) == 0


class TestRankPages:
    """Tests for rank_pages_by_metric()."""

    def test_ranks_are_gapless(self, dataset) -> None:
        ranked = rank_pages_by_metric(dataset.for_period(2025, 41))
        assert [r.rank for r in ranked] == [1, 2, 3]
        assert [r.page.page_id for r in ranked] == ["p2", "p1", "p3"]

    def test_ties_keep_input_order(self) -> None:
        records = [
            make_record("a", 41, engagements=50),
            make_record("b", 41, engagements=80),
            make_record("c", 41, engagements=50),
        ]
        ranked = rank_pages_by_metric(records)
        assert [r.page.page_id for r in ranked] == ["b", "a", "c"]
        assert [r.rank for r in ranked] == [1, 2, 3]

    def test_by_reach(self, dataset) -> None:
        ranked = rank_pages_by_metric(dataset.for_period(2025, 40), "reach")
        assert ranked[0].value == 20_000


class TestConsistentGrowth:
    """Tests for find_consistent_growth()."""

    def test_run_counts_increases(self) -> None:
        records = [
            make_record("p1", 41, engagements=10),
            make_record("p1", 42, engagements=20),
            make_record("p1", 43, engagements=30),
            make_record("p1", 44, engagements=25),
        ]
        streaks = find_consistent_growth({"p1": records})
        assert len(streaks) == 1
        assert streaks[0].consecutive_weeks == 2
        assert streaks[0].total_weeks == 4

    def test_needs_min_weeks_plus_one_records(self) -> None:
        records = [
            make_record("p1", 41, engagements=10),
            make_record("p1", 42, engagements=20),
        ]
        assert find_consistent_growth({"p1": records}) == []

    def test_sorted_by_run_length(self, dataset) -> None:
        extra = [
            make_record("p4", 40, engagements=1),
            make_record("p4", 41, engagements=2),
            make_record("p4", 42, engagements=3),
            make_record("p4", 43, engagements=4),
        ]
        by_page = {**dataset.by_page(), "p4": extra}
        streaks = find_consistent_growth(by_page)
        assert [s.page.page_id for s in streaks] == ["p4", "p1"]


class TestPageSummary:
    def test_summary(self, dataset) -> None:
        summary = generate_page_summary(dataset.for_page("p1"))
        assert summary.total_weeks == 3
        assert summary.reach.statistics.average == 12_333
        assert summary.engagements.statistics.total == 700
        assert summary.reach.best_week.week == 42
        assert len(summary.trends) == 3

    def test_empty(self) -> None:
        assert generate_page_summary([]) is None


class TestComparePeriods:
    def test_reach_by_average_engagements_by_total(self) -> None:
        first = [make_record("p1", 40, reach=100, engagements=10)]
        second = [
            make_record("p1", 41, reach=100, engagements=10),
            make_record("p1", 42, reach=200, engagements=20),
        ]
        result = compare_periods(first, second)
        assert result.reach_change == 50.0  # 100 -> 150 average
        assert result.engagements_change == 200.0  # 10 -> 30 total
