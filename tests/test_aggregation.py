"""Tests for the aggregation module."""

import pytest
from conftest import make_record

from weekly_metrics.analytics.aggregation import (
    aggregate_by_month,
    aggregate_by_page,
    aggregate_by_quarter,
    aggregate_by_week,
    aggregate_for_week_comparison,
    aggregate_metric,
    aggregate_page_timeseries,
    combine_values,
    create_pivot_table,
    create_summary,
    engagement_distribution,
    sum_engagements,
    total_reach,
)
from weekly_metrics.analytics.registry import AggregationMethod, MetricKey
from weekly_metrics.analytics.weekly import find_consistent_growth, generate_page_summary
from weekly_metrics.exceptions import InvalidAggregationMethodError, UnknownMetricError


class TestCombineValues:
    """Tests for the registry-checked combiner."""

    def test_reach_defaults_to_average(self) -> None:
        assert combine_values([100_000, 120_000], "reach") == 110_000

    def test_engagements_default_to_sum(self) -> None:
        assert combine_values([500, 700], MetricKey.ENGAGEMENTS) == 1200

    def test_summing_reach_refused(self) -> None:
        """Should refuse to sum reach."""
        with pytest.raises(InvalidAggregationMethodError):
            combine_values([1, 2], "reach", AggregationMethod.SUM)

    def test_averaging_engagements_refused(self) -> None:
        with pytest.raises(InvalidAggregationMethodError):
            combine_values([1, 2], "engagements", "average")

    def test_metadata_refused(self) -> None:
        with pytest.raises(InvalidAggregationMethodError):
            combine_values([1], "status")

    def test_unknown_metric(self) -> None:
        with pytest.raises(UnknownMetricError):
            aggregate_metric([make_record()], "clicks")


class TestTotals:
    def test_two_week_totals(self, two_weeks) -> None:
        assert sum_engagements(two_weeks) == 1200
        assert total_reach(two_weeks) == 110_000

    def test_summary(self, dataset) -> None:
        summary = create_summary(dataset.records)
        assert summary.total_weeks == 3
        assert summary.total_pages == 3
        assert summary.total_data_points == 9
        assert summary.metrics.total_engagements == 1790
        assert summary.metrics.average_reach == 11_111

    def test_empty_summary(self) -> None:
        summary = create_summary([])
        assert summary.total_data_points == 0
        assert summary.metrics.average_reach == 0


class TestGroupings:
    """Tests for the aggregate_by_* functions."""

    def test_by_page(self, dataset) -> None:
        pages = aggregate_by_page(dataset.records)
        assert list(pages) == ["p1", "p2", "p3"]
        p2 = pages["p2"].metrics
        assert p2.total_engagements == 1000
        assert p2.average_reach == 17_667
        assert p2.count == 3

    def test_by_week(self, dataset) -> None:
        weeks = aggregate_by_week(dataset.records)
        assert list(weeks) == ["2025_40", "2025_41", "2025_42"]
        assert weeks["2025_41"].metrics.total_engagements == 540
        assert weeks["2025_41"].metrics.average_reach == 13_000

    def test_by_month_uses_start_date(self, dataset) -> None:
        months = aggregate_by_month(dataset.records)
        assert set(months) == {"2025_09", "2025_10"}
        october = months["2025_10"]
        assert october.month_name == "October"
        assert october.metrics.count == 6

    def test_by_quarter(self, dataset) -> None:
        quarters = aggregate_by_quarter(dataset.records)
        assert set(quarters) == {"2025_Q3", "2025_Q4"}
        assert quarters["2025_Q3"].metrics.count == 3

    def test_groups_partition_records(self, dataset) -> None:
        weeks = aggregate_by_week(dataset.records)
        assert sum(w.metrics.count for w in weeks.values()) == len(dataset)


class TestViews:
    def test_page_timeseries_chronological(self) -> None:
        records = [
            make_record("p1", 42, reach=200, engagements=20),
            make_record("p1", 41, reach=100, engagements=10),
        ]
        series = aggregate_page_timeseries(records)
        assert [p.period.week for p in series.timeseries] == [41, 42]
        assert series.summary.average_reach == 150
        assert series.summary.total_engagements == 30

    def test_page_timeseries_empty(self) -> None:
        assert aggregate_page_timeseries([]) is None

    def test_week_comparison(self, dataset) -> None:
        entries = aggregate_for_week_comparison(dataset.records, 2025, 40)
        assert [e.page.page_id for e in entries] == ["p2", "p1", "p3"]

    def test_week_comparison_missing_week(self, dataset) -> None:
        assert aggregate_for_week_comparison(dataset.records, 2024, 1) == []


class TestEngagementDistribution:
    """Tests for engagement_distribution()."""

    def test_shares_sorted(self, dataset) -> None:
        shares = engagement_distribution(dataset.for_period(2025, 40))
        assert [s.page.page_id for s in shares] == ["p2", "p1", "p3"]
        assert [s.percentage for s in shares] == [72.7, 18.2, 9.1]

    def test_zero_total(self) -> None:
        records = [make_record("a", 41), make_record("b", 41)]
        shares = engagement_distribution(records)
        assert [s.page.page_id for s in shares] == ["a", "b"]
        assert all(s.percentage == 0.0 and s.engagements == 0 for s in shares)


class TestPivotTable:
    """Tests for create_pivot_table()."""

    def test_round_trip(self, dataset) -> None:
        """Every record should be readable back from the pivot."""
        pivot = create_pivot_table(dataset.records)
        for record in dataset:
            row = pivot.data[record.page.page_id]
            assert row.weeks[record.period.period_key] == record.metrics.engagements

    def test_axes(self, dataset) -> None:
        pivot = create_pivot_table(dataset.records, "reach")
        assert pivot.pages == ["p1", "p2", "p3"]
        assert pivot.weeks == ["2025_40", "2025_41", "2025_42"]
        assert pivot.metric == "reach"

    def test_weeks_are_string_sorted(self) -> None:
        records = [make_record("p1", 10), make_record("p1", 9)]
        assert create_pivot_table(records).weeks == ["2025_10", "2025_9"]


class TestRepeatability:
    """Same input twice should give equal output and leave the input alone."""

    @pytest.mark.parametrize(
        "compute",
        [
            aggregate_by_page,
            aggregate_by_week,
            aggregate_by_month,
            aggregate_by_quarter,
            create_summary,
            engagement_distribution,
            lambda rs: create_pivot_table(rs, MetricKey.REACH),
            lambda rs: create_pivot_table(rs, MetricKey.ENGAGEMENTS),
        ],
    )
    def test_aggregations(self, dataset, compute) -> None:
        records = list(reversed(dataset.records))
        snapshot = list(records)
        assert compute(records) == compute(records)
        assert records == snapshot

    def test_page_analytics(self, dataset) -> None:
        by_page = {k: list(reversed(v)) for k, v in dataset.by_page().items()}
        snapshot = {k: list(v) for k, v in by_page.items()}
        p1 = by_page["p1"]

        assert generate_page_summary(p1) == generate_page_summary(p1)
        assert find_consistent_growth(by_page, MetricKey.ENGAGEMENTS, 2) == (
            find_consistent_growth(by_page, MetricKey.ENGAGEMENTS, 2)
        )
        assert by_page == snapshot
