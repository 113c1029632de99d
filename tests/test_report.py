"""Tests for the trend report service and TrendReport output."""

import json

import pytest
from conftest import csv_line

from weekly_metrics.analytics.registry import MetricKey
from weekly_metrics.exceptions import EmptyDatasetError, UnknownMetricError
from weekly_metrics.models.weekly_record import Dataset
from weekly_metrics.services import TrendReportService


@pytest.fixture
def service() -> TrendReportService:
    return TrendReportService()


class TestGenerateReport:
    """Tests for TrendReportService.generate_report()."""

    def test_summary(self, service, dataset) -> None:
        output = service.generate_report(dataset)
        assert output.metric is MetricKey.ENGAGEMENTS
        assert output.summary.total_weeks == 3
        assert output.summary.metrics.total_engagements == 1790
        assert output.summary.metrics.average_reach == 11_111

    def test_latest_week_ranking(self, service, dataset) -> None:
        output = service.generate_report(dataset)
        assert [r.page.page_id for r in output.latest_ranking] == ["p1", "p2", "p3"]
        assert [s.percentage for s in output.latest_distribution] == [57.1, 42.9, 0.0]

    def test_ranking_by_reach(self, service, dataset) -> None:
        output = service.generate_report(dataset, metric="reach")
        assert output.latest_ranking[0].value == 15_000
        assert output.pivot.metric == "reach"

    def test_weekly_and_monthly_order(self, service, dataset) -> None:
        output = service.generate_report(dataset)
        assert [w.period.week for w in output.weekly] == [40, 41, 42]
        assert [m.month for m in output.monthly] == [9, 10]

    def test_insights_included(self, service, dataset) -> None:
        output = service.generate_report(dataset)
        assert {i.rule_id for i in output.insights} >= {"reach_drop", "consistent_growth"}
        assert output.reach_warnings == []

    def test_empty_dataset(self, service) -> None:
        with pytest.raises(EmptyDatasetError):
            service.generate_report(Dataset())

    def test_metadata_metric_rejected(self, service, dataset) -> None:
        with pytest.raises(UnknownMetricError):
            service.generate_report(dataset, metric="status")


class TestTrendReport:
    """Tests for the TrendReport built by the service."""

    def test_to_json_round_trip(self, service, dataset) -> None:
        report = service.generate_report(dataset).trend_report
        payload = json.loads(report.to_json())
        assert payload["meta"]["date_range"] == {
            "start": "2025-09-29",
            "end": "2025-10-19",
        }
        assert payload["aggregates"]["reach_aggregation"] == "average"
        assert payload["latest_week"]["period"] == "2025_42"
        assert len(payload["pages"]["summaries"]) == 3

    def test_pivot_rows(self, service, dataset) -> None:
        report = service.generate_report(dataset).trend_report
        rows = {r["page_id"]: r["weeks"] for r in report.pivot["rows"]}
        assert rows["p1"] == {"2025_40": 100, "2025_41": 200, "2025_42": 400}

    def test_executive_summary(self, service, dataset) -> None:
        summary = service.generate_report(dataset).trend_report.get_executive_summary()
        assert summary["total_pages"] == 3
        assert summary["average_reach"] == 11_111
        assert summary["top_page"]["page"]["page_id"] == "p1"
        assert summary["growing_pages"] == 1
        assert summary["critical_insights"] == 2


class TestServiceEndToEnd:
    def test_load_and_summarize(self, service, write_csv) -> None:
        paths = [
            write_csv("week_41.csv", [csv_line("p1", 41, 100_000, 500)]),
            write_csv("week_42.csv", [csv_line("p1", 42, 120_000, 700)]),
        ]
        loaded = service.load(paths)
        output = service.generate_report(loaded.dataset)
        summary = service.generate_summary_dict(output)

        assert summary["summary"]["average_reach"] == 110_000
        assert summary["summary"]["total_engagements"] == 1200
        assert summary["pages"][0]["best_reach_week"] == "W42 2025"
        json.dumps(summary)
