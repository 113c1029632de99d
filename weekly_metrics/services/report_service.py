"""Report service - orchestrates data ingestion and analytics."""

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any

from ..analytics import (
    DatasetSummary,
    EngagementShare,
    GrowthStreak,
    Insight,
    InsightEngine,
    InsightThresholds,
    MetricKey,
    MonthAggregate,
    PageSummary,
    PivotTable,
    RankedPage,
    ReachTrend,
    WeekAggregate,
    aggregate_by_month,
    aggregate_by_week,
    analyze_reach_trend,
    create_pivot_table,
    create_summary,
    detect_incorrect_reach_sum,
    engagement_distribution,
    find_consistent_growth,
    generate_page_summary,
    rank_pages_by_metric,
)
from ..analytics.registry import resolve_numeric_metric
from ..config import AnalyticsSettings, load_analytics_settings, load_schema_registry
from ..exceptions import EmptyDatasetError
from ..ingestion import IngestionResult, WeeklyIngestionPipeline
from ..models.trend_report import TrendReport
from ..models.weekly_record import Dataset

logger = logging.getLogger(__name__)


@dataclass
class ReportOutput:
    """Consolidated output from report generation."""

    metric: MetricKey
    summary: DatasetSummary
    page_summaries: list[PageSummary]
    reach_trends: dict[str, ReachTrend]
    weekly: list[WeekAggregate]
    monthly: list[MonthAggregate]
    latest_ranking: list[RankedPage]
    latest_distribution: list[EngagementShare]
    consistent_growth: list[GrowthStreak]
    pivot: PivotTable
    insights: list[Insight] = field(default_factory=list)
    reach_warnings: list[str] = field(default_factory=list)
    trend_report: TrendReport | None = None


class TrendReportService:
    """Service for generating trend reports from weekly page exports.

    Orchestrates:
    1. Ingestion of one or more weekly CSV files
    2. Running all analytics over the merged dataset
    3. Rule-based insights
    4. Returning consolidated output

    Usage:
        service = TrendReportService()
        loaded = service.load([Path("week_41.csv"), Path("week_42.csv")])
        output = service.generate_report(loaded.dataset)
    """

    def __init__(
        self,
        schema_path: Path | None = None,
        settings: AnalyticsSettings | None = None,
        thresholds: InsightThresholds | None = None,
    ):
        """Initialize service with schema configuration.

        Args:
            schema_path: Path to schema_registry.yaml. Defaults to bundled config.
            settings: Analytics thresholds. Defaults to the registry's values.
            thresholds: Insight rule thresholds. Defaults to the registry's values.
        """
        self.schema_path = schema_path
        self.pipeline = WeeklyIngestionPipeline(schema_path)
        self.settings = settings or load_analytics_settings(schema_path)
        self.thresholds = thresholds or self._load_thresholds()

    def _load_thresholds(self) -> InsightThresholds:
        analytics = load_schema_registry(self.schema_path).get("analytics") or {}
        section = analytics.get("insights") or {}
        known = {f.name for f in fields(InsightThresholds)}
        values = {k: v for k, v in section.items() if k in known}
        values.setdefault(
            "reach_sum_warning_threshold", self.settings.reach_sum_warning_threshold
        )
        values.setdefault(
            "consistent_growth_min_weeks", self.settings.consistent_growth_min_weeks
        )
        return InsightThresholds(**values)

    def load(self, paths: Iterable[Path | str], strict: bool = False) -> IngestionResult:
        """Ingest weekly files into one dataset."""
        return self.pipeline.ingest_many(paths, strict=strict)

    def generate_report(
        self,
        dataset: Dataset,
        metric: MetricKey | str = MetricKey.ENGAGEMENTS,
    ) -> ReportOutput:
        """Generate the full trend report.

        Args:
            dataset: Records to analyse
            metric: Metric for rankings, growth detection and the pivot table

        Returns:
            ReportOutput with all aggregations, insights and the TrendReport

        Raises:
            EmptyDatasetError: If the dataset has no records
            UnknownMetricError: If metric is not a numeric metric
        """
        key = resolve_numeric_metric(metric)
        if dataset.is_empty():
            raise EmptyDatasetError("Cannot build a report from an empty dataset")

        records = dataset.records
        by_page = dataset.by_page()
        summary = create_summary(records)

        page_summaries = [generate_page_summary(rs) for rs in by_page.values()]
        reach_trends = {
            page_id: analyze_reach_trend(rs, self.settings.trend_threshold_pct)
            for page_id, rs in by_page.items()
        }

        weekly = sorted(
            aggregate_by_week(records).values(), key=lambda w: w.period.start_date
        )
        monthly = sorted(
            aggregate_by_month(records).values(), key=lambda m: (m.year, m.month)
        )

        latest = dataset.unique_periods()[-1]
        latest_records = dataset.for_period(latest.year, latest.week)
        engine = InsightEngine(records, self.thresholds)

        reach_warnings: list[str] = []
        warning = detect_incorrect_reach_sum(
            summary.metrics.average_reach,
            summary.total_weeks,
            self.settings.reach_sum_warning_threshold,
        )
        if warning:
            reach_warnings.append(warning)

        output = ReportOutput(
            metric=key,
            summary=summary,
            page_summaries=[s for s in page_summaries if s is not None],
            reach_trends={k: v for k, v in reach_trends.items() if v is not None},
            weekly=weekly,
            monthly=monthly,
            latest_ranking=rank_pages_by_metric(latest_records, key),
            latest_distribution=engagement_distribution(latest_records),
            consistent_growth=find_consistent_growth(
                by_page, key, self.settings.consistent_growth_min_weeks
            ),
            pivot=create_pivot_table(records, key),
            insights=engine.generate_all_insights(),
            reach_warnings=reach_warnings,
        )
        output.trend_report = self._build_trend_report(
            dataset, output, engine.to_dict(output.insights)
        )

        logger.info(
            "Built trend report: %d pages, %d weeks, %d insights",
            summary.total_pages,
            summary.total_weeks,
            len(output.insights),
        )
        return output

    def _build_trend_report(
        self,
        dataset: Dataset,
        output: ReportOutput,
        insights: list[dict[str, Any]],
    ) -> TrendReport:
        periods = dataset.unique_periods()
        first = min(periods, key=lambda p: p.start_date)
        last = max(periods, key=lambda p: p.end_date)

        return TrendReport(
            generated_at=datetime.now(),
            date_range=(first.start_date, last.end_date),
            total_rows=len(dataset),
            metric=output.metric.value,
            total_weeks=output.summary.total_weeks,
            total_pages=output.summary.total_pages,
            total_engagements=output.summary.metrics.total_engagements,
            average_reach=output.summary.metrics.average_reach,
            page_summaries=[asdict(s) for s in output.page_summaries],
            reach_trends=[
                {"page_id": page_id, **asdict(trend)}
                for page_id, trend in output.reach_trends.items()
            ],
            weekly=[
                {
                    "period": w.period.period_key,
                    "label": w.period.display_string,
                    "page_count": w.metrics.count,
                    "total_engagements": w.metrics.total_engagements,
                    "average_reach": w.metrics.average_reach,
                }
                for w in output.weekly
            ],
            monthly=[
                {
                    "month": f"{m.year}_{m.month:02d}",
                    "label": f"{m.month_name} {m.year}",
                    "record_count": m.metrics.count,
                    "total_engagements": m.metrics.total_engagements,
                    "average_reach": m.metrics.average_reach,
                }
                for m in output.monthly
            ],
            latest_period=periods[-1].period_key,
            latest_ranking=[asdict(r) for r in output.latest_ranking],
            engagement_distribution=[asdict(s) for s in output.latest_distribution],
            consistent_growth=[asdict(g) for g in output.consistent_growth],
            pivot={
                "metric": output.pivot.metric,
                "weeks": output.pivot.weeks,
                "rows": [
                    {
                        "page_id": page_id,
                        "page_name": row.page.page_name,
                        "weeks": row.weeks,
                    }
                    for page_id, row in output.pivot.data.items()
                ],
            },
            insights=insights,
            reach_warnings=output.reach_warnings,
        )

    def generate_summary_dict(self, output: ReportOutput) -> dict[str, Any]:
        """Convert ReportOutput to a condensed JSON-serializable dictionary.

        Args:
            output: ReportOutput from generate_report()

        Returns:
            Dictionary suitable for JSON serialization
        """
        return {
            "metric": output.metric.value,
            "summary": {
                "total_weeks": output.summary.total_weeks,
                "total_pages": output.summary.total_pages,
                "total_data_points": output.summary.total_data_points,
                "total_engagements": output.summary.metrics.total_engagements,
                "average_reach": output.summary.metrics.average_reach,
            },
            "pages": [
                {
                    "page_id": s.page.page_id,
                    "page_name": s.page.page_name,
                    "weeks": s.total_weeks,
                    "average_reach": s.reach.statistics.average,
                    "total_engagements": s.engagements.statistics.total,
                    "reach_volatility": s.reach.volatility,
                    "best_reach_week": (
                        s.reach.best_week.short_string if s.reach.best_week else None
                    ),
                }
                for s in output.page_summaries
            ],
            "latest_ranking": [
                {
                    "rank": r.rank,
                    "page_id": r.page.page_id,
                    "page_name": r.page.page_name,
                    "value": r.value,
                    "status": r.status,
                }
                for r in output.latest_ranking
            ],
            "consistent_growth": [
                {
                    "page_id": g.page.page_id,
                    "page_name": g.page.page_name,
                    "consecutive_weeks": g.consecutive_weeks,
                }
                for g in output.consistent_growth
            ],
            "insights": [
                {
                    "rule_id": i.rule_id,
                    "description": i.description,
                    "severity": i.severity.value,
                    "recommendation": i.recommendation,
                    "metrics": i.metrics,
                }
                for i in output.insights
            ],
            "warnings": output.reach_warnings,
        }
