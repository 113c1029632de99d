"""Rule-based insight generation for weekly page metrics."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..config import DEFAULT_REACH_SUM_WARNING_THRESHOLD
from ..models.weekly_record import WeeklyRecord
from .aggregation import aggregate_by_page, engagement_distribution
from .reach import detect_incorrect_reach_sum
from .registry import MetricKey
from .weekly import find_consistent_growth, week_to_week_trend

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Insight severity levels."""

    GREEN = "green"  # Good / On track
    AMBER = "amber"  # Warning / Needs attention
    RED = "red"  # Critical / Action required


@dataclass(frozen=True)
class Insight:
    """Single insight with description, severity, and recommendation."""

    rule_id: str
    description: str
    severity: Severity
    recommendation: str
    metrics: dict[str, Any] | None = None


@dataclass
class InsightThresholds:
    """Configurable thresholds for insight rules.

    Percentages are in percent units (50.0 = 50%), matching the
    week-over-week figures they are compared with.
    """

    # Engagement spike: page engagements >= +X% vs previous week
    engagement_spike_pct: float = 50.0

    # Reach drop: page reach <= X% vs previous week
    reach_drop_pct: float = -30.0

    # Concentration: top page >= X% of the latest week's engagements
    engagement_concentration_pct: float = 40.0

    # Consistent growth: at least X consecutive weeks of growth
    consistent_growth_min_weeks: int = 2

    # Aggregated reach above this over >1 week looks like a sum
    reach_sum_warning_threshold: int = DEFAULT_REACH_SUM_WARNING_THRESHOLD


class InsightEngine:
    """Rule-based insight generator.

    Usage:
        engine = InsightEngine(dataset.records, thresholds=InsightThresholds())
        insights = engine.generate_all_insights()
    """

    def __init__(
        self,
        records: Sequence[WeeklyRecord],
        thresholds: InsightThresholds | None = None,
    ):
        self.records = tuple(records)
        self.thresholds = thresholds or InsightThresholds()

    def generate_all_insights(self) -> list[Insight]:
        """Run all insight rules and return detected insights."""
        insights: list[Insight] = []

        if not self.records:
            return insights

        insights.extend(self._check_engagement_spike())
        insights.extend(self._check_reach_drop())
        insights.extend(self._check_consistent_growth())
        insights.extend(self._check_inactive_pages())
        insights.extend(self._check_engagement_concentration())
        insights.extend(self._check_reach_aggregates())

        logger.debug("Generated %d insights from %d records", len(insights), len(self.records))
        return insights

    def _by_page(self) -> dict[str, list[WeeklyRecord]]:
        grouped: dict[str, list[WeeklyRecord]] = {}
        for record in self.records:
            grouped.setdefault(record.page.page_id, []).append(record)
        return grouped

    def _latest_week(self) -> list[WeeklyRecord]:
        latest = max(self.records, key=lambda r: r.period.start_date)
        return [r for r in self.records if r.period.period_key == latest.period.period_key]

    def _check_engagement_spike(self) -> list[Insight]:
        """Check for weeks where a page's engagements jumped vs the week before."""
        insights: list[Insight] = []

        for page_records in self._by_page().values():
            page = page_records[0].page
            for trend in week_to_week_trend(page_records)[1:]:
                if trend.engagements_change >= self.thresholds.engagement_spike_pct:
                    insights.append(
                        Insight(
                            rule_id="engagement_spike",
                            description=(
                                f"{page.page_name} engagements rose "
                                f"{trend.engagements_change:.1f}% in "
                                f"{trend.period.short_string}"
                            ),
                            severity=Severity.GREEN,
                            recommendation=(
                                "Identify the posts behind the spike and reuse "
                                "their format, topic or timing."
                            ),
                            metrics={
                                "page_id": page.page_id,
                                "period": trend.period.period_key,
                                "engagements": trend.engagements,
                                "change_pct": trend.engagements_change,
                            },
                        )
                    )

        return insights

    def _check_reach_drop(self) -> list[Insight]:
        """Check for weeks where a page's reach fell sharply."""
        insights: list[Insight] = []

        for page_records in self._by_page().values():
            page = page_records[0].page
            for trend in week_to_week_trend(page_records)[1:]:
                if trend.reach_change <= self.thresholds.reach_drop_pct:
                    insights.append(
                        Insight(
                            rule_id="reach_drop",
                            description=(
                                f"{page.page_name} reach fell "
                                f"{abs(trend.reach_change):.1f}% in "
                                f"{trend.period.short_string}"
                            ),
                            severity=Severity.RED,
                            recommendation=(
                                "Check posting frequency and distribution for "
                                "the week. A reach drop with steady engagements "
                                "usually points at fewer or less-promoted posts."
                            ),
                            metrics={
                                "page_id": page.page_id,
                                "period": trend.period.period_key,
                                "reach": trend.reach,
                                "change_pct": trend.reach_change,
                            },
                        )
                    )

        return insights

    def _check_consistent_growth(self) -> list[Insight]:
        """Check for pages with consecutive weeks of engagement growth."""
        streaks = find_consistent_growth(
            self._by_page(),
            MetricKey.ENGAGEMENTS,
            self.thresholds.consistent_growth_min_weeks,
        )
        return [
            Insight(
                rule_id="consistent_growth",
                description=(
                    f"{s.page.page_name} grew engagements for "
                    f"{s.consecutive_weeks} consecutive weeks"
                ),
                severity=Severity.GREEN,
                recommendation=(
                    "Keep the current content plan for this page and use it as "
                    "a reference for slower pages."
                ),
                metrics={
                    "page_id": s.page.page_id,
                    "consecutive_weeks": s.consecutive_weeks,
                    "total_weeks": s.total_weeks,
                },
            )
            for s in streaks
        ]

    def _check_inactive_pages(self) -> list[Insight]:
        """Check for pages without activity in the latest week."""
        return [
            Insight(
                rule_id="inactive_page",
                description=(
                    f"{r.page.page_name} had no activity in "
                    f"{r.period.short_string} (status {r.status})"
                ),
                severity=Severity.AMBER,
                recommendation=(
                    "Confirm whether the page was paused on purpose or whether "
                    "the export is missing data."
                ),
                metrics={
                    "page_id": r.page.page_id,
                    "period": r.period.period_key,
                    "status": r.status,
                },
            )
            for r in self._latest_week()
            if not r.has_activity
        ]

    def _check_engagement_concentration(self) -> list[Insight]:
        """Check if one page dominates the latest week's engagements."""
        latest = self._latest_week()
        if len(latest) < 2:
            return []

        top = engagement_distribution(latest)[0]
        if top.percentage < self.thresholds.engagement_concentration_pct:
            return []

        return [
            Insight(
                rule_id="engagement_concentration",
                description=(
                    f"{top.page.page_name} accounts for {top.percentage:.1f}% of "
                    f"engagements in {latest[0].period.short_string}"
                ),
                severity=Severity.AMBER,
                recommendation=(
                    "Engagement depends heavily on a single page. Consider "
                    "cross-promoting content to the other pages."
                ),
                metrics={
                    "page_id": top.page.page_id,
                    "engagements": top.engagements,
                    "share_pct": top.percentage,
                },
            )
        ]

    def _check_reach_aggregates(self) -> list[Insight]:
        """Flag per-page reach aggregates that look like sums."""
        insights: list[Insight] = []

        for page_id, aggregate in aggregate_by_page(self.records).items():
            warning = detect_incorrect_reach_sum(
                aggregate.metrics.average_reach,
                aggregate.metrics.count,
                self.thresholds.reach_sum_warning_threshold,
            )
            if warning:
                insights.append(
                    Insight(
                        rule_id="suspicious_reach_aggregate",
                        description=warning,
                        severity=Severity.RED,
                        recommendation=(
                            "Verify the source export: reach must be averaged "
                            "across weeks, never summed."
                        ),
                        metrics={
                            "page_id": page_id,
                            "average_reach": aggregate.metrics.average_reach,
                            "week_count": aggregate.metrics.count,
                        },
                    )
                )

        return insights

    def to_dict(self, insights: list[Insight]) -> list[dict[str, Any]]:
        """Convert insights list to JSON-serializable format."""
        return [
            {
                "rule_id": i.rule_id,
                "description": i.description,
                "severity": i.severity.value,
                "recommendation": i.recommendation,
                "metrics": i.metrics,
            }
            for i in insights
        ]
