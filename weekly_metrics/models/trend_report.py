"""TrendReport - consolidated weekly analytics output."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class TrendReport:
    """Consolidated weekly page analytics.

    All data is pre-computed and JSON-serializable. Reach figures are weekly
    averages throughout; no field holds reach summed across weeks.
    """

    # Metadata
    generated_at: datetime
    date_range: tuple[str, str]  # first week start, last week end (ISO)
    total_rows: int
    metric: str  # metric used for rankings, growth and the pivot

    # Top-line aggregates
    total_weeks: int
    total_pages: int
    total_engagements: int
    average_reach: int

    # Per page
    page_summaries: list[dict[str, Any]]
    reach_trends: list[dict[str, Any]]

    # Temporal
    weekly: list[dict[str, Any]]
    monthly: list[dict[str, Any]]

    # Latest week
    latest_period: str | None
    latest_ranking: list[dict[str, Any]]
    engagement_distribution: list[dict[str, Any]]

    # Growth and layout
    consistent_growth: list[dict[str, Any]]
    pivot: dict[str, Any]

    # Rule output
    insights: list[dict[str, Any]]
    reach_warnings: list[str]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "meta": {
                "generated_at": self.generated_at.isoformat(),
                "date_range": {
                    "start": self.date_range[0],
                    "end": self.date_range[1],
                },
                "total_rows": self.total_rows,
                "metric": self.metric,
            },
            "aggregates": {
                "total_weeks": self.total_weeks,
                "total_pages": self.total_pages,
                "total_engagements": self.total_engagements,
                "average_reach": self.average_reach,
                "reach_aggregation": "average",
            },
            "pages": {
                "summaries": self.page_summaries,
                "reach_trends": self.reach_trends,
            },
            "temporal": {
                "weekly": self.weekly,
                "monthly": self.monthly,
            },
            "latest_week": {
                "period": self.latest_period,
                "ranking": self.latest_ranking,
                "engagement_distribution": self.engagement_distribution,
            },
            "consistent_growth": self.consistent_growth,
            "pivot": self.pivot,
            "insights": self.insights,
            "warnings": self.reach_warnings,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str, ensure_ascii=False)

    def get_executive_summary(self) -> dict[str, Any]:
        """Get condensed summary for executive overview.

        Returns key metrics only, suitable for report headers.
        """
        top_page = self.latest_ranking[0] if self.latest_ranking else None
        return {
            "date_range": f"{self.date_range[0]} to {self.date_range[1]}",
            "total_weeks": self.total_weeks,
            "total_pages": self.total_pages,
            "total_engagements": self.total_engagements,
            "average_reach": self.average_reach,
            "latest_period": self.latest_period,
            "top_page": top_page,
            "growing_pages": len(self.consistent_growth),
            "insight_count": len(self.insights),
            "critical_insights": sum(
                1 for i in self.insights if i.get("severity") == "red"
            ),
        }
