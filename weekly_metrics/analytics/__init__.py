"""Analytics module for weekly page metrics."""

from .aggregation import (
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
from .insights import Insight, InsightEngine, InsightThresholds, Severity
from .models import (
    BestWorst,
    DatasetSummary,
    EngagementShare,
    GroupMetrics,
    GrowthStreak,
    MetricProfile,
    MetricStatistics,
    MonthAggregate,
    PageAggregate,
    PageSummary,
    PageTimeseries,
    PeriodComparison,
    PivotRow,
    PivotTable,
    QuarterAggregate,
    RankedPage,
    ReachComparison,
    ReachDisplay,
    ReachRange,
    ReachTrend,
    TrendSummary,
    WeekAggregate,
    WeekComparisonEntry,
    WeekTrend,
)
from .reach import (
    analyze_reach_trend,
    average_reach,
    average_reach_from_records,
    can_sum_reach,
    compare_reach_between_weeks,
    detect_incorrect_reach_sum,
    export_reach_data,
    format_reach_for_display,
    group_reach_by_month,
    reach_range,
    validate_reach_operation,
)
from .registry import (
    METRIC_DEFINITIONS,
    AggregationCheck,
    AggregationMethod,
    FormatType,
    MetricCategory,
    MetricDefinition,
    MetricKey,
    get_definition,
    metric_options,
    metrics_by_category,
    require_aggregation_method,
    validate_aggregation_method,
)
from .weekly import (
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

__all__ = [
    "METRIC_DEFINITIONS",
    "AggregationCheck",
    "AggregationMethod",
    "BestWorst",
    "DatasetSummary",
    "EngagementShare",
    "FormatType",
    "GroupMetrics",
    "GrowthStreak",
    "Insight",
    "InsightEngine",
    "InsightThresholds",
    "MetricCategory",
    "MetricDefinition",
    "MetricKey",
    "MetricProfile",
    "MetricStatistics",
    "MonthAggregate",
    "PageAggregate",
    "PageSummary",
    "PageTimeseries",
    "PeriodComparison",
    "PivotRow",
    "PivotTable",
    "QuarterAggregate",
    "RankedPage",
    "ReachComparison",
    "ReachDisplay",
    "ReachRange",
    "ReachTrend",
    "Severity",
    "TrendSummary",
    "WeekAggregate",
    "WeekComparisonEntry",
    "WeekTrend",
    "aggregate_by_month",
    "aggregate_by_page",
    "aggregate_by_quarter",
    "aggregate_by_week",
    "aggregate_for_week_comparison",
    "aggregate_metric",
    "aggregate_page_timeseries",
    "analyze_reach_trend",
    "average_reach",
    "average_reach_from_records",
    "average_trend",
    "best_and_worst_week",
    "can_sum_reach",
    "combine_values",
    "compare_periods",
    "compare_reach_between_weeks",
    "create_pivot_table",
    "create_summary",
    "detect_incorrect_reach_sum",
    "engagement_distribution",
    "export_reach_data",
    "find_consistent_growth",
    "format_reach_for_display",
    "generate_page_summary",
    "get_definition",
    "group_reach_by_month",
    "metric_options",
    "metric_statistics",
    "metrics_by_category",
    "rank_pages_by_metric",
    "reach_range",
    "require_aggregation_method",
    "sum_engagements",
    "total_reach",
    "validate_aggregation_method",
    "validate_reach_operation",
    "volatility",
    "week_over_week_change",
    "week_to_week_trend",
]
