"""Aggregation of weekly records by page, week, month and quarter.

Every cross-week combination goes through `combine_values`, which checks the
requested method against the metric registry before dispatching. Engagements
are summed; reach is averaged (see `reach.average_reach`) and never summed.
"""

from collections.abc import Callable, Sequence

from ..exceptions import InvalidAggregationMethodError
from ..models.weekly_record import WeeklyRecord
from .models import (
    DatasetSummary,
    EngagementShare,
    GroupMetrics,
    MonthAggregate,
    PageAggregate,
    PageTimeseries,
    PivotRow,
    PivotTable,
    QuarterAggregate,
    SummaryMetrics,
    TimeseriesPoint,
    WeekAggregate,
    WeekComparisonEntry,
)
from .reach import average_reach
from .registry import (
    AggregationMethod,
    MetricKey,
    get_definition,
    require_aggregation_method,
    resolve_numeric_metric,
)
from .stats import percent_one_decimal

_COMBINERS: dict[AggregationMethod, Callable[[Sequence[int]], int]] = {
    AggregationMethod.SUM: sum,
    AggregationMethod.AVERAGE: average_reach,
}


def combine_values(
    values: Sequence[int],
    metric: MetricKey | str,
    method: AggregationMethod | str | None = None,
) -> int:
    """Combine one metric's values across weeks using its registry policy.

    When `method` is given it must match the registry, otherwise
    InvalidAggregationMethodError is raised. Metadata metrics cannot be
    combined at all.
    """
    if method is None:
        definition = get_definition(metric)
    else:
        definition = require_aggregation_method(metric, method)

    combiner = _COMBINERS.get(definition.aggregation_method)
    if combiner is None:
        raise InvalidAggregationMethodError(
            metric=definition.key.value,
            attempted=definition.aggregation_method.value,
            expected=definition.aggregation_method.value,
            message=f"{definition.display_name} cannot be combined across weeks.",
        )
    return combiner(values)


def aggregate_metric(
    records: Sequence[WeeklyRecord],
    metric: MetricKey | str,
    method: AggregationMethod | str | None = None,
) -> int:
    key = resolve_numeric_metric(metric)
    return combine_values([r.metrics.value(key.value) for r in records], key, method)


def _group_metrics(records: Sequence[WeeklyRecord]) -> GroupMetrics:
    return GroupMetrics(
        total_engagements=aggregate_metric(
            records, MetricKey.ENGAGEMENTS, AggregationMethod.SUM
        ),
        average_reach=aggregate_metric(
            records, MetricKey.REACH, AggregationMethod.AVERAGE
        ),
        count=len(records),
    )


def _group_by(
    records: Sequence[WeeklyRecord], key: Callable[[WeeklyRecord], str]
) -> dict[str, list[WeeklyRecord]]:
    """Partition records by key, first-seen key order, input order within."""
    groups: dict[str, list[WeeklyRecord]] = {}
    for record in records:
        groups.setdefault(key(record), []).append(record)
    return groups


def month_key(record: WeeklyRecord) -> str:
    """E.g. "2025_10"."""
    return f"{record.period.year}_{record.period.month:02d}"


def quarter_key(record: WeeklyRecord) -> str:
    """E.g. "2025_Q4"."""
    return f"{record.period.year}_Q{record.period.quarter}"


# =============================================================================
# GROUPINGS
# =============================================================================


def aggregate_by_page(records: Sequence[WeeklyRecord]) -> dict[str, PageAggregate]:
    return {
        page_id: PageAggregate(
            page=members[0].page, weeks=members, metrics=_group_metrics(members)
        )
        for page_id, members in _group_by(records, lambda r: r.page.page_id).items()
    }


def aggregate_by_week(records: Sequence[WeeklyRecord]) -> dict[str, WeekAggregate]:
    """All pages per period key; average reach is across pages."""
    return {
        period_key: WeekAggregate(
            period=members[0].period, pages=members, metrics=_group_metrics(members)
        )
        for period_key, members in _group_by(
            records, lambda r: r.period.period_key
        ).items()
    }


def aggregate_by_month(records: Sequence[WeeklyRecord]) -> dict[str, MonthAggregate]:
    """Group by the month of each week's start date."""
    return {
        key: MonthAggregate(
            year=members[0].period.year,
            month=members[0].period.month,
            month_name=members[0].period.month_name,
            weeks=members,
            metrics=_group_metrics(members),
        )
        for key, members in _group_by(records, month_key).items()
    }


def aggregate_by_quarter(
    records: Sequence[WeeklyRecord],
) -> dict[str, QuarterAggregate]:
    return {
        key: QuarterAggregate(
            year=members[0].period.year,
            quarter=members[0].period.quarter,
            weeks=members,
            metrics=_group_metrics(members),
        )
        for key, members in _group_by(records, quarter_key).items()
    }


# =============================================================================
# TOTALS
# =============================================================================


def sum_engagements(records: Sequence[WeeklyRecord]) -> int:
    return aggregate_metric(records, MetricKey.ENGAGEMENTS, AggregationMethod.SUM)


def total_reach(records: Sequence[WeeklyRecord]) -> int:
    """Average weekly reach, which is what "total reach" means to users."""
    return aggregate_metric(records, MetricKey.REACH, AggregationMethod.AVERAGE)


def create_summary(records: Sequence[WeeklyRecord]) -> DatasetSummary:
    """Distinct weeks and pages, record count, and dataset-wide metrics."""
    return DatasetSummary(
        total_weeks=len({r.period.period_key for r in records}),
        total_pages=len({r.page.page_id for r in records}),
        total_data_points=len(records),
        metrics=SummaryMetrics(
            total_engagements=sum_engagements(records),
            average_reach=total_reach(records),
        ),
    )


# =============================================================================
# VIEWS
# =============================================================================


def aggregate_page_timeseries(
    records: Sequence[WeeklyRecord],
) -> PageTimeseries | None:
    """Chronological series for one page's records. None for empty input."""
    if not records:
        return None

    ordered = sorted(records, key=lambda r: r.period.start_date)
    return PageTimeseries(
        page=ordered[0].page,
        timeseries=[
            TimeseriesPoint(
                period=r.period,
                reach=r.metrics.reach,
                engagements=r.metrics.engagements,
                status=r.status,
            )
            for r in ordered
        ],
        summary=_group_metrics(ordered),
    )


def aggregate_for_week_comparison(
    records: Sequence[WeeklyRecord], year: int, week: int
) -> list[WeekComparisonEntry]:
    """Pages for one period, highest engagements first."""
    in_week = [r for r in records if r.period.year == year and r.period.week == week]
    ordered = sorted(in_week, key=lambda r: r.metrics.engagements, reverse=True)
    return [
        WeekComparisonEntry(
            page=r.page,
            reach=r.metrics.reach,
            engagements=r.metrics.engagements,
            status=r.status,
        )
        for r in ordered
    ]


def engagement_distribution(
    records: Sequence[WeeklyRecord],
) -> list[EngagementShare]:
    """Each record's share of total engagements (one decimal).

    With zero total engagements every share is 0, in input order.
    """
    total = sum_engagements(records)
    if total == 0:
        return [EngagementShare(page=r.page, engagements=0, percentage=0.0) for r in records]

    shares = [
        EngagementShare(
            page=r.page,
            engagements=r.metrics.engagements,
            percentage=percent_one_decimal(r.metrics.engagements, total),
        )
        for r in records
    ]
    return sorted(shares, key=lambda s: s.engagements, reverse=True)


def create_pivot_table(
    records: Sequence[WeeklyRecord], metric: MetricKey | str = MetricKey.ENGAGEMENTS
) -> PivotTable:
    """Pages x period keys -> metric value.

    `weeks` is a plain string sort of period keys, so "2025_10" sorts before
    "2025_9"; order columns by period yourself when that matters.
    """
    key = resolve_numeric_metric(metric)
    pages: dict[str, dict[str, int]] = {}
    page_objects = {}

    for record in records:
        page_id = record.page.page_id
        page_objects.setdefault(page_id, record.page)
        pages.setdefault(page_id, {})[record.period.period_key] = (
            record.metrics.value(key.value)
        )

    return PivotTable(
        pages=list(pages),
        weeks=sorted({r.period.period_key for r in records}),
        data={
            page_id: PivotRow(page=page_objects[page_id], weeks=weeks)
            for page_id, weeks in pages.items()
        },
        metric=key.value,
    )
