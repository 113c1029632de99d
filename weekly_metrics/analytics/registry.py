"""Metric classification registry.

Single source of truth for how each metric may be combined across more than
one week. Aggregators call `require_aggregation_method` before combining
values, so a metric's policy lives here and nowhere else.

    reach        non_summable  average   (unique people; never summed)
    engagements  summable      sum
    status       metadata      none
    comment      metadata      none
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Final

from ..exceptions import InvalidAggregationMethodError, UnknownMetricError


class MetricKey(str, Enum):
    """Metric identifiers."""

    REACH = "reach"
    ENGAGEMENTS = "engagements"
    STATUS = "status"
    COMMENT = "comment"


class MetricCategory(str, Enum):
    SUMMABLE = "summable"
    NON_SUMMABLE = "non_summable"
    METADATA = "metadata"


class AggregationMethod(str, Enum):
    SUM = "sum"
    AVERAGE = "average"
    NONE = "none"


class FormatType(str, Enum):
    NUMBER = "number"
    STRING = "string"


# Category each aggregation method belongs to
_METHOD_CATEGORY: Final[dict[AggregationMethod, MetricCategory]] = {
    AggregationMethod.SUM: MetricCategory.SUMMABLE,
    AggregationMethod.AVERAGE: MetricCategory.NON_SUMMABLE,
    AggregationMethod.NONE: MetricCategory.METADATA,
}


@dataclass(frozen=True)
class MetricDefinition:
    """Registry entry describing one metric's aggregation policy."""

    key: MetricKey
    display_name: str
    category: MetricCategory
    description: str
    can_sum: bool
    aggregation_method: AggregationMethod
    unit: str | None
    format_type: FormatType
    warning_message: str | None = None

    def __post_init__(self) -> None:
        if self.can_sum != (self.aggregation_method is AggregationMethod.SUM):
            raise ValueError(
                f"{self.key.value}: can_sum={self.can_sum} contradicts "
                f"aggregation_method={self.aggregation_method.value}"
            )
        if _METHOD_CATEGORY[self.aggregation_method] is not self.category:
            raise ValueError(
                f"{self.key.value}: category={self.category.value} contradicts "
                f"aggregation_method={self.aggregation_method.value}"
            )


@dataclass(frozen=True)
class AggregationCheck:
    """Outcome of validating an attempted aggregation method."""

    is_valid: bool
    error_message: str | None = None
    expected_method: AggregationMethod | None = None


METRIC_DEFINITIONS: Final[dict[MetricKey, MetricDefinition]] = {
    MetricKey.REACH: MetricDefinition(
        key=MetricKey.REACH,
        display_name="Reach",
        category=MetricCategory.NON_SUMMABLE,
        description="Number of unique people reached",
        can_sum=False,
        aggregation_method=AggregationMethod.AVERAGE,
        unit="people",
        format_type=FormatType.NUMBER,
        warning_message="Reach can NEVER be summed across weeks. Use the average.",
    ),
    MetricKey.ENGAGEMENTS: MetricDefinition(
        key=MetricKey.ENGAGEMENTS,
        display_name="Engagements",
        category=MetricCategory.SUMMABLE,
        description="Total number of interactions",
        can_sum=True,
        aggregation_method=AggregationMethod.SUM,
        unit="interactions",
        format_type=FormatType.NUMBER,
    ),
    MetricKey.STATUS: MetricDefinition(
        key=MetricKey.STATUS,
        display_name="Status",
        category=MetricCategory.METADATA,
        description="Page status",
        can_sum=False,
        aggregation_method=AggregationMethod.NONE,
        unit=None,
        format_type=FormatType.STRING,
    ),
    MetricKey.COMMENT: MetricDefinition(
        key=MetricKey.COMMENT,
        display_name="Comment",
        category=MetricCategory.METADATA,
        description="Free-text comments",
        can_sum=False,
        aggregation_method=AggregationMethod.NONE,
        unit=None,
        format_type=FormatType.STRING,
    ),
}

_missing = set(MetricKey) - set(METRIC_DEFINITIONS)
if _missing:
    raise RuntimeError(f"Metrics without a registry entry: {sorted(_missing)}")


def _coerce_key(metric: MetricKey | str) -> MetricKey | None:
    if isinstance(metric, MetricKey):
        return metric
    try:
        return MetricKey(metric)
    except ValueError:
        return None


def get_definition(metric: MetricKey | str) -> MetricDefinition:
    """Look up a metric definition.

    Raises:
        UnknownMetricError: If the key is not registered
    """
    key = _coerce_key(metric)
    if key is None:
        raise UnknownMetricError(metric, [k.value for k in MetricKey])
    return METRIC_DEFINITIONS[key]


def resolve_numeric_metric(metric: MetricKey | str) -> MetricKey:
    """Resolve a metric argument that must name a numeric metric.

    Raises:
        UnknownMetricError: If the key is unknown or not numeric
    """
    key = _coerce_key(metric)
    allowed = numeric_metrics()
    if key not in allowed:
        raise UnknownMetricError(metric, [k.value for k in allowed])
    return key


def can_sum(metric: MetricKey | str) -> bool:
    return get_definition(metric).can_sum


def aggregation_method(metric: MetricKey | str) -> AggregationMethod:
    return get_definition(metric).aggregation_method


def display_name(metric: MetricKey | str) -> str:
    return get_definition(metric).display_name


def description(metric: MetricKey | str) -> str:
    return get_definition(metric).description


def warning_message(metric: MetricKey | str) -> str | None:
    return get_definition(metric).warning_message


def _keys_where(predicate) -> list[MetricKey]:
    return [k for k, d in METRIC_DEFINITIONS.items() if predicate(d)]


def summable_metrics() -> list[MetricKey]:
    return _keys_where(lambda d: d.category is MetricCategory.SUMMABLE)


def non_summable_metrics() -> list[MetricKey]:
    return _keys_where(lambda d: d.category is MetricCategory.NON_SUMMABLE)


def numeric_metrics() -> list[MetricKey]:
    """Metrics holding numbers (summable or not)."""
    return _keys_where(lambda d: d.format_type is FormatType.NUMBER)


def metadata_fields() -> list[MetricKey]:
    return _keys_where(lambda d: d.category is MetricCategory.METADATA)


def metrics_by_category() -> dict[str, list[MetricDefinition]]:
    """Group definitions as {summable, non_summable, metadata}."""
    return {
        "summable": [METRIC_DEFINITIONS[k] for k in summable_metrics()],
        "non_summable": [METRIC_DEFINITIONS[k] for k in non_summable_metrics()],
        "metadata": [METRIC_DEFINITIONS[k] for k in metadata_fields()],
    }


def validate_aggregation_method(
    metric: MetricKey | str, attempted_method: AggregationMethod | str
) -> AggregationCheck:
    """Check an attempted aggregation against the metric's policy.

    Never raises; an unknown metric or a mismatched method comes back as an
    invalid AggregationCheck with a message naming the correct method.
    """
    key = _coerce_key(metric)
    if key is None:
        return AggregationCheck(
            is_valid=False, error_message=f"Unknown metric: {metric}"
        )

    definition = METRIC_DEFINITIONS[key]
    expected = definition.aggregation_method
    attempted = (
        attempted_method.value
        if isinstance(attempted_method, AggregationMethod)
        else str(attempted_method)
    )

    if attempted != expected.value:
        message = (
            f"Invalid aggregation method for {definition.display_name}. "
            f'Use "{expected.value}" instead of "{attempted}".'
        )
        if definition.warning_message:
            message += f" {definition.warning_message}"
        return AggregationCheck(
            is_valid=False, error_message=message, expected_method=expected
        )

    return AggregationCheck(is_valid=True, expected_method=expected)


def require_aggregation_method(
    metric: MetricKey | str, method: AggregationMethod | str
) -> MetricDefinition:
    """Guard used by aggregators before combining values across weeks.

    Raises:
        UnknownMetricError: If the metric is not registered
        InvalidAggregationMethodError: If the method contradicts the registry
    """
    definition = get_definition(metric)
    check = validate_aggregation_method(definition.key, method)
    if not check.is_valid:
        raise InvalidAggregationMethodError(
            metric=definition.key.value,
            attempted=method.value if isinstance(method, AggregationMethod) else str(method),
            expected=definition.aggregation_method.value,
            message=check.error_message or "",
        )
    return definition


def format_metric_value(metric: MetricKey | str, value: Any) -> str:
    """Format a value for display according to the metric's format type."""
    key = _coerce_key(metric)
    if key is None:
        return str(value)

    definition = METRIC_DEFINITIONS[key]
    if definition.format_type is FormatType.NUMBER:
        return f"{value:,}" if isinstance(value, (int, float)) else "0"
    return str(value or "")


def metric_options(include_metadata: bool = False) -> list[dict[str, Any]]:
    """Selectable metrics for a presentation layer.

    Without metadata this is exactly reach and engagements.
    """
    return [
        {
            "key": d.key.value,
            "label": d.display_name,
            "category": d.category.value,
            "can_sum": d.can_sum,
        }
        for d in METRIC_DEFINITIONS.values()
        if include_metadata or d.category is not MetricCategory.METADATA
    ]


def metric_summary(metric: MetricKey | str) -> dict[str, Any] | None:
    """Definition plus derived flags, or None for an unknown metric."""
    key = _coerce_key(metric)
    if key is None:
        return None

    definition = METRIC_DEFINITIONS[key]
    summary = {
        k: v.value if isinstance(v, Enum) else v for k, v in asdict(definition).items()
    }
    summary.update(
        is_summable=definition.can_sum,
        is_numeric=definition.format_type is FormatType.NUMBER,
        has_warning=definition.warning_message is not None,
    )
    return summary


def can_compare_metrics(first: MetricKey | str, second: MetricKey | str) -> bool:
    """Only numeric metrics can be compared with each other."""
    a, b = _coerce_key(first), _coerce_key(second)
    if a is None or b is None:
        return False
    return (
        METRIC_DEFINITIONS[a].format_type is FormatType.NUMBER
        and METRIC_DEFINITIONS[b].format_type is FormatType.NUMBER
    )


def metric_tooltip(metric: MetricKey | str) -> str:
    key = _coerce_key(metric)
    if key is None:
        return ""

    definition = METRIC_DEFINITIONS[key]
    tooltip = definition.description
    if definition.warning_message:
        tooltip += f"\n\n⚠️ {definition.warning_message}"
    if definition.unit:
        tooltip += f"\n\nUnit: {definition.unit}"
    tooltip += f"\nAggregation: {definition.aggregation_method.value}"
    return tooltip
