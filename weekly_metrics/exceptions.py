"""Custom exceptions for ingestion and analytics."""

from typing import Any


class IngestionError(Exception):
    """Base exception for ingestion errors."""

    pass


class SchemaLoadError(IngestionError):
    """Failed to load schema configuration."""

    pass


class DataValidationError(IngestionError):
    """Row validation failed against the Pydantic model."""

    def __init__(self, errors: list[dict[str, Any]], row_count: int):
        self.errors = errors
        self.row_count = row_count
        super().__init__(
            f"Validation failed for {len(errors)} of {row_count} rows. "
            f"First error: {errors[0] if errors else 'N/A'}"
        )


class ColumnMappingError(IngestionError):
    """Required column not found in source data."""

    def __init__(self, missing_columns: list[str], available_columns: list[str]):
        self.missing_columns = missing_columns
        self.available_columns = available_columns
        super().__init__(
            f"Missing required columns: {missing_columns}. "
            f"Available: {available_columns[:10]}..."
        )


class EmptyDatasetError(IngestionError):
    """Source file or dataset holds no rows to work with."""

    pass


class DuplicateRecordError(IngestionError):
    """A record for the same (period, page) pair already exists."""

    def __init__(self, unique_id: str):
        self.unique_id = unique_id
        super().__init__(f"Duplicate weekly record: {unique_id}")


class AnalyticsError(Exception):
    """Base exception for analytics errors."""

    pass


class UnknownMetricError(AnalyticsError, ValueError):
    """Metric key is not in the classification registry."""

    def __init__(self, metric: Any, allowed: list[str] | None = None):
        self.metric = metric
        self.allowed = allowed or []
        message = f"Unknown metric: {metric}"
        if self.allowed:
            message += f". Allowed: {self.allowed}"
        super().__init__(message)


class InvalidAggregationMethodError(AnalyticsError):
    """Aggregation method does not match the metric's registry policy."""

    def __init__(self, metric: str, attempted: str, expected: str, message: str):
        self.metric = metric
        self.attempted = attempted
        self.expected = expected
        super().__init__(message)
