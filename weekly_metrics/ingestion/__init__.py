from .cleaner import apply_cleaning
from .enricher import enrich
from .loader import (
    IngestionResult,
    IngestionStats,
    WeeklyIngestionPipeline,
    export_to_csv,
)
from .periods import (
    extract_week_from_filename,
    find_missing_weeks,
    group_periods_by_month,
    group_periods_by_year,
    is_valid_week,
    is_valid_year,
    standard_filename,
    validate_date_format,
    validate_date_range,
    validate_filename,
    validate_period_sequence,
)

__all__ = [
    "IngestionResult",
    "IngestionStats",
    "WeeklyIngestionPipeline",
    "apply_cleaning",
    "enrich",
    "export_to_csv",
    "extract_week_from_filename",
    "find_missing_weeks",
    "group_periods_by_month",
    "group_periods_by_year",
    "is_valid_week",
    "is_valid_year",
    "standard_filename",
    "validate_date_format",
    "validate_date_range",
    "validate_filename",
    "validate_period_sequence",
]
