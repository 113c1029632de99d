from .csv_row import WeeklyCsvRow
from .trend_report import TrendReport
from .weekly_record import (
    CSV_COLUMNS,
    Dataset,
    Metrics,
    Page,
    WeekPeriod,
    WeeklyRecord,
)

__all__ = [
    "CSV_COLUMNS",
    "Dataset",
    "Metrics",
    "Page",
    "TrendReport",
    "WeekPeriod",
    "WeeklyCsvRow",
    "WeeklyRecord",
]
