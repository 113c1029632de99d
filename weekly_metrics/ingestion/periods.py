"""Period helpers: file name parsing and week/date sanity checks."""

import re
from collections.abc import Sequence
from datetime import date
from pathlib import PurePath

from ..models.csv_row import ISO_DATE_PATTERN
from ..models.weekly_record import WeekPeriod

# week_41.csv, week-41.csv, week41.csv, week_41
WEEK_FILENAME_PATTERN = re.compile(r"week[_-]?(\d{1,2})(?:\.csv)?$", re.IGNORECASE)


def is_valid_week(week: object) -> bool:
    return isinstance(week, int) and not isinstance(week, bool) and 1 <= week <= 53


def is_valid_year(year: object) -> bool:
    return isinstance(year, int) and not isinstance(year, bool) and 2000 <= year <= 2100


def extract_week_from_filename(filename: str | PurePath) -> int | None:
    """Week number encoded in a file name, or None.

    Only the final path component is inspected.
    """
    match = WEEK_FILENAME_PATTERN.search(PurePath(filename).name)
    if match is None:
        return None
    week = int(match.group(1))
    return week if is_valid_week(week) else None


def standard_filename(week: int) -> str:
    return f"week_{week}.csv"


def validate_filename(filename: str | PurePath) -> list[str]:
    """Problems with an upload file name; empty when it is acceptable."""
    name = PurePath(filename).name
    problems: list[str] = []

    if not name.lower().endswith(".csv"):
        problems.append(f"Wrong file extension: {name} (expected .csv)")
    if extract_week_from_filename(name) is None:
        problems.append(
            f"Could not read a week number from {name} (expected e.g. week_41.csv)"
        )
    return problems


def validate_date_format(value: str | None) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not value or not ISO_DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_date_range(start_date: str | None, end_date: str | None) -> bool:
    if not validate_date_format(start_date) or not validate_date_format(end_date):
        return False
    return start_date <= end_date


def find_missing_weeks(periods: Sequence[WeekPeriod]) -> list[int]:
    """Week numbers absent between the lowest and highest week present.

    Compares week numbers only; periods spanning a year boundary should be
    split with `group_periods_by_year` first.
    """
    if not periods:
        return []

    present = {p.week for p in periods}
    return [w for w in range(min(present), max(present) + 1) if w not in present]


def validate_period_sequence(
    periods: Sequence[WeekPeriod],
) -> tuple[bool, list[WeekPeriod]]:
    """Check for repeated period keys.

    Returns (is_valid, duplicates) where duplicates holds every occurrence
    after the first.
    """
    seen: set[str] = set()
    duplicates: list[WeekPeriod] = []

    for period in periods:
        if period.period_key in seen:
            duplicates.append(period)
        else:
            seen.add(period.period_key)

    return not duplicates, duplicates


def group_periods_by_year(periods: Sequence[WeekPeriod]) -> dict[int, list[WeekPeriod]]:
    """Periods per year, sorted by week within each year."""
    grouped: dict[int, list[WeekPeriod]] = {}
    for period in periods:
        grouped.setdefault(period.year, []).append(period)
    return {year: sorted(items, key=lambda p: p.week) for year, items in grouped.items()}


def group_periods_by_month(periods: Sequence[WeekPeriod]) -> dict[str, list[WeekPeriod]]:
    """Periods per "YYYY_MM" key of the start date, input order kept."""
    grouped: dict[str, list[WeekPeriod]] = {}
    for period in periods:
        grouped.setdefault(f"{period.year}_{period.month:02d}", []).append(period)
    return grouped
