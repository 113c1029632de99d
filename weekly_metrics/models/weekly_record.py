"""Value types for weekly page metrics and the dataset that holds them."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date

import polars as pl

from ..exceptions import DuplicateRecordError

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Column order of the weekly CSV export
CSV_COLUMNS = (
    "page_id",
    "page_name",
    "year",
    "week",
    "start_date",
    "end_date",
    "reach",
    "engagements",
    "status",
    "comment",
)


@dataclass(frozen=True)
class Page:
    """A social-media page. Identity is page_id."""

    page_id: str
    page_name: str


@dataclass(frozen=True)
class WeekPeriod:
    """One reporting week.

    Dates are ISO strings (YYYY-MM-DD) so that plain string ordering is
    chronological, including across year boundaries.
    """

    year: int
    week: int
    start_date: str
    end_date: str

    @property
    def period_key(self) -> str:
        """Canonical key, e.g. "2025_41"."""
        return f"{self.year}_{self.week}"

    @property
    def month(self) -> int:
        """Month number (1-12) of the start date."""
        return date.fromisoformat(self.start_date).month

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def quarter(self) -> int:
        return (self.month + 2) // 3

    @property
    def display_string(self) -> str:
        return f"Week {self.week} ({self.start_date} → {self.end_date})"

    @property
    def short_string(self) -> str:
        return f"W{self.week} {self.year}"


@dataclass(frozen=True)
class Metrics:
    """Weekly metric pair.

    reach counts unique people and is never summed across weeks;
    engagements counts interactions and may be summed.
    """

    reach: int
    engagements: int

    def value(self, metric: str) -> int:
        """Return the named metric ("reach" or "engagements")."""
        if metric == "reach":
            return self.reach
        if metric == "engagements":
            return self.engagements
        raise KeyError(metric)


@dataclass(frozen=True)
class WeeklyRecord:
    """One page's metrics for one week."""

    page: Page
    period: WeekPeriod
    metrics: Metrics
    status: str = "UNKNOWN"
    comment: str | None = None

    @property
    def unique_id(self) -> str:
        """E.g. "2025_41_12345678"."""
        return f"{self.period.period_key}_{self.page.page_id}"

    @property
    def has_activity(self) -> bool:
        return self.status == "OK" and (
            self.metrics.reach > 0 or self.metrics.engagements > 0
        )

    def to_row(self) -> dict[str, str | int | None]:
        """Flatten to the CSV column layout."""
        return {
            "page_id": self.page.page_id,
            "page_name": self.page.page_name,
            "year": self.period.year,
            "week": self.period.week,
            "start_date": self.period.start_date,
            "end_date": self.period.end_date,
            "reach": self.metrics.reach,
            "engagements": self.metrics.engagements,
            "status": self.status,
            "comment": self.comment,
        }


class Dataset:
    """Ordered, append-only collection of weekly records.

    Each (period_key, page_id) pair may appear at most once.
    """

    def __init__(self, records: Iterable[WeeklyRecord] = ()):
        self._records: list[WeeklyRecord] = []
        self._seen: set[str] = set()
        self.extend(records)

    def add(self, record: WeeklyRecord) -> None:
        """Append a record.

        Raises:
            DuplicateRecordError: If the (period, page) pair is already present
        """
        if record.unique_id in self._seen:
            raise DuplicateRecordError(record.unique_id)
        self._seen.add(record.unique_id)
        self._records.append(record)

    def extend(self, records: Iterable[WeeklyRecord]) -> None:
        for record in records:
            self.add(record)

    def contains(self, unique_id: str) -> bool:
        return unique_id in self._seen

    @property
    def records(self) -> tuple[WeeklyRecord, ...]:
        return tuple(self._records)

    def unique_pages(self) -> list[Page]:
        """Distinct pages in first-seen order."""
        pages: dict[str, Page] = {}
        for record in self._records:
            pages.setdefault(record.page.page_id, record.page)
        return list(pages.values())

    def unique_periods(self) -> list[WeekPeriod]:
        """Distinct periods sorted by year, then week."""
        periods: dict[str, WeekPeriod] = {}
        for record in self._records:
            periods.setdefault(record.period.period_key, record.period)
        return sorted(periods.values(), key=lambda p: (p.year, p.week))

    def for_page(self, page_id: str) -> list[WeeklyRecord]:
        return [r for r in self._records if r.page.page_id == page_id]

    def for_period(self, year: int, week: int) -> list[WeeklyRecord]:
        return [
            r
            for r in self._records
            if r.period.year == year and r.period.week == week
        ]

    def by_page(self) -> dict[str, list[WeeklyRecord]]:
        """Group records by page_id, preserving record order within a page."""
        grouped: dict[str, list[WeeklyRecord]] = {}
        for record in self._records:
            grouped.setdefault(record.page.page_id, []).append(record)
        return grouped

    def is_empty(self) -> bool:
        return not self._records

    def to_frame(self) -> pl.DataFrame:
        """Export as a Polars DataFrame in CSV column order."""
        schema = {
            "page_id": pl.Utf8,
            "page_name": pl.Utf8,
            "year": pl.Int64,
            "week": pl.Int64,
            "start_date": pl.Utf8,
            "end_date": pl.Utf8,
            "reach": pl.Int64,
            "engagements": pl.Int64,
            "status": pl.Utf8,
            "comment": pl.Utf8,
        }
        return pl.DataFrame([r.to_row() for r in self._records], schema=schema)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[WeeklyRecord]:
        return iter(tuple(self._records))
