"""Shared fixtures for weekly metrics tests."""

from datetime import date, timedelta
from pathlib import Path

import pytest

from weekly_metrics.models.weekly_record import (
    Dataset,
    Metrics,
    Page,
    WeekPeriod,
    WeeklyRecord,
)

CSV_HEADER = (
    "page_id,page_name,year,week,start_date,end_date,reach,engagements,status,comment"
)


def make_record(
    page_id: str = "p1",
    week: int = 41,
    reach: int = 0,
    engagements: int = 0,
    year: int = 2025,
    page_name: str | None = None,
    status: str = "OK",
    comment: str | None = None,
) -> WeeklyRecord:
    """Build a record whose dates are the ISO week's Monday to Sunday."""
    start = date.fromisocalendar(year, week, 1)
    return WeeklyRecord(
        page=Page(page_id=page_id, page_name=page_name or f"Page {page_id}"),
        period=WeekPeriod(
            year=year,
            week=week,
            start_date=start.isoformat(),
            end_date=(start + timedelta(days=6)).isoformat(),
        ),
        metrics=Metrics(reach=reach, engagements=engagements),
        status=status,
        comment=comment,
    )


def csv_line(
    page_id: str,
    week: int,
    reach: int | str,
    engagements: int | str,
    year: int = 2025,
    page_name: str | None = None,
    status: str = "OK",
    comment: str = "",
) -> str:
    start = date.fromisocalendar(year, week, 1)
    end = start + timedelta(days=6)
    return ",".join(
        str(v)
        for v in (
            page_id,
            page_name or f"Page {page_id}",
            year,
            week,
            start.isoformat(),
            end.isoformat(),
            reach,
            engagements,
            status,
            comment,
        )
    )


@pytest.fixture
def two_weeks() -> list[WeeklyRecord]:
    """One page over two consecutive weeks."""
    return [
        make_record("p1", 41, reach=100_000, engagements=500),
        make_record("p1", 42, reach=120_000, engagements=700),
    ]


@pytest.fixture
def dataset() -> Dataset:
    """Three pages over three weeks with growth, a drop and an inactive page."""
    return Dataset(
        [
            make_record("p1", 40, reach=10_000, engagements=100),
            make_record("p2", 40, reach=20_000, engagements=400),
            make_record("p3", 40, reach=5_000, engagements=50),
            make_record("p1", 41, reach=12_000, engagements=200),
            make_record("p2", 41, reach=22_000, engagements=300),
            make_record("p3", 41, reach=5_000, engagements=40),
            make_record("p1", 42, reach=15_000, engagements=400),
            make_record("p2", 42, reach=11_000, engagements=300),
            make_record("p3", 42, reach=0, engagements=0, status="NO_ACTIVITY"),
        ]
    )


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write CSV lines (header added) to a temp file and return its path."""

    def _write(name: str, lines: list[str], header: str = CSV_HEADER) -> Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return path

    return _write
