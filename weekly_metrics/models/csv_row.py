"""Pydantic model for weekly page report row validation."""

import re
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .weekly_record import Metrics, Page, WeekPeriod, WeeklyRecord

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class WeeklyCsvRow(BaseModel):
    """Single row from a weekly page export after cleaning.

    Dates stay ISO strings (YYYY-MM-DD); they are parsed only to check
    that they are real calendar dates in the right order.
    """

    model_config = ConfigDict(strict=True, str_strip_whitespace=True)

    # Page info
    page_id: str = Field(min_length=1)
    page_name: str = Field(min_length=1)

    # Period info
    year: int = Field(ge=2000, le=2100)
    week: int = Field(ge=1, le=53)
    start_date: str
    end_date: str

    # Metrics
    reach: int = Field(ge=0)
    engagements: int = Field(ge=0)

    # Metadata
    status: str = "UNKNOWN"
    comment: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        if not ISO_DATE_PATTERN.match(value):
            raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
        date.fromisoformat(value)
        return value

    @model_validator(mode="after")
    def _ordered_dates(self) -> "WeeklyCsvRow":
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self

    def to_record(self) -> WeeklyRecord:
        """Build the immutable WeeklyRecord for this row."""
        return WeeklyRecord(
            page=Page(page_id=self.page_id, page_name=self.page_name),
            period=WeekPeriod(
                year=self.year,
                week=self.week,
                start_date=self.start_date,
                end_date=self.end_date,
            ),
            metrics=Metrics(reach=self.reach, engagements=self.engagements),
            status=self.status,
            comment=self.comment,
        )
