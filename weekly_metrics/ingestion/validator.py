"""Validation utilities for the ingestion pipeline."""

from typing import Any

import polars as pl
from pydantic import ValidationError

from ..exceptions import DataValidationError
from ..models.csv_row import WeeklyCsvRow
from ..models.weekly_record import CSV_COLUMNS, WeeklyRecord

# Source line number column added by the loader (header is line 1)
LINE_COLUMN = "_line"


def validate_rows(df: pl.DataFrame) -> tuple[list[WeeklyRecord], list[dict[str, Any]]]:
    """Validate each row against the Pydantic model.

    Returns the records built from valid rows and one error entry per
    invalid row: {"row": line number, "errors": pydantic error list}.
    Rows are numbered by LINE_COLUMN when present, otherwise by position.
    """
    records: list[WeeklyRecord] = []
    errors: list[dict[str, Any]] = []
    columns = [c for c in CSV_COLUMNS if c in df.columns]

    for i, row in enumerate(df.to_dicts()):
        line = row.get(LINE_COLUMN, i)
        try:
            model = WeeklyCsvRow.model_validate({c: row[c] for c in columns})
        except ValidationError as e:
            errors.append({"row": line, "errors": e.errors(include_url=False)})
            continue
        records.append(model.to_record())

    return records, errors


def validate_dataframe(df: pl.DataFrame) -> list[WeeklyRecord]:
    """Validate every row, raising on the first pass that finds errors.

    Raises:
        DataValidationError: If any rows fail validation
    """
    records, errors = validate_rows(df)
    if errors:
        raise DataValidationError(errors, len(df))
    return records


def validate_sample(df: pl.DataFrame, sample_size: int = 100) -> None:
    """Validate a random sample for quick sanity checks.

    Useful for large datasets where full validation is slow.
    """
    sample = df.sample(min(sample_size, len(df)))
    validate_dataframe(sample)


def format_row_errors(error: dict[str, Any]) -> str:
    """One readable line for a validate_rows error entry."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ())) or 'row'}: {e.get('msg')}"
        for e in error["errors"]
    )
    return f"Row {error['row']}: {details}"
