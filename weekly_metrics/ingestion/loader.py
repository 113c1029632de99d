"""Main data ingestion pipeline."""

import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO

import polars as pl

from ..config import load_schema_registry
from ..exceptions import (
    ColumnMappingError,
    DataValidationError,
    EmptyDatasetError,
    SchemaLoadError,
)
from ..models.weekly_record import CSV_COLUMNS, Dataset, WeeklyRecord
from .cleaner import apply_cleaning, drop_blank_rows
from .enricher import enrich
from .periods import extract_week_from_filename
from .validator import LINE_COLUMN, format_row_errors, validate_rows

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_NAME = "weekly_page_report"


@dataclass(frozen=True)
class IngestionStats:
    """Row counts for one ingestion run.

    total_rows == valid_rows + invalid_rows + duplicate_rows
    """

    total_rows: int
    valid_rows: int
    invalid_rows: int
    unique_pages: int
    unique_periods: int
    duplicate_rows: int = 0


@dataclass
class IngestionResult:
    """Dataset plus everything noticed while building it.

    warnings are human-readable lines; errors are per-row validation
    entries ({"row": line, "errors": [...]}) for rows that were skipped.
    """

    dataset: Dataset
    filename: str
    stats: IngestionStats
    warnings: list[str] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)


class WeeklyIngestionPipeline:
    """Pipeline for loading, cleaning, validating, and enriching weekly exports.

    Usage:
        pipeline = WeeklyIngestionPipeline()
        result = pipeline.ingest(Path("exports/week_41.csv"))
        dataset = result.dataset
    """

    def __init__(
        self,
        schema_path: Path | None = None,
        schema_name: str = DEFAULT_SCHEMA_NAME,
    ):
        registry = load_schema_registry(schema_path)
        try:
            self.schema: dict[str, Any] = registry[schema_name]
        except KeyError as e:
            raise SchemaLoadError(
                f"Schema {schema_name!r} not found in registry"
            ) from e

    def ingest(self, file_path: Path | str, strict: bool = False) -> IngestionResult:
        """Full pipeline: Load -> Check -> Rename -> Clean -> Enrich -> Filter -> Validate.

        Args:
            file_path: Path to a weekly CSV export
            strict: Raise DataValidationError on any invalid row instead of
                skipping it (default: False)

        Returns:
            IngestionResult with the dataset, warnings, errors and stats
        """
        path = Path(file_path)
        if path.suffix.lower() != ".csv":
            raise ValueError(f"Unsupported file type: {path.suffix}")

        df = self._load(path, path.name)
        return self._process(df, path.name, strict)

    def ingest_text(
        self, content: str, filename: str = "unknown.csv", strict: bool = False
    ) -> IngestionResult:
        """Run the pipeline on CSV content already read into memory."""
        df = self._load(io.BytesIO(content.encode("utf-8")), filename)
        return self._process(df, filename, strict)

    def ingest_many(
        self, file_paths: Iterable[Path | str], strict: bool = False
    ) -> IngestionResult:
        """Ingest several weekly files into one dataset.

        Records whose (period, page) pair is already present from an
        earlier file are skipped with a warning.
        """
        merged = Dataset()
        names: list[str] = []
        warnings: list[str] = []
        errors: list[dict[str, Any]] = []
        total_rows = valid_rows = invalid_rows = duplicate_rows = 0

        for file_path in file_paths:
            result = self.ingest(file_path, strict=strict)
            names.append(result.filename)
            warnings.extend(f"{result.filename}: {w}" for w in result.warnings)
            errors.extend({"file": result.filename, **e} for e in result.errors)
            total_rows += result.stats.total_rows
            invalid_rows += result.stats.invalid_rows
            duplicate_rows += result.stats.duplicate_rows

            for record in result.dataset:
                if merged.contains(record.unique_id):
                    warnings.append(
                        f"{result.filename}: skipped duplicate record "
                        f"{record.unique_id} already loaded from an earlier file"
                    )
                    duplicate_rows += 1
                    continue
                merged.add(record)
                valid_rows += 1

        if not names:
            raise EmptyDatasetError("No files given")

        return IngestionResult(
            dataset=merged,
            filename=", ".join(names),
            stats=self._stats(
                merged, total_rows, valid_rows, invalid_rows, duplicate_rows
            ),
            warnings=warnings,
            errors=errors,
        )

    def _load(self, source: Path | BinaryIO, filename: str) -> pl.DataFrame:
        """Load CSV with every column as a string; cleaning does the typing."""
        try:
            return pl.read_csv(source, infer_schema_length=0)
        except pl.exceptions.NoDataError as e:
            raise EmptyDatasetError(f"{filename} is empty") from e

    def _process(
        self, df: pl.DataFrame, filename: str, strict: bool
    ) -> IngestionResult:
        warnings: list[str] = []

        df = self._normalize_headers(df)
        df = df.with_row_index(LINE_COLUMN, offset=2)
        df = drop_blank_rows(df, [c for c in df.columns if c != LINE_COLUMN])

        self._check_structure(df, filename, warnings)
        df = self._rename_columns(df, self.schema["column_map"])
        total_rows = len(df)

        df = self._clean(df)
        df = enrich(df)
        df = self._drop_incomplete(df, warnings)
        self._check_filename_week(df, filename, warnings)

        records, errors = validate_rows(df)
        if errors and strict:
            raise DataValidationError(errors, total_rows)
        warnings.extend(format_row_errors(e) for e in errors)

        if not records:
            raise DataValidationError(errors, total_rows)

        failed = pl.Series([e["row"] for e in errors], dtype=df[LINE_COLUMN].dtype)
        valid_df = df.filter(~pl.col(LINE_COLUMN).is_in(failed)) if errors else df
        unique = self._drop_duplicates(valid_df, records, warnings)

        duplicate_rows = len(records) - len(unique)
        invalid_rows = total_rows - len(records)
        if invalid_rows:
            warnings.append(f"{invalid_rows} rows could not be parsed")

        dataset = Dataset(unique)
        stats = self._stats(
            dataset, total_rows, len(unique), invalid_rows, duplicate_rows
        )
        logger.info(
            "Ingested %s: %d of %d rows valid, %d pages, %d periods",
            filename,
            stats.valid_rows,
            stats.total_rows,
            stats.unique_pages,
            stats.unique_periods,
        )
        for warning in warnings:
            logger.warning("%s: %s", filename, warning)

        return IngestionResult(
            dataset=dataset,
            filename=filename,
            stats=stats,
            warnings=warnings,
            errors=errors,
        )

    def _normalize_headers(self, df: pl.DataFrame) -> pl.DataFrame:
        return df.rename({c: c.strip().lower() for c in df.columns})

    def _check_structure(
        self, df: pl.DataFrame, filename: str, warnings: list[str]
    ) -> None:
        """Reject missing columns or too few rows; warn on extras and size."""
        expected = [h.strip().lower() for h in self.schema["column_map"].values()]
        available = [c for c in df.columns if c != LINE_COLUMN]

        missing = [c for c in expected if c not in available]
        if missing:
            raise ColumnMappingError(missing, available)

        extra = [c for c in available if c not in expected]
        if extra:
            warnings.append(f"Extra columns ignored: {', '.join(extra)}")

        limits = self.schema.get("limits", {})
        min_rows = limits.get("min_rows", 1)
        max_rows = limits.get("max_rows")
        if len(df) < min_rows:
            raise EmptyDatasetError(
                f"{filename} has {len(df)} data rows (minimum: {min_rows})"
            )
        if max_rows is not None and len(df) > max_rows:
            warnings.append(
                f"Many rows: {len(df)} (more than {max_rows} may affect performance)"
            )

    def _rename_columns(
        self, df: pl.DataFrame, column_map: dict[str, str]
    ) -> pl.DataFrame:
        """Rename columns from raw names to internal names, dropping extras.

        column_map: {internal_name: raw_column_name}
        """
        raw_to_internal = {v.strip().lower(): k for k, v in column_map.items()}
        df = df.rename(raw_to_internal)
        return df.select([LINE_COLUMN, *CSV_COLUMNS])

    def _clean(self, df: pl.DataFrame) -> pl.DataFrame:
        """Apply cleaning transformations based on schema."""
        return apply_cleaning(
            df,
            string_cols=self.schema.get("string_columns", []),
            integer_cols=self.schema.get("integer_columns", []),
            zero_fill_cols=self.schema.get("zero_fill_columns", []),
            defaults=self.schema.get("defaults", {}),
        )

    def _drop_incomplete(self, df: pl.DataFrame, warnings: list[str]) -> pl.DataFrame:
        """Skip rows without the fields that identify a page and week."""
        required = self.schema.get("required_fields", [])
        if not required:
            return df

        incomplete = pl.any_horizontal([pl.col(c).is_null() for c in required])
        for row in df.filter(incomplete).iter_rows(named=True):
            absent = [c for c in required if row[c] is None]
            warnings.append(
                f"Row {row[LINE_COLUMN]}: missing required fields: {', '.join(absent)}"
            )
        return df.filter(~incomplete)

    def _drop_duplicates(
        self,
        df: pl.DataFrame,
        records: list[WeeklyRecord],
        warnings: list[str],
    ) -> list[WeeklyRecord]:
        """Keep the first valid record for each (period, page) pair.

        df holds exactly the rows that produced records, in the same order.
        """
        first = df.select(
            pl.struct(["period_key", "page_id"]).is_first_distinct()
        ).to_series()
        for row in df.filter(~first).iter_rows(named=True):
            warnings.append(
                f"Row {row[LINE_COLUMN]}: duplicate of page {row['page_id']} "
                f"in week {row['period_key']}, skipped"
            )
        return [record for record, keep in zip(records, first) if keep]

    def _check_filename_week(
        self, df: pl.DataFrame, filename: str, warnings: list[str]
    ) -> None:
        """Warn when rows carry a week other than the one in the file name."""
        week = extract_week_from_filename(filename)
        if week is None or df.is_empty():
            return

        others = sorted(set(df["week"].to_list()) - {week})
        if others:
            warnings.append(
                f"File name says week {week} but rows contain week(s) "
                f"{', '.join(str(w) for w in others)}"
            )

    def _stats(
        self,
        dataset: Dataset,
        total_rows: int,
        valid_rows: int,
        invalid_rows: int,
        duplicate_rows: int,
    ) -> IngestionStats:
        return IngestionStats(
            total_rows=total_rows,
            valid_rows=valid_rows,
            invalid_rows=invalid_rows,
            unique_pages=len(dataset.unique_pages()),
            unique_periods=len(dataset.unique_periods()),
            duplicate_rows=duplicate_rows,
        )


def export_to_csv(dataset: Dataset, path: Path | None = None) -> str:
    """Write the dataset in the 10-column export layout.

    Returns the CSV text; also writes it to `path` when given.

    Raises:
        EmptyDatasetError: If the dataset holds no records
    """
    if dataset.is_empty():
        raise EmptyDatasetError("No data to export")

    content = dataset.to_frame().write_csv()
    if path is not None:
        Path(path).write_text(content)
    return content
