"""Data cleaning functions using Polars expressions."""

from typing import Any

import polars as pl


def clean_integer_column(col_name: str) -> pl.Expr:
    """Convert to integer, handling commas and float strings like '3.0'.

    Values that are not numbers become null.
    """
    return (
        pl.col(col_name)
        .cast(pl.Utf8)
        .str.replace_all(",", "")
        .str.replace_all(" ", "")
        .str.strip_chars()
        .cast(pl.Float64, strict=False)  # Handle "3.0" style strings
        .cast(pl.Int64, strict=False)
        .alias(col_name)
    )


def clean_string_column(col_name: str) -> pl.Expr:
    """Strip whitespace and normalize empty strings to null."""
    return (
        pl.col(col_name)
        .cast(pl.Utf8)
        .str.strip_chars()
        .replace("", None)
        .alias(col_name)
    )


def fill_zero(col_name: str) -> pl.Expr:
    """Missing metric values count as 0."""
    return pl.col(col_name).fill_null(0).alias(col_name)


def fill_default(col_name: str, value: Any) -> pl.Expr:
    return pl.col(col_name).fill_null(pl.lit(value)).alias(col_name)


def drop_blank_rows(df: pl.DataFrame, columns: list[str]) -> pl.DataFrame:
    """Remove rows where every given column is null (blank CSV lines)."""
    if df.is_empty() or not columns:
        return df
    return df.filter(~pl.all_horizontal([pl.col(c).is_null() for c in columns]))


def apply_cleaning(
    df: pl.DataFrame,
    string_cols: list[str],
    integer_cols: list[str],
    zero_fill_cols: list[str] | None = None,
    defaults: dict[str, Any] | None = None,
) -> pl.DataFrame:
    """Apply all cleaning transformations to DataFrame.

    Only cleans columns that exist in the DataFrame. Fills run after type
    cleaning so that unparseable metrics also end up as 0.
    """
    existing_cols = set(df.columns)
    exprs: list[pl.Expr] = []

    for col in string_cols:
        if col in existing_cols:
            exprs.append(clean_string_column(col))

    for col in integer_cols:
        if col in existing_cols:
            exprs.append(clean_integer_column(col))

    if exprs:
        df = df.with_columns(exprs)

    fills: list[pl.Expr] = []
    for col in zero_fill_cols or []:
        if col in existing_cols:
            fills.append(fill_zero(col))

    for col, value in (defaults or {}).items():
        if col in existing_cols:
            fills.append(fill_default(col, value))

    if fills:
        df = df.with_columns(fills)
    return df
