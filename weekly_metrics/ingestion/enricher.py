"""Data enrichment functions - add derived columns."""

import polars as pl


def add_period_key(df: pl.DataFrame) -> pl.DataFrame:
    """Add period_key column ("{year}_{week}"); null if either part is missing."""
    return df.with_columns(
        pl.concat_str(
            [pl.col("year").cast(pl.Utf8), pl.col("week").cast(pl.Utf8)],
            separator="_",
        ).alias("period_key")
    )


def enrich(df: pl.DataFrame) -> pl.DataFrame:
    """Apply all enrichment transformations."""
    return add_period_key(df)
