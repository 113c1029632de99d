"""Weekly page metrics: ingestion, reach-safe aggregation and trend analytics."""

__version__ = "0.1.0"
