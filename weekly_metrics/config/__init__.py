"""Configuration loading for ingestion schema and analytics thresholds."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import SchemaLoadError

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schema_registry.yaml"

DEFAULT_REACH_SUM_WARNING_THRESHOLD = 10_000_000
DEFAULT_TREND_THRESHOLD_PCT = 5.0


@dataclass(frozen=True)
class AnalyticsSettings:
    """Tunable thresholds for the analytics layer.

    Percentages are expressed in percent units (5.0 = 5%).
    """

    reach_sum_warning_threshold: int = DEFAULT_REACH_SUM_WARNING_THRESHOLD
    trend_threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT
    consistent_growth_min_weeks: int = 2


def load_schema_registry(path: Path | None = None) -> dict[str, Any]:
    """Load the full schema registry YAML."""
    path = path or DEFAULT_SCHEMA_PATH
    try:
        with open(path) as f:
            registry = yaml.safe_load(f)
    except Exception as e:
        raise SchemaLoadError(f"Failed to load schema from {path}: {e}") from e

    if not isinstance(registry, dict):
        raise SchemaLoadError(f"Schema registry at {path} is not a mapping")
    return registry


def load_analytics_settings(path: Path | None = None) -> AnalyticsSettings:
    """Build AnalyticsSettings from the `analytics` section of the registry.

    Unknown keys are ignored; missing keys keep their defaults.
    """
    section = load_schema_registry(path).get("analytics") or {}
    known = {f.name for f in fields(AnalyticsSettings)}
    return AnalyticsSettings(**{k: v for k, v in section.items() if k in known})
