"""
Core Module - Turbine Fault Digital Twin

This module contains the framework-agnostic domain logic:
- Time-series records (points, events, turbine series, metadata)
- Calendar bucketing and time-granularity aggregation
- Chart view filtering (range, turbine, component, event kind)
- Series-Guard validation of generated output

These components are shared by the generation engine, the API and the
Streamlit dashboard.
"""

from .timeseries import (
    Event,
    EventKind,
    Metadata,
    SeriesFormatError,
    TimeSeriesPoint,
    TurbineSeries,
)
from .periods import Granularity, anchor_date, bucket_key
from .aggregation import aggregate
from .filters import (
    ChartView,
    TimeRangePreset,
    build_chart_view,
    filter_by_range,
    filter_events,
    partition_events,
    resolve_preset,
)
from .validators import SeriesGuard, ValidationResult, validate_generation_output

__all__ = [
    # Records
    "Event",
    "EventKind",
    "Metadata",
    "SeriesFormatError",
    "TimeSeriesPoint",
    "TurbineSeries",

    # Aggregation
    "Granularity",
    "anchor_date",
    "bucket_key",
    "aggregate",

    # Filtering
    "ChartView",
    "TimeRangePreset",
    "build_chart_view",
    "filter_by_range",
    "filter_events",
    "partition_events",
    "resolve_preset",

    # Validation
    "SeriesGuard",
    "ValidationResult",
    "validate_generation_output",
]

__version__ = "0.1.0"
