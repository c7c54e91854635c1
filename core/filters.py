"""
Chart View Filtering

Consumer-side selection logic for the fault-probability chart:
- Restrict a series to an inclusive date range
- Select events by range, turbine and component
- Split events into alarms and warnings for separate rendering
- Resolve the quick time-range buttons (W / M / Q / Y / All)

Missing data is never an error here: an unknown turbine or component
simply produces an empty view.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .aggregation import aggregate
from .periods import Granularity, subtract_months, subtract_years
from .timeseries import Event, EventKind, Metadata, TimeSeriesPoint, TurbineSeries


@dataclass
class ChartView:
    """Everything the chart needs for one (turbine, component) selection."""
    series: List[TimeSeriesPoint] = field(default_factory=list)
    alarms: List[Event] = field(default_factory=list)
    warnings: List[Event] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.series and not self.alarms and not self.warnings


def filter_by_range(
    series: Iterable[TimeSeriesPoint],
    start: date,
    end: date
) -> List[TimeSeriesPoint]:
    """Keep points with start <= date <= end."""
    return [point for point in series if start <= point.date <= end]


def filter_events(
    events: Iterable[Event],
    start: date,
    end: date,
    turbine_id: Optional[int] = None,
    component: Optional[str] = None
) -> List[Event]:
    """
    Select events for a chart selection.

    Args:
        events: All events of a generation run
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)
        turbine_id: Only this turbine, or any turbine if None
        component: Only this component (case-insensitive), or any if None

    Returns:
        Matching events, in input order
    """
    wanted_component = component.lower() if component is not None else None

    selected = []
    for event in events:
        if not start <= event.date <= end:
            continue
        if turbine_id is not None and event.turbine_id != turbine_id:
            continue
        if wanted_component is not None and event.component.lower() != wanted_component:
            continue
        selected.append(event)
    return selected


def partition_events(events: Iterable[Event]) -> Tuple[List[Event], List[Event]]:
    """Split events into (alarms, warnings)."""
    alarms = []
    warnings = []
    for event in events:
        if event.kind == EventKind.ALARM:
            alarms.append(event)
        elif event.kind == EventKind.WARNING:
            warnings.append(event)
    return alarms, warnings


def build_chart_view(
    turbine: Optional[TurbineSeries],
    events: Sequence[Event],
    component: str,
    start: date,
    end: date,
    granularity: Granularity = Granularity.MONTH,
    turbine_id: Optional[int] = None
) -> ChartView:
    """
    Build the aggregated series and event markers for one selection.

    Args:
        turbine: Loaded turbine series (None when the turbine has no file)
        events: All events
        component: Selected component name
        start: Range start (inclusive)
        end: Range end (inclusive)
        granularity: Aggregation granularity for the series
        turbine_id: Turbine filter for events (defaults to the turbine's id)

    Returns:
        ChartView; the series is empty when the turbine or component has
        no data in the range, the markers are selected regardless
    """
    if turbine_id is None:
        if turbine is None:
            return ChartView()
        turbine_id = turbine.turbine_id

    series = filter_by_range(turbine.get_component(component), start, end) if turbine is not None else []

    alarms, warnings = partition_events(
        filter_events(events, start, end, turbine_id=turbine_id, component=component)
    )

    return ChartView(
        series=aggregate(series, granularity),
        alarms=alarms,
        warnings=warnings,
    )


# =========================================
# Quick Time-Range Presets
# =========================================

class TimeRangePreset(str, Enum):
    """Quick range buttons on the chart."""
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    ALL = "all"


def resolve_preset(
    preset: TimeRangePreset,
    reference: date,
    metadata: Optional[Metadata] = None
) -> Tuple[date, date, Granularity]:
    """
    Resolve a quick-range button to a date range and granularity.

    Each preset picks a granularity that keeps the chart readable:
    a week or month is shown per day, a quarter per week, a year per
    month and the full history per quarter.

    Args:
        preset: Button pressed
        reference: Range end for the relative presets (usually the
            last generated day)
        metadata: Generation metadata; required for ALL

    Returns:
        (start, end, granularity)

    Raises:
        ValueError: If ALL is requested without metadata
    """
    preset = TimeRangePreset(preset)

    if preset == TimeRangePreset.WEEK:
        return reference - timedelta(days=7), reference, Granularity.DAY
    elif preset == TimeRangePreset.MONTH:
        return subtract_months(reference, 1), reference, Granularity.DAY
    elif preset == TimeRangePreset.QUARTER:
        return subtract_months(reference, 3), reference, Granularity.WEEK
    elif preset == TimeRangePreset.YEAR:
        return subtract_years(reference, 1), reference, Granularity.MONTH

    if metadata is None:
        raise ValueError("The 'all' range needs generation metadata")
    return metadata.start_date, metadata.end_date, Granularity.QUARTER
