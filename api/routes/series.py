"""
Fault-Probability Series Endpoints

This module serves the chart data of the dashboard: the daily
fault-probability series of one (turbine, component) pair, restricted
to a date range and aggregated to the requested granularity, together
with the alarm and warning markers of the same selection.

Key Features:
- Component listing per turbine
- Range filtering (inclusive) and day/week/month/quarter/year aggregation
- Quick-range presets (week, month, quarter, year, all)
- Missing turbines or components return empty results, not 404
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.models import (
    EventRecord,
    SeriesPoint,
    SeriesResponse,
    TurbineComponentsResponse,
)
from api.store import DataStore, get_store
from core.filters import TimeRangePreset, build_chart_view, resolve_preset
from core.periods import Granularity
from core.timeseries import SeriesFormatError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/series", tags=["Fault Series"])


@router.get(
    "/{turbine_id}",
    response_model=TurbineComponentsResponse,
    summary="List turbine components",
    description="Get the component series available for a turbine."
)
async def get_turbine_components(
    turbine_id: int,
    store: DataStore = Depends(get_store)
):
    """List components with a series for one turbine."""
    try:
        turbine = store.get_turbine(turbine_id)
    except SeriesFormatError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    if turbine is None:
        return TurbineComponentsResponse(turbine_id=turbine_id)

    names = turbine.component_names()
    total_days = len(turbine.get_component(names[0])) if names else 0
    return TurbineComponentsResponse(
        turbine_id=turbine_id,
        components=names,
        total_days=total_days,
    )


@router.get(
    "/{turbine_id}/{component}",
    response_model=SeriesResponse,
    summary="Get component fault series",
    description="""
    Get the fault-probability series of one component, aggregated for
    charting, with the alarms and warnings of the same range.

    **Range selection:**
    - `preset`: week, month, quarter, year or all; overrides start and
      end, and picks the chart's granularity unless one is given
    - `start` / `end`: inclusive range (defaults to the generated window)
    - `granularity`: day, week, month, quarter or year (default: month,
      or the preset's granularity)

    Unknown turbines or components return an empty series.
    """
)
async def get_component_series(
    turbine_id: int,
    component: str,
    start: Optional[date] = Query(default=None, description="Range start (inclusive)"),
    end: Optional[date] = Query(default=None, description="Range end (inclusive)"),
    granularity: Optional[Granularity] = Query(default=None, description="Aggregation granularity"),
    preset: Optional[TimeRangePreset] = Query(default=None, description="Quick time range"),
    store: DataStore = Depends(get_store)
):
    """Get the chart view of one (turbine, component) selection."""
    try:
        metadata = store.get_metadata()

        if metadata is None:
            return SeriesResponse(
                turbine_id=turbine_id,
                component=component,
                granularity=granularity or Granularity.MONTH,
                point_count=0,
                message="No generated data available"
            )

        if preset is not None:
            start, end, preset_granularity = resolve_preset(preset, metadata.end_date, metadata)
            granularity = granularity or preset_granularity
        else:
            start = start or metadata.start_date
            end = end or metadata.end_date
            granularity = granularity or Granularity.MONTH

        if end < start:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Range end {end} is before start {start}"
            )

        view = build_chart_view(
            store.get_turbine(turbine_id),
            store.get_events(),
            component,
            start,
            end,
            granularity=granularity,
            turbine_id=turbine_id,
        )
    except SeriesFormatError as e:
        logger.warning(f"Cannot serve series {turbine_id}/{component}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    return SeriesResponse(
        turbine_id=turbine_id,
        component=component,
        granularity=granularity,
        start=start,
        end=end,
        point_count=len(view.series),
        points=[SeriesPoint.from_point(p) for p in view.series],
        alarms=[EventRecord.from_event(e) for e in view.alarms],
        warnings=[EventRecord.from_event(e) for e in view.warnings],
        message=None if not view.is_empty else f"No data for turbine {turbine_id}, component {component}"
    )
