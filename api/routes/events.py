"""
Event Query Endpoints

Alarms and warnings extracted at fault-pattern peaks, filtered the same
way the chart filters its markers.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.models import EventListResponse, EventRecord
from api.store import DataStore, get_store
from core.filters import filter_events, partition_events
from core.timeseries import EventKind, SeriesFormatError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])


@router.get(
    "",
    response_model=EventListResponse,
    summary="List events",
    description="""
    Get alarm and warning events of the current generation run.

    **Filters (all optional):**
    - `start` / `end`: inclusive date range (defaults to the generated window)
    - `turbine_id`: a single turbine
    - `component`: a single component (case-insensitive)
    - `kind`: alarm or warning
    """
)
async def list_events(
    start: Optional[date] = Query(default=None, description="Range start (inclusive)"),
    end: Optional[date] = Query(default=None, description="Range end (inclusive)"),
    turbine_id: Optional[int] = Query(default=None, description="Turbine filter"),
    component: Optional[str] = Query(default=None, description="Component filter"),
    kind: Optional[EventKind] = Query(default=None, description="Event kind filter"),
    store: DataStore = Depends(get_store)
):
    """List events matching the filters, in date order."""
    try:
        events = store.get_events()
    except SeriesFormatError as e:
        logger.warning(f"Cannot serve events: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    if not events:
        return EventListResponse(count=0, alarm_count=0, warning_count=0)

    start = start or min(e.date for e in events)
    end = end or max(e.date for e in events)

    selected = filter_events(events, start, end, turbine_id=turbine_id, component=component)
    if kind is not None:
        selected = [e for e in selected if e.kind == kind]
    selected.sort(key=lambda e: (e.date, e.turbine_id, e.component))

    alarms, warnings = partition_events(selected)

    return EventListResponse(
        count=len(selected),
        alarm_count=len(alarms),
        warning_count=len(warnings),
        events=[EventRecord.from_event(e) for e in selected],
    )
