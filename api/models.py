"""
Pydantic Models for API Request/Response Validation

This module defines all the data models used by the API for:
- Request body validation
- Response serialization
- Documentation generation (OpenAPI/Swagger)

All models use Pydantic v2 syntax for validation and serialization.
"""

import datetime as dt
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, model_validator

from core.periods import Granularity
from core.timeseries import Event, EventKind, Metadata, TimeSeriesPoint
from engine.event_patterns import EventPattern, SeverityClass


# =========================================
# Series Models
# =========================================

class SeriesPoint(BaseModel):
    """A single (possibly aggregated) fault probability."""
    date: dt.date = Field(description="Point date (display anchor for aggregated points)")
    probability: float = Field(ge=0, le=1, description="Fault probability")

    @classmethod
    def from_point(cls, point: TimeSeriesPoint) -> "SeriesPoint":
        return cls(date=point.date, probability=round(point.probability, 4))


class EventRecord(BaseModel):
    """An alarm or warning at a fault-pattern peak."""
    date: dt.date
    value: float = Field(ge=0, le=1, description="Fault probability on the event day")
    kind: EventKind
    component: str
    turbine_id: int

    @classmethod
    def from_event(cls, event: Event) -> "EventRecord":
        return cls(
            date=event.date,
            value=round(event.value, 4),
            kind=event.kind,
            component=event.component,
            turbine_id=event.turbine_id,
        )


class SeriesResponse(BaseModel):
    """Chart view of one (turbine, component) selection."""
    turbine_id: int
    component: str
    granularity: Granularity
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None
    point_count: int
    points: List[SeriesPoint] = Field(default_factory=list)
    alarms: List[EventRecord] = Field(default_factory=list)
    warnings: List[EventRecord] = Field(default_factory=list)
    message: Optional[str] = None


class TurbineComponentsResponse(BaseModel):
    """Components available for a turbine."""
    turbine_id: int
    components: List[str] = Field(default_factory=list)
    total_days: int = 0


class EventListResponse(BaseModel):
    """Filtered event list."""
    count: int
    alarm_count: int
    warning_count: int
    events: List[EventRecord] = Field(default_factory=list)


# =========================================
# Metadata Models
# =========================================

class MetadataResponse(BaseModel):
    """Descriptor of the current generation run."""
    start_date: dt.date
    end_date: dt.date
    total_days: int
    components: List[str]
    turbine_ids: List[int]

    @classmethod
    def from_metadata(cls, metadata: Metadata) -> "MetadataResponse":
        return cls(
            start_date=metadata.start_date,
            end_date=metadata.end_date,
            total_days=metadata.total_days,
            components=list(metadata.components),
            turbine_ids=list(metadata.turbine_ids),
        )


# =========================================
# Generation Models
# =========================================

class PatternInfo(BaseModel):
    """Information about a fault pattern."""
    name: str
    severity: SeverityClass
    description: str
    period_days: int
    duration_days: int
    magnitude: float
    event_kind: Optional[EventKind] = None

    @classmethod
    def from_pattern(cls, pattern: EventPattern) -> "PatternInfo":
        return cls(
            name=pattern.name,
            severity=pattern.severity,
            description=pattern.description,
            period_days=pattern.period_days,
            duration_days=pattern.duration_days,
            magnitude=pattern.magnitude,
            event_kind=pattern.event_kind,
        )


class PatternListResponse(BaseModel):
    """List of available fault patterns."""
    patterns: List[PatternInfo]


class GenerateRequest(BaseModel):
    """Request to run the batch generator."""
    years: int = Field(default=10, ge=1, le=30, description="Length of the window in years")
    end_date: Optional[dt.date] = Field(
        default=None,
        description="Window end, exclusive (defaults to today)"
    )
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible output")
    components: Optional[List[str]] = Field(
        default=None,
        min_length=1,
        description="Component names (defaults to the standard nine)"
    )
    turbine_ids: Optional[List[int]] = Field(
        default=None,
        min_length=1,
        description="Turbine ids (defaults to 1-4)"
    )
    write_csv: bool = Field(default=False, description="Also export CSV per turbine")

    @model_validator(mode="after")
    def check_turbine_ids(self):
        if self.turbine_ids is not None and any(t <= 0 for t in self.turbine_ids):
            raise ValueError("turbine_ids must be positive")
        return self


class GenerateResponse(BaseModel):
    """Result of a generation run."""
    success: bool
    metadata: MetadataResponse
    files_written: int
    alarms: int
    warnings: int
    validation_status: str
    message: str


# =========================================
# System Models
# =========================================

class SystemHealth(BaseModel):
    """System health response."""
    status: str
    version: str
    timestamp: dt.datetime
    data_store: str
    components: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: bool = True
    message: str
    status_code: int
    detail: Optional[Any] = None
    timestamp: dt.datetime
