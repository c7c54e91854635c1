"""
Time-Series Data Model

Shared record types for the fault-probability digital twin. These are
produced once by the generation engine and only read afterwards by the
API and the dashboard.

Record types:
- TimeSeriesPoint: one daily fault probability
- Event: an alarm or warning raised at a fault-pattern peak
- TurbineSeries: component name -> daily series, scoped to one turbine
- Metadata: the date window and keys of a generation run

Persisted field names use camelCase (turbineId, startDate, ...) so the
JSON files stay compatible with the browser front-end.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

DATE_FORMAT = "%Y-%m-%d"
PROBABILITY_DECIMALS = 4


class SeriesFormatError(ValueError):
    """Raised when a persisted record cannot be parsed."""


def parse_date(value: Union[str, date]) -> date:
    """
    Parse a YYYY-MM-DD string into a date.

    Args:
        value: Date string or an existing date

    Returns:
        Calendar date

    Raises:
        SeriesFormatError: If the string is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise SeriesFormatError(f"Invalid date {value!r}: expected YYYY-MM-DD") from e


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime(DATE_FORMAT)


def round_probability(value: float) -> float:
    return round(float(value), PROBABILITY_DECIMALS)


class EventKind(str, Enum):
    """Event kinds shown on the fault-probability chart."""
    ALARM = "alarm"
    WARNING = "warning"


@dataclass(frozen=True)
class TimeSeriesPoint:
    """A single daily fault probability."""
    date: date
    probability: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": format_date(self.date),
            "probability": round_probability(self.probability),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeSeriesPoint":
        try:
            probability = float(data["probability"])
        except (KeyError, TypeError, ValueError) as e:
            raise SeriesFormatError(f"Invalid series point: {data!r}") from e
        return cls(date=parse_date(data.get("date")), probability=probability)


@dataclass(frozen=True)
class Event:
    """
    An alarm or warning extracted at the peak of a fault pattern.

    Attributes:
        date: Peak day
        value: Final fault probability on that day
        kind: alarm (major pattern) or warning (minor pattern)
        component: Component display name (e.g. "Generator")
        turbine_id: Turbine the event belongs to
    """
    date: date
    value: float
    kind: EventKind
    component: str
    turbine_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": format_date(self.date),
            "value": round_probability(self.value),
            "kind": self.kind.value,
            "component": self.component,
            "turbineId": self.turbine_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        try:
            # Older event files name the kind field "type"
            kind = data.get("kind", data.get("type"))
            return cls(
                date=parse_date(data.get("date")),
                value=float(data["value"]),
                kind=EventKind(kind),
                component=str(data["component"]),
                turbine_id=int(data["turbineId"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            if isinstance(e, SeriesFormatError):
                raise
            raise SeriesFormatError(f"Invalid event record: {data!r}") from e


@dataclass(frozen=True)
class TurbineSeries:
    """Daily series for every component of one turbine."""
    turbine_id: int
    components: Dict[str, List[TimeSeriesPoint]] = field(default_factory=dict)

    def get_component(self, component: str) -> List[TimeSeriesPoint]:
        """Return the series for a component, or an empty list if absent."""
        return self.components.get(component.lower(), [])

    def component_names(self) -> List[str]:
        return list(self.components.keys())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turbineId": self.turbine_id,
            "components": {
                name: series_to_dicts(series)
                for name, series in self.components.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TurbineSeries":
        try:
            turbine_id = int(data["turbineId"])
            raw_components = data.get("components") or {}
            components = {
                str(name).lower(): series_from_dicts(points)
                for name, points in raw_components.items()
            }
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            if isinstance(e, SeriesFormatError):
                raise
            raise SeriesFormatError(f"Invalid turbine record: {e}") from e
        return cls(turbine_id=turbine_id, components=components)


@dataclass(frozen=True)
class Metadata:
    """
    Descriptor of a generation run.

    components holds display names in generation order; the turbine
    files key their series by the lowercased names.
    """
    start_date: date
    end_date: date
    total_days: int
    components: Tuple[str, ...]
    turbine_ids: Tuple[int, ...]

    def component_keys(self) -> List[str]:
        return [c.lower() for c in self.components]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "totalDays": self.total_days,
            "components": list(self.components),
            "turbineIds": list(self.turbine_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Metadata":
        try:
            return cls(
                start_date=parse_date(data.get("startDate")),
                end_date=parse_date(data.get("endDate")),
                total_days=int(data["totalDays"]),
                components=tuple(str(c) for c in data["components"]),
                turbine_ids=tuple(int(t) for t in data["turbineIds"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            if isinstance(e, SeriesFormatError):
                raise
            raise SeriesFormatError(f"Invalid metadata record: {data!r}") from e


def series_to_dicts(series: Iterable[TimeSeriesPoint]) -> List[Dict[str, Any]]:
    return [point.to_dict() for point in series]


def series_from_dicts(records: Optional[Iterable[Dict[str, Any]]]) -> List[TimeSeriesPoint]:
    """
    Parse a persisted series.

    A single malformed record fails the whole series.
    """
    if records is None:
        return []
    return [TimeSeriesPoint.from_dict(record) for record in records]
