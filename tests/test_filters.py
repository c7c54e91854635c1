"""
Tests for Chart View Filtering

Run with: pytest tests/test_filters.py -v
"""

from datetime import date, timedelta

import pytest

from core.filters import (
    TimeRangePreset,
    build_chart_view,
    filter_by_range,
    filter_events,
    partition_events,
    resolve_preset,
)
from core.periods import Granularity
from core.timeseries import Event, EventKind, Metadata, TimeSeriesPoint, TurbineSeries


def daily(start: date, days: int, value: float = 0.1):
    return [
        TimeSeriesPoint(date=start + timedelta(days=i), probability=value)
        for i in range(days)
    ]


def event(day: date, kind=EventKind.ALARM, component="Generator", turbine_id=1, value=0.9):
    return Event(date=day, value=value, kind=kind, component=component, turbine_id=turbine_id)


class TestFilterByRange:
    """Test inclusive date ranges."""

    def test_inclusive_bounds(self):
        series = daily(date(2024, 1, 1), 10)
        result = filter_by_range(series, date(2024, 1, 3), date(2024, 1, 5))

        assert [p.date.day for p in result] == [3, 4, 5]

    def test_range_outside_series(self):
        series = daily(date(2024, 1, 1), 10)
        assert filter_by_range(series, date(2025, 1, 1), date(2025, 2, 1)) == []


class TestFilterEvents:
    """Test event selection."""

    def setup_method(self):
        self.events = [
            event(date(2024, 1, 5)),
            event(date(2024, 1, 6), kind=EventKind.WARNING, component="Rotor"),
            event(date(2024, 1, 7), turbine_id=2),
            event(date(2024, 2, 1)),
        ]

    def test_range_only(self):
        result = filter_events(self.events, date(2024, 1, 1), date(2024, 1, 31))
        assert len(result) == 3

    def test_turbine(self):
        result = filter_events(self.events, date(2024, 1, 1), date(2024, 12, 31), turbine_id=2)
        assert [e.date for e in result] == [date(2024, 1, 7)]

    def test_component_case_insensitive(self):
        result = filter_events(self.events, date(2024, 1, 1), date(2024, 12, 31), component="rotor")
        assert [e.component for e in result] == ["Rotor"]

    def test_component_exact_match(self):
        result = filter_events(self.events, date(2024, 1, 1), date(2024, 12, 31), component="Rot")
        assert result == []

    def test_partition(self):
        alarms, warnings = partition_events(self.events)
        assert len(alarms) == 3
        assert len(warnings) == 1
        assert warnings[0].kind == EventKind.WARNING


class TestBuildChartView:
    """Test the combined chart selection."""

    def setup_method(self):
        self.turbine = TurbineSeries(
            turbine_id=1,
            components={"generator": daily(date(2024, 1, 1), 60, 0.2)},
        )
        self.events = [
            event(date(2024, 1, 10)),
            event(date(2024, 1, 20), kind=EventKind.WARNING),
            event(date(2024, 1, 10), component="Rotor"),
            event(date(2024, 1, 10), turbine_id=2),
        ]

    def test_monthly_view(self):
        view = build_chart_view(
            self.turbine, self.events, "Generator",
            date(2024, 1, 1), date(2024, 2, 29),
            granularity=Granularity.MONTH,
        )

        assert [p.date for p in view.series] == [date(2024, 1, 15), date(2024, 2, 15)]
        assert len(view.alarms) == 1
        assert len(view.warnings) == 1

    def test_missing_turbine(self):
        view = build_chart_view(None, self.events, "Generator", date(2024, 1, 1), date(2024, 2, 29))
        assert view.is_empty

    def test_missing_component(self):
        view = build_chart_view(self.turbine, self.events, "Gearbox", date(2024, 1, 1), date(2024, 2, 29))
        assert view.is_empty

    def test_range_without_data(self):
        view = build_chart_view(self.turbine, self.events, "Generator", date(2030, 1, 1), date(2030, 2, 1))
        assert view.series == []

    def test_markers_kept_when_range_has_no_points(self):
        turbine = TurbineSeries(turbine_id=1, components={"generator": daily(date(2024, 1, 1), 10, 0.2)})
        events = [event(date(2024, 1, 20)), event(date(2024, 1, 25), kind=EventKind.WARNING)]

        view = build_chart_view(turbine, events, "Generator", date(2024, 1, 15), date(2024, 1, 31))

        assert view.series == []
        assert [e.date for e in view.alarms] == [date(2024, 1, 20)]
        assert [e.date for e in view.warnings] == [date(2024, 1, 25)]
        assert not view.is_empty

    def test_markers_without_turbine_file(self):
        view = build_chart_view(
            None, self.events, "Generator", date(2024, 1, 1), date(2024, 2, 29), turbine_id=1
        )

        assert view.series == []
        assert len(view.alarms) == 1
        assert len(view.warnings) == 1


class TestResolvePreset:
    """Test the quick time-range buttons."""

    def setup_method(self):
        self.reference = date(2025, 3, 31)
        self.metadata = Metadata(
            start_date=date(2015, 3, 31),
            end_date=self.reference,
            total_days=(self.reference - date(2015, 3, 31)).days,
            components=("Generator",),
            turbine_ids=(1,),
        )

    def test_week(self):
        assert resolve_preset(TimeRangePreset.WEEK, self.reference) == (
            date(2025, 3, 24), self.reference, Granularity.DAY
        )

    def test_month(self):
        assert resolve_preset("month", self.reference) == (
            date(2025, 2, 28), self.reference, Granularity.DAY
        )

    def test_quarter(self):
        assert resolve_preset("quarter", self.reference) == (
            date(2024, 12, 31), self.reference, Granularity.WEEK
        )

    def test_year(self):
        assert resolve_preset("year", self.reference) == (
            date(2024, 3, 31), self.reference, Granularity.MONTH
        )

    def test_all(self):
        assert resolve_preset("all", self.reference, self.metadata) == (
            date(2015, 3, 31), self.reference, Granularity.QUARTER
        )

    def test_all_needs_metadata(self):
        with pytest.raises(ValueError):
            resolve_preset("all", self.reference)

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            resolve_preset("decade", self.reference)
