"""
Tests for Fault Patterns

These tests verify the shape of the recurring fault-risk bumps and
which peaks are allowed to raise events.

Run with: pytest tests/test_event_patterns.py -v
"""

import dataclasses

import pytest

from core.timeseries import EventKind
from engine.event_patterns import (
    EventPattern,
    PatternLibrary,
    SeverityClass,
)


class TestPatternValidation:
    """Test construction rules."""

    def test_valid_pattern(self):
        pattern = EventPattern(period_days=90, duration_days=5, magnitude=0.3, severity=SeverityClass.MAINTENANCE)
        assert pattern.period_days == 90
        assert pattern.duration_days == 5

    @pytest.mark.parametrize("period,duration,magnitude", [
        (0, 5, 0.3),
        (90, 0, 0.3),
        (10, 11, 0.3),
        (90, 5, 0.0),
        (90, 5, 1.5),
    ])
    def test_invalid_pattern(self, period, duration, magnitude):
        with pytest.raises(ValueError):
            EventPattern(period_days=period, duration_days=duration, magnitude=magnitude, severity="minor")

    def test_severity_from_string(self):
        pattern = EventPattern(period_days=900, duration_days=15, magnitude=0.95, severity="major")
        assert pattern.severity == SeverityClass.MAJOR

    def test_pattern_is_immutable(self):
        pattern = PatternLibrary.minor_issue()
        with pytest.raises(dataclasses.FrozenInstanceError):
            pattern.magnitude = 0.1


class TestPatternShape:
    """Test window, contribution and peak detection."""

    def setup_method(self):
        self.minor = EventPattern(period_days=180, duration_days=8, magnitude=0.6, severity=SeverityClass.MINOR)
        self.major = EventPattern(period_days=900, duration_days=15, magnitude=0.95, severity=SeverityClass.MAJOR)

    def test_center_and_peak_position(self):
        assert self.minor.center == 4.0
        assert self.minor.peak_position == 4
        assert self.major.center == 7.5
        assert self.major.peak_position == 7

    def test_cycle_position_wraps(self):
        assert self.minor.cycle_position(0, 0) == 0
        assert self.minor.cycle_position(179, 1) == 0
        assert self.minor.cycle_position(10, 175) == 5

    def test_contribution_at_center_is_magnitude(self):
        assert self.minor.contribution(4) == pytest.approx(0.6)

    def test_contribution_at_window_edge_is_zero(self):
        assert self.minor.contribution(0) == pytest.approx(0.0)

    def test_contribution_outside_window(self):
        assert self.minor.contribution(8) == 0.0
        assert self.minor.contribution(100) == 0.0

    def test_contribution_is_symmetric(self):
        assert self.minor.contribution(2) == pytest.approx(self.minor.contribution(6))
        assert self.minor.contribution(2) == pytest.approx(0.6 * 0.25)

    def test_major_peak_value(self):
        expected = 0.95 * (1 - 0.5 / 7.5) ** 2
        assert self.major.contribution(7) == pytest.approx(expected)

    def test_is_peak(self):
        assert self.minor.is_peak(4)
        assert not self.minor.is_peak(3)
        assert self.major.is_peak(7)
        assert not self.major.is_peak(8)

    def test_weak_pattern_never_peaks(self):
        maintenance = PatternLibrary.scheduled_maintenance()
        assert not maintenance.can_peak
        assert not any(maintenance.is_peak(pos) for pos in range(maintenance.period_days))

    def test_threshold_is_strict(self):
        pattern = EventPattern(period_days=10, duration_days=4, magnitude=0.4, severity=SeverityClass.MAJOR)
        assert not pattern.can_peak


class TestEventKind:
    """Test severity to event kind mapping."""

    def test_major_raises_alarm(self):
        assert PatternLibrary.major_failure().event_kind == EventKind.ALARM

    def test_minor_raises_warning(self):
        assert PatternLibrary.minor_issue().event_kind == EventKind.WARNING

    def test_maintenance_raises_nothing(self):
        assert PatternLibrary.scheduled_maintenance().event_kind is None

    def test_severity_rank_order(self):
        assert SeverityClass.MAINTENANCE.rank < SeverityClass.MINOR.rank < SeverityClass.MAJOR.rank


class TestPatternLibrary:
    """Test the pre-built patterns."""

    def test_default_patterns(self):
        patterns = PatternLibrary.get_all_patterns()

        assert [(p.period_days, p.duration_days, p.magnitude) for p in patterns] == [
            (90, 5, 0.3),
            (180, 8, 0.6),
            (900, 15, 0.95),
        ]

    def test_pattern_names(self):
        assert PatternLibrary.get_pattern_names() == [
            "Scheduled Maintenance",
            "Minor Issue",
            "Major Failure",
        ]

    def test_get_pattern_by_severity(self):
        pattern = PatternLibrary.get_pattern_by_severity(SeverityClass.MAJOR)
        assert pattern is not None
        assert pattern.name == "Major Failure"
