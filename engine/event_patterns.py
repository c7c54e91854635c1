"""
Fault Event Pattern Definitions for Synthetic Data Generation

Each pattern describes a recurring bump in fault probability: every
`period_days` a window of `duration_days` opens, inside which the
probability rises along a squared bell curve that peaks mid-window.

Patterns are the "fault stories" of the simulated fleet:
- Scheduled maintenance: small regular bumps, never alarmed
- Minor issues: medium bumps, occasionally raise a warning
- Major failures: rare high peaks, always raise an alarm
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
import math

from core.timeseries import EventKind

# Only patterns stronger than this can mark a peak day. Maintenance
# patterns (magnitude 0.3) therefore never produce events.
PEAK_MAGNITUDE_THRESHOLD = 0.4


class SeverityClass(Enum):
    """Severity classes of fault patterns."""
    MAINTENANCE = "maintenance"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    SeverityClass.MAINTENANCE: 0,
    SeverityClass.MINOR: 1,
    SeverityClass.MAJOR: 2,
}


@dataclass(frozen=True)
class EventPattern:
    """
    A recurring fault-risk bump.

    Attributes:
        period_days: Days between window starts
        duration_days: Days each window lasts (<= period_days)
        magnitude: Probability added at the very centre of the window
        severity: Severity class; decides which event kind a peak raises
        name: Human-readable pattern name
        description: What the pattern represents

    Shape:
        center = duration_days / 2
        peak_factor = 1 - |cycle_pos - center| / center
        increase = magnitude * peak_factor ** 2
    """
    period_days: int
    duration_days: int
    magnitude: float
    severity: SeverityClass
    name: str = ""
    description: str = ""

    def __post_init__(self):
        if self.period_days <= 0:
            raise ValueError(f"period_days must be positive, got {self.period_days}")
        if self.duration_days <= 0:
            raise ValueError(f"duration_days must be positive, got {self.duration_days}")
        if self.duration_days > self.period_days:
            raise ValueError(
                f"duration_days ({self.duration_days}) cannot exceed period_days ({self.period_days})"
            )
        if not 0.0 < self.magnitude <= 1.0:
            raise ValueError(f"magnitude must be in (0, 1], got {self.magnitude}")
        if not isinstance(self.severity, SeverityClass):
            object.__setattr__(self, "severity", SeverityClass(self.severity))

    @property
    def center(self) -> float:
        return self.duration_days / 2

    @property
    def peak_position(self) -> int:
        """Cycle position of the peak day."""
        return math.floor(self.center)

    @property
    def can_peak(self) -> bool:
        return self.magnitude > PEAK_MAGNITUDE_THRESHOLD

    @property
    def event_kind(self) -> Optional[EventKind]:
        """Event kind raised at a peak, or None for maintenance."""
        if self.severity == SeverityClass.MAJOR:
            return EventKind.ALARM
        elif self.severity == SeverityClass.MINOR:
            return EventKind.WARNING
        return None

    def cycle_position(self, day: int, offset: int) -> int:
        """Position of a day inside the pattern cycle."""
        return (day + offset) % self.period_days

    def in_window(self, cycle_pos: int) -> bool:
        return cycle_pos < self.duration_days

    def contribution(self, cycle_pos: int) -> float:
        """
        Probability increase for a cycle position.

        Args:
            cycle_pos: Value returned by cycle_position()

        Returns:
            Increase to add to the day's probability (0 outside the window)
        """
        if not self.in_window(cycle_pos):
            return 0.0
        center = self.center
        peak_factor = 1 - abs(cycle_pos - center) / center
        return self.magnitude * peak_factor * peak_factor

    def is_peak(self, cycle_pos: int) -> bool:
        """True when the cycle position is this pattern's alarmable peak day."""
        return (
            self.in_window(cycle_pos)
            and cycle_pos == self.peak_position
            and self.can_peak
        )


class PatternLibrary:
    """
    Library of pre-defined fault patterns.

    Usage:
        # Default fleet patterns
        patterns = PatternLibrary.get_all_patterns()

        # A single pattern by severity
        major = PatternLibrary.get_pattern_by_severity(SeverityClass.MAJOR)
    """

    @staticmethod
    def scheduled_maintenance() -> EventPattern:
        """Small regular peaks every quarter; below the alarm threshold."""
        return EventPattern(
            period_days=90,
            duration_days=5,
            magnitude=0.3,
            severity=SeverityClass.MAINTENANCE,
            name="Scheduled Maintenance",
            description="Small regular rise in fault probability around routine service",
        )

    @staticmethod
    def minor_issue() -> EventPattern:
        """Medium peaks twice a year; about 30% of peaks raise a warning."""
        return EventPattern(
            period_days=180,
            duration_days=8,
            magnitude=0.6,
            severity=SeverityClass.MINOR,
            name="Minor Issue",
            description="Occasional medium peak from a developing minor fault",
        )

    @staticmethod
    def major_failure() -> EventPattern:
        """Rare high peaks; every peak raises an alarm."""
        return EventPattern(
            period_days=900,
            duration_days=15,
            magnitude=0.95,
            severity=SeverityClass.MAJOR,
            name="Major Failure",
            description="Rare high peak preceding a major component failure",
        )

    @classmethod
    def get_all_patterns(cls) -> List[EventPattern]:
        """Return all pre-built patterns, mildest first."""
        return [
            cls.scheduled_maintenance(),
            cls.minor_issue(),
            cls.major_failure(),
        ]

    @classmethod
    def get_pattern_by_severity(cls, severity: SeverityClass) -> Optional[EventPattern]:
        """
        Get the pre-built pattern of a severity class.

        Args:
            severity: Severity class to look up

        Returns:
            EventPattern or None if the severity is unknown
        """
        pattern_map = {
            SeverityClass.MAINTENANCE: cls.scheduled_maintenance,
            SeverityClass.MINOR: cls.minor_issue,
            SeverityClass.MAJOR: cls.major_failure,
        }

        factory = pattern_map.get(severity)
        if factory is None:
            return None
        return factory()

    @classmethod
    def get_pattern_names(cls) -> List[str]:
        """Return list of all pattern names."""
        return [p.name for p in cls.get_all_patterns()]
