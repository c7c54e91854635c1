"""
Synthetic Fault-Probability Generator

Generates daily fault-probability series for every (turbine, component)
pair of a simulated wind-turbine fleet, and extracts alarm/warning
events at the peaks of injected fault patterns.

Features:
- Low random noise floor (0.01 - 0.03) per day
- Deterministic identity bias: later components and higher-numbered
  turbines are mildly riskier
- Additive fault-pattern injection with per-series phase offsets
- Event extraction at pattern peaks (alarms for major, sampled
  warnings for minor patterns)
- Injectable random source for reproducible runs
"""

import logging
import math
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Generator, Iterator, List, NamedTuple, Optional, Sequence

from core.periods import subtract_years
from core.timeseries import (
    Event,
    EventKind,
    Metadata,
    TimeSeriesPoint,
    TurbineSeries,
    round_probability,
)

from .config import DEFAULT_COMPONENTS, DEFAULT_TURBINE_IDS, MAX_SEED_OFFSET, GenerationConfig
from .event_patterns import EventPattern, PatternLibrary, SeverityClass

logger = logging.getLogger(__name__)

# Noise floor before identity scaling
BASE_PROBABILITY = 0.01
BASE_NOISE = 0.02

# Phase offset multipliers; existing fixtures depend on these exact values
COMPONENT_PHASE_STEP = 13
TURBINE_PHASE_STEP = 23

# A minor peak raises a warning when a fresh draw exceeds this (30% chance)
MINOR_EVENT_THRESHOLD = 0.7


@dataclass(frozen=True)
class GenerationWindow:
    """
    Historical window [start, end) of a generation run.

    One point is generated per day from start up to, but not
    including, end.
    """
    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Window end {self.end} is before start {self.start}")

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days

    def dates(self) -> Iterator[date]:
        for offset in range(self.total_days):
            yield self.start + timedelta(days=offset)

    @classmethod
    def ending_on(cls, end: Optional[date] = None, years: int = 10) -> "GenerationWindow":
        """
        Window covering `years` calendar years up to `end` (default today).

        Feb 29 falls back to Feb 28 when the start year is not a leap year.
        """
        end = end or date.today()
        return cls(start=subtract_years(end, years), end=end)


class SynthesisResult(NamedTuple):
    """Series and events of one (turbine, component) pair."""
    series: List[TimeSeriesPoint]
    events: List[Event]


class TurbineResult(NamedTuple):
    """All component series and events of one turbine."""
    turbine: TurbineSeries
    events: List[Event]


@dataclass
class GenerationResult:
    """Complete output of a batch run, ready for the writer."""
    metadata: Metadata
    turbines: Dict[int, TurbineSeries] = field(default_factory=dict)
    events: List[Event] = field(default_factory=list)

    @property
    def alarm_count(self) -> int:
        return sum(1 for e in self.events if e.kind == EventKind.ALARM)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self.events if e.kind == EventKind.WARNING)


class SeriesSynthesizer:
    """
    Generator for synthetic fault-probability series.

    For each day the probability is a small noise floor, scaled by the
    component's and turbine's position in the configured lists, plus
    the contribution of every fault pattern whose window covers the day.
    A day on which a pattern peaks may raise an event.

    Example:
        synth = SeriesSynthesizer(random_seed=42)
        window = GenerationWindow.ending_on(date(2025, 1, 1), years=10)

        # One series
        series, events = synth.synthesize("Rotor", 2, seed_offset=7, window=window)

        # The whole fleet
        result = synth.generate_all(window)
    """

    def __init__(
        self,
        components: Sequence[str] = DEFAULT_COMPONENTS,
        turbine_ids: Sequence[int] = DEFAULT_TURBINE_IDS,
        patterns: Optional[Sequence[EventPattern]] = None,
        random_seed: Optional[int] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the synthesizer.

        Args:
            components: Component display names; order defines their rank
            turbine_ids: Turbine ids; the largest one normalizes the turbine bias
            patterns: Fault patterns (defaults to PatternLibrary.get_all_patterns())
            random_seed: Seed for a private random source
            rng: Random source with a random() method; overrides random_seed
        """
        if not components:
            raise ValueError("At least one component is required")
        if not turbine_ids:
            raise ValueError("At least one turbine id is required")
        if len({c.lower() for c in components}) != len(components):
            raise ValueError("Component names must be unique (case-insensitive)")

        self.components = list(components)
        self.turbine_ids = list(turbine_ids)
        self.patterns = list(patterns) if patterns is not None else PatternLibrary.get_all_patterns()
        self._rng = rng if rng is not None else random.Random(random_seed)
        self._ranks = {name.lower(): index for index, name in enumerate(self.components)}
        self._max_turbine_id = max(self.turbine_ids)

    @classmethod
    def from_config(cls, config: GenerationConfig, rng: Optional[random.Random] = None) -> "SeriesSynthesizer":
        return cls(
            components=config.components,
            turbine_ids=config.turbine_ids,
            patterns=config.patterns,
            random_seed=config.random_seed,
            rng=rng,
        )

    # =========================================
    # Identity Helpers
    # =========================================

    def component_rank(self, component: str) -> int:
        """
        Zero-based position of a component in the configured order.

        Raises:
            ValueError: If the component is not configured
        """
        try:
            return self._ranks[component.lower()]
        except KeyError:
            raise ValueError(f"Unknown component: {component}") from None

    def display_name(self, component: str) -> str:
        return self.components[self.component_rank(component)]

    def identity_scale(self, component: str, turbine_id: int) -> float:
        """
        Deterministic risk bias for a (component, turbine) pair.

        Returns:
            (0.8 + component_factor * 0.4) * (0.8 + turbine_factor * 0.4)
        """
        if turbine_id not in self.turbine_ids:
            raise ValueError(f"Unknown turbine id: {turbine_id}")

        component_factor = (self.component_rank(component) + 1) / len(self.components)
        turbine_factor = turbine_id / self._max_turbine_id
        return (0.8 + component_factor * 0.4) * (0.8 + turbine_factor * 0.4)

    def phase_offset(self, component: str, turbine_id: int, seed_offset: int) -> int:
        """Shift applied to every pattern cycle of one series."""
        return (
            seed_offset
            + COMPONENT_PHASE_STEP * self.component_rank(component)
            + TURBINE_PHASE_STEP * turbine_id
        )

    def draw_seed_offset(self) -> int:
        """Random per-series offset in [0, MAX_SEED_OFFSET)."""
        return math.floor(self._rng.random() * MAX_SEED_OFFSET)

    # =========================================
    # Series Synthesis
    # =========================================

    def synthesize(
        self,
        component: str,
        turbine_id: int,
        seed_offset: int,
        window: GenerationWindow,
        patterns: Optional[Sequence[EventPattern]] = None
    ) -> SynthesisResult:
        """
        Generate the daily series and events for one (component, turbine).

        Args:
            component: Component name (case-insensitive)
            turbine_id: Turbine id
            seed_offset: Extra phase shift for every pattern
            window: Historical window
            patterns: Patterns to inject (defaults to the configured ones)

        Returns:
            SynthesisResult(series, events); exactly one point per day
        """
        patterns = self.patterns if patterns is None else list(patterns)
        name = self.display_name(component)
        scale = self.identity_scale(component, turbine_id)
        offset = self.phase_offset(component, turbine_id, seed_offset)

        series: List[TimeSeriesPoint] = []
        events: List[Event] = []

        for day_index, day in enumerate(window.dates()):
            probability = (BASE_PROBABILITY + self._rng.random() * BASE_NOISE) * scale

            peak: Optional[EventPattern] = None
            for pattern in patterns:
                cycle_pos = pattern.cycle_position(day_index, offset)
                if not pattern.in_window(cycle_pos):
                    continue

                # Overlapping windows add up
                probability += pattern.contribution(cycle_pos)

                if pattern.is_peak(cycle_pos):
                    if peak is None or pattern.severity.rank >= peak.severity.rank:
                        peak = pattern

            probability = round_probability(min(max(probability, 0.0), 1.0))
            series.append(TimeSeriesPoint(date=day, probability=probability))

            if peak is not None and self._should_emit(peak):
                events.append(Event(
                    date=day,
                    value=probability,
                    kind=peak.event_kind,
                    component=name,
                    turbine_id=turbine_id,
                ))

        return SynthesisResult(series=series, events=events)

    def _should_emit(self, pattern: EventPattern) -> bool:
        """Major peaks always emit; minor peaks emit 30% of the time."""
        if pattern.severity == SeverityClass.MAJOR:
            return True
        if pattern.severity == SeverityClass.MINOR:
            return self._rng.random() > MINOR_EVENT_THRESHOLD
        return False

    # =========================================
    # Fleet Generation
    # =========================================

    def generate_turbine(self, turbine_id: int, window: GenerationWindow) -> TurbineResult:
        """
        Generate every component series of one turbine.

        Each component gets a fresh random seed offset, drawn before its
        series is synthesized.
        """
        components: Dict[str, List[TimeSeriesPoint]] = {}
        events: List[Event] = []

        for component in self.components:
            seed_offset = self.draw_seed_offset()
            series, component_events = self.synthesize(component, turbine_id, seed_offset, window)
            components[component.lower()] = series
            events.extend(component_events)

        return TurbineResult(
            turbine=TurbineSeries(turbine_id=turbine_id, components=components),
            events=events,
        )

    def generate_batch(self, window: GenerationWindow) -> Generator[TurbineResult, None, None]:
        """
        Generate the fleet one turbine at a time.

        Yields:
            TurbineResult per configured turbine, in configured order
        """
        for turbine_id in self.turbine_ids:
            result = self.generate_turbine(turbine_id, window)
            logger.info(
                f"Generated turbine {turbine_id}: {len(result.turbine.components)} components, "
                f"{window.total_days} days, {len(result.events)} events"
            )
            yield result

    def build_metadata(self, window: GenerationWindow) -> Metadata:
        return Metadata(
            start_date=window.start,
            end_date=window.end,
            total_days=window.total_days,
            components=tuple(self.components),
            turbine_ids=tuple(self.turbine_ids),
        )

    def generate_all(self, window: GenerationWindow) -> GenerationResult:
        """
        Generate the whole fleet.

        Args:
            window: Historical window

        Returns:
            GenerationResult with metadata, turbine series and all events
        """
        result = GenerationResult(metadata=self.build_metadata(window))

        for turbine_result in self.generate_batch(window):
            result.turbines[turbine_result.turbine.turbine_id] = turbine_result.turbine
            result.events.extend(turbine_result.events)

        logger.info(
            f"Generated data for {len(self.turbine_ids)} turbines and "
            f"{len(self.components)} components over {window.total_days} days "
            f"({result.alarm_count} alarms, {result.warning_count} warnings)"
        )
        return result


# =========================================
# Convenience Functions
# =========================================

def generate_fleet_data(
    config: Optional[GenerationConfig] = None,
    end_date: Optional[date] = None
) -> GenerationResult:
    """
    Generate a complete fleet dataset.

    Args:
        config: Generation settings (defaults to GenerationConfig())
        end_date: Last day of the window, exclusive (defaults to today)

    Returns:
        GenerationResult
    """
    config = config or GenerationConfig()
    synthesizer = SeriesSynthesizer.from_config(config)
    window = GenerationWindow.ending_on(end_date, years=config.years)
    return synthesizer.generate_all(window)


def get_available_patterns() -> List[Dict[str, object]]:
    """
    Get information about all pre-built patterns.

    Returns:
        List of pattern info dictionaries
    """
    return [
        {
            "name": p.name,
            "severity": p.severity.value,
            "description": p.description,
            "period_days": p.period_days,
            "duration_days": p.duration_days,
            "magnitude": p.magnitude,
            "event_kind": p.event_kind.value if p.event_kind else None,
        }
        for p in PatternLibrary.get_all_patterns()
    ]
