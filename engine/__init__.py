"""
Engine Module - Synthetic Data Generation

This module generates the simulated fault-probability history of the
wind-turbine fleet and writes it to the flat files served by the API.

Key Components:
- EventPattern: Recurring fault-risk bump (maintenance / minor / major)
- PatternLibrary: Pre-built fleet patterns
- SeriesSynthesizer: Daily series and alarm/warning events
- OutputWriter: Validated, atomic JSON/CSV output

Usage:
    from engine import SeriesSynthesizer, GenerationWindow, OutputWriter

    synth = SeriesSynthesizer(random_seed=42)
    window = GenerationWindow.ending_on(years=10)
    result = synth.generate_all(window)

    OutputWriter("data/simulated").write_all(result)
"""

from .event_patterns import (
    EventPattern,
    PatternLibrary,
    SeverityClass,
)
from .config import GenerationConfig
from .generator import (
    GenerationResult,
    GenerationWindow,
    SeriesSynthesizer,
    generate_fleet_data,
)
from .writer import (
    GenerationError,
    OutputWriter,
    write_generation_result,
)

__all__ = [
    # Event Patterns
    "EventPattern",
    "PatternLibrary",
    "SeverityClass",

    # Generation
    "GenerationConfig",
    "GenerationResult",
    "GenerationWindow",
    "SeriesSynthesizer",
    "generate_fleet_data",

    # Output
    "GenerationError",
    "OutputWriter",
    "write_generation_result",
]

__version__ = "0.1.0"
