"""
Generation Configuration

The component list, turbine ids and pattern set are passed explicitly
to the generator so tests can run with small fixtures. Defaults match
the simulated four-turbine fleet of the dashboard.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .event_patterns import EventPattern, PatternLibrary

DEFAULT_COMPONENTS: Tuple[str, ...] = (
    "Converter", "Generator", "Nacelle", "Rotor", "Tower",
    "Transformer", "Transmission", "Turbine", "Yaw",
)

DEFAULT_TURBINE_IDS: Tuple[int, ...] = (1, 2, 3, 4)

DEFAULT_DATA_DIR = "data/simulated"
DEFAULT_YEARS = 10

# Per-series phase offsets are drawn from [0, MAX_SEED_OFFSET)
MAX_SEED_OFFSET = 30


@dataclass
class GenerationConfig:
    """
    Settings for one batch generation run.

    Attributes:
        components: Component display names, in rank order
        turbine_ids: Turbine ids, in output order
        patterns: Fault patterns applied to every series
        years: Length of the historical window
        random_seed: Seed for reproducible output (None = real randomness)
        output_dir: Directory for the generated files
        write_csv: Also export each turbine as CSV
    """
    components: Tuple[str, ...] = DEFAULT_COMPONENTS
    turbine_ids: Tuple[int, ...] = DEFAULT_TURBINE_IDS
    patterns: List[EventPattern] = field(default_factory=PatternLibrary.get_all_patterns)
    years: int = DEFAULT_YEARS
    random_seed: Optional[int] = None
    output_dir: str = DEFAULT_DATA_DIR
    write_csv: bool = False

    def __post_init__(self):
        if not self.components:
            raise ValueError("At least one component is required")
        if not self.turbine_ids:
            raise ValueError("At least one turbine id is required")
        if len({c.lower() for c in self.components}) != len(self.components):
            raise ValueError("Component names must be unique (case-insensitive)")
        if len(set(self.turbine_ids)) != len(self.turbine_ids):
            raise ValueError("Turbine ids must be unique")
        if any(t <= 0 for t in self.turbine_ids):
            raise ValueError("Turbine ids must be positive")
        if self.years <= 0:
            raise ValueError(f"years must be positive, got {self.years}")

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """Build a config from DATA_DIR, GENERATION_YEARS and GENERATION_SEED."""
        seed = os.getenv("GENERATION_SEED")
        return cls(
            years=int(os.getenv("GENERATION_YEARS", DEFAULT_YEARS)),
            random_seed=int(seed) if seed else None,
            output_dir=get_data_dir(),
        )


def get_data_dir() -> str:
    """Get the generated-data directory from environment."""
    return os.getenv("DATA_DIR", DEFAULT_DATA_DIR)
