"""
Batch generation entry point.

Run with:
    python -m engine --output-dir data/simulated --years 10 --seed 42

Options default to the DATA_DIR, GENERATION_YEARS and GENERATION_SEED
environment variables.
"""

import argparse
import logging
import os
import sys
from datetime import date
from typing import List, Optional

from core.timeseries import SeriesFormatError, parse_date

from .config import GenerationConfig
from .generator import GenerationWindow, SeriesSynthesizer
from .writer import GenerationError, OutputWriter

logger = logging.getLogger("engine")


def build_parser() -> argparse.ArgumentParser:
    defaults = GenerationConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="python -m engine",
        description="Generate simulated wind-turbine fault-probability data",
    )
    parser.add_argument(
        "--output-dir",
        default=defaults.output_dir,
        help=f"Directory for the generated files (default: {defaults.output_dir})",
    )
    parser.add_argument(
        "--years",
        type=int,
        default=defaults.years,
        help=f"Length of the historical window in years (default: {defaults.years})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.random_seed,
        help="Random seed for reproducible output (default: real randomness)",
    )
    parser.add_argument(
        "--end-date",
        default=None,
        help="Window end, YYYY-MM-DD, exclusive (default: today)",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Also export each turbine as long-format CSV",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        parser = build_parser()
    except ValueError as e:
        logger.error(f"Invalid environment settings: {e}")
        return 2

    args = parser.parse_args(argv)

    try:
        end_date = parse_date(args.end_date) if args.end_date else date.today()
        config = GenerationConfig(
            years=args.years,
            random_seed=args.seed,
            output_dir=args.output_dir,
            write_csv=args.csv,
        )
        window = GenerationWindow.ending_on(end_date, years=config.years)
    except (SeriesFormatError, ValueError) as e:
        logger.error(f"Invalid arguments: {e}")
        return 2

    logger.info(f"Generating {window.start} .. {window.end} ({window.total_days} days) into {config.output_dir}")

    synthesizer = SeriesSynthesizer.from_config(config)
    result = synthesizer.generate_all(window)

    try:
        OutputWriter(config.output_dir).write_all(result, write_csv=config.write_csv)
    except GenerationError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
