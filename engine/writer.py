"""
Generation Output Writer

Persists a generation result as the flat files read by the API and the
browser front-end:

- turbine{id}.json: {"turbineId": int, "components": {name: [points]}}
- events.json: flat list of alarm/warning events
- metadata.json: window and keys of the run

Every file is written to a temporary file in the target directory and
then renamed over the destination, so readers never see a truncated
artifact. The result is validated by the series guard first; a rejected
run writes nothing. Turbine files left over from an earlier run with
other turbine ids are removed once the new metadata is in place.
"""

import csv
import json
import logging
import os
import re
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

from core.timeseries import Event, Metadata, TurbineSeries, format_date, round_probability
from core.validators import SeriesGuard, ValidationResult

from .generator import GenerationResult

logger = logging.getLogger(__name__)

EVENTS_FILENAME = "events.json"
METADATA_FILENAME = "metadata.json"

TURBINE_FILE_PATTERN = re.compile(r"^turbine(\d+)\.(json|csv)$")


class GenerationError(Exception):
    """Raised when a generation result fails validation."""

    def __init__(self, message: str, validation: Optional[ValidationResult] = None):
        super().__init__(message)
        self.validation = validation


def turbine_filename(turbine_id: int, extension: str = "json") -> str:
    return f"turbine{turbine_id}.{extension}"


class OutputWriter:
    """
    Writer for generated fleet data.

    Example:
        writer = OutputWriter("data/simulated")
        paths = writer.write_all(result)
    """

    def __init__(
        self,
        output_dir: str,
        indent: Optional[int] = 2,
        guard: Optional[SeriesGuard] = None
    ):
        """
        Initialize the writer.

        Args:
            output_dir: Target directory (created if missing)
            indent: JSON indentation (None for compact files)
            guard: Output guard (defaults to a non-strict SeriesGuard)
        """
        self.output_dir = output_dir
        self.indent = indent
        self.guard = guard or SeriesGuard()
        self.last_validation: Optional[ValidationResult] = None

    def ensure_directory(self) -> str:
        """Create the output directory (recursive, idempotent)."""
        os.makedirs(self.output_dir, exist_ok=True)
        return self.output_dir

    def write_all(
        self,
        result: GenerationResult,
        write_csv: bool = False,
        validate: bool = True
    ) -> List[str]:
        """
        Validate and persist a complete generation result.

        Args:
            result: Output of SeriesSynthesizer.generate_all()
            write_csv: Also write a long-format CSV per turbine
            validate: Run the series guard before writing

        Returns:
            Paths of all files written

        Raises:
            GenerationError: If validation rejects the result
            OSError: If a file cannot be written
        """
        if validate:
            validation = self.guard.validate(result.metadata, result.turbines, result.events)
            self.last_validation = validation
            if not validation.is_valid:
                first = validation.errors[0]
                raise GenerationError(
                    f"Generation output rejected ({len(validation.errors)} errors): {first.message}",
                    validation=validation,
                )
            for issue in validation.issues:
                logger.debug(f"{issue.severity.value}: {issue.rule_name} - {issue.message}")

        self.ensure_directory()
        paths = []

        for turbine in result.turbines.values():
            paths.append(self.write_turbine(turbine))
            if write_csv:
                paths.append(self.write_turbine_csv(turbine))

        paths.append(self.write_events(result.events))
        paths.append(self.write_metadata(result.metadata))
        self.remove_stale_turbines(result.metadata.turbine_ids, keep_csv=write_csv)

        logger.info(f"Wrote {len(paths)} files to {self.output_dir}")
        return paths

    def remove_stale_turbines(self, turbine_ids: Iterable[int], keep_csv: bool = True) -> List[str]:
        """
        Delete turbine files of a previous run that the current metadata
        no longer lists.

        Args:
            turbine_ids: Turbines of the current run
            keep_csv: Keep CSV exports of current turbines (False when
                this run wrote none, so older exports are stale)

        Returns:
            Paths of the removed files
        """
        keep = set(turbine_ids)
        removed = []
        for name in sorted(os.listdir(self.output_dir)):
            match = TURBINE_FILE_PATTERN.match(name)
            if not match:
                continue
            stale_csv = match.group(2) == "csv" and not keep_csv
            if int(match.group(1)) not in keep or stale_csv:
                path = os.path.join(self.output_dir, name)
                os.unlink(path)
                removed.append(path)
        if removed:
            logger.info(f"Removed {len(removed)} stale turbine files from {self.output_dir}")
        return removed

    def write_turbine(self, turbine: TurbineSeries) -> str:
        return self._write_json(turbine_filename(turbine.turbine_id), turbine.to_dict())

    def write_events(self, events: Iterable[Event]) -> str:
        return self._write_json(EVENTS_FILENAME, [event.to_dict() for event in events])

    def write_metadata(self, metadata: Metadata) -> str:
        return self._write_json(METADATA_FILENAME, metadata.to_dict())

    def write_turbine_csv(self, turbine: TurbineSeries) -> str:
        """
        Write one turbine as long-format CSV (date, component, probability).

        Returns:
            Path of the CSV file
        """
        self.ensure_directory()
        path = os.path.join(self.output_dir, turbine_filename(turbine.turbine_id, "csv"))
        with atomic_write(path, newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["date", "component", "probability"])
            for component, series in turbine.components.items():
                for point in series:
                    writer.writerow([
                        format_date(point.date),
                        component,
                        round_probability(point.probability),
                    ])
        return path

    def _write_json(self, filename: str, payload: Any) -> str:
        self.ensure_directory()
        path = os.path.join(self.output_dir, filename)
        with atomic_write(path) as f:
            json.dump(payload, f, indent=self.indent)
        return path


@contextmanager
def atomic_write(path: str, newline: Optional[str] = None) -> Iterator[TextIO]:
    """
    Open a temp file next to `path` and rename it over `path` on success.

    On error the temp file is removed and the destination is untouched.

    Usage:
        with atomic_write("out/metadata.json") as f:
            json.dump(payload, f)
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, temp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.",
        suffix=".tmp",
        dir=directory,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline=newline) as f:
            yield f
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def write_generation_result(
    result: GenerationResult,
    output_dir: str,
    write_csv: bool = False
) -> Dict[str, Any]:
    """
    Convenience function to persist a result.

    Returns:
        Summary dictionary with the files written and event counts
    """
    writer = OutputWriter(output_dir)
    paths = writer.write_all(result, write_csv=write_csv)
    return {
        "output_dir": output_dir,
        "files": paths,
        "total_days": result.metadata.total_days,
        "alarms": result.alarm_count,
        "warnings": result.warning_count,
        "validation_status": writer.last_validation.status if writer.last_validation else None,
    }
