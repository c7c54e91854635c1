"""
Series-Guard Validation Layer

Checks a complete generation result before it is persisted. The UI
trusts the metadata file to describe every series exactly, so an
inconsistent run must never reach disk.

Philosophy:
- Hard failures: broken invariants (gaps, out-of-range values,
  metadata that disagrees with the series) → reject the run
- Soft warnings: suspicious but usable (e.g. a turbine with no
  events at all) → accept with warnings
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
import logging

from .timeseries import Event, EventKind, Metadata, TimeSeriesPoint, TurbineSeries

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Severity levels for validation issues."""
    ERROR = "error"        # Broken invariant - must reject
    WARNING = "warning"    # Suspicious - accept with warning
    INFO = "info"          # Informational note


@dataclass
class ValidationIssue:
    """
    A single validation issue found in a generation result.

    Attributes:
        severity: How serious is this issue
        rule_name: Identifier for the rule that was violated
        message: Human-readable description
        turbine_id: Turbine concerned, if any
        component: Component concerned, if any
        actual_value: The problematic value
    """
    severity: ValidationSeverity
    rule_name: str
    message: str
    turbine_id: Optional[int] = None
    component: Optional[str] = None
    actual_value: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "severity": self.severity.value,
            "rule_name": self.rule_name,
            "message": self.message,
            "turbine_id": self.turbine_id,
            "component": self.component,
            "actual_value": self.actual_value,
        }


@dataclass
class ValidationResult:
    """
    Result of validating a generation result.

    Attributes:
        is_valid: True if the output can be written (possibly with warnings)
        status: "accepted", "accepted_with_warnings", or "rejected"
        issues: List of all validation issues found
    """
    is_valid: bool
    status: str
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        warnings = [i for i in self.issues if i.severity == ValidationSeverity.WARNING]
        infos = [i for i in self.issues if i.severity == ValidationSeverity.INFO]

        return {
            "is_valid": self.is_valid,
            "status": self.status,
            "error_count": len(self.errors),
            "warning_count": len(warnings),
            "info_count": len(infos),
            "issues": [issue.to_dict() for issue in self.issues],
        }


class SeriesGuard:
    """
    Consistency guard for generated series, events and metadata.

    Example:
        guard = SeriesGuard()
        result = guard.validate(metadata, turbines, events)
        if not result.is_valid:
            print(result.errors[0].message)
    """

    def __init__(self, strict_mode: bool = False):
        """
        Initialize the series guard.

        Args:
            strict_mode: If True, treat warnings as errors (reject more)
        """
        self.strict_mode = strict_mode

    def validate(
        self,
        metadata: Metadata,
        turbines: Mapping[int, TurbineSeries],
        events: Sequence[Event]
    ) -> ValidationResult:
        """
        Validate a full generation result.

        Args:
            metadata: Run metadata
            turbines: Turbine id -> component series
            events: Flat event list

        Returns:
            ValidationResult with status and any issues found
        """
        issues: List[ValidationIssue] = []

        issues.extend(self._validate_metadata_keys(metadata, turbines))
        for turbine in turbines.values():
            for component, series in turbine.components.items():
                issues.extend(self._validate_coverage(metadata, turbine.turbine_id, component, series))
                issues.extend(self._validate_bounds(turbine.turbine_id, component, series))
        issues.extend(self._validate_events(metadata, events))

        errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
        warnings = [i for i in issues if i.severity == ValidationSeverity.WARNING]

        if errors:
            logger.warning(f"Generation output rejected: {len(errors)} error(s)")
            return ValidationResult(is_valid=False, status="rejected", issues=issues)
        elif warnings:
            if self.strict_mode:
                for w in warnings:
                    w.severity = ValidationSeverity.ERROR
                return ValidationResult(is_valid=False, status="rejected", issues=issues)
            return ValidationResult(is_valid=True, status="accepted_with_warnings", issues=issues)
        else:
            return ValidationResult(is_valid=True, status="accepted", issues=issues)

    def _validate_metadata_keys(
        self,
        metadata: Metadata,
        turbines: Mapping[int, TurbineSeries]
    ) -> List[ValidationIssue]:
        """Metadata must enumerate exactly the turbines and component keys written."""
        issues = []

        if metadata.total_days != (metadata.end_date - metadata.start_date).days:
            issues.append(ValidationIssue(
                severity=ValidationSeverity.ERROR,
                rule_name="metadata_total_days",
                message="totalDays does not match the start/end dates",
                actual_value=metadata.total_days,
            ))

        if sorted(metadata.turbine_ids) != sorted(turbines.keys()):
            issues.append(ValidationIssue(
                severity=ValidationSeverity.ERROR,
                rule_name="metadata_turbine_ids",
                message="turbineIds does not match the turbines written",
                actual_value=sorted(turbines.keys()),
            ))

        expected_keys = sorted(metadata.component_keys())
        for turbine_id, turbine in turbines.items():
            if turbine_id != turbine.turbine_id:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="turbine_id_mismatch",
                    message="Turbine record is filed under a different id",
                    turbine_id=turbine.turbine_id,
                ))
            if sorted(turbine.component_names()) != expected_keys:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="metadata_components",
                    message="Component keys do not match the metadata components",
                    turbine_id=turbine.turbine_id,
                    actual_value=sorted(turbine.component_names()),
                ))

        return issues

    def _validate_coverage(
        self,
        metadata: Metadata,
        turbine_id: int,
        component: str,
        series: Sequence[TimeSeriesPoint]
    ) -> List[ValidationIssue]:
        """One point per day from start_date, no gaps or duplicates."""
        if len(series) != metadata.total_days:
            return [ValidationIssue(
                severity=ValidationSeverity.ERROR,
                rule_name="series_length",
                message=f"Series has {len(series)} points, expected {metadata.total_days}",
                turbine_id=turbine_id,
                component=component,
                actual_value=len(series),
            )]

        for index, point in enumerate(series):
            expected = metadata.start_date + timedelta(days=index)
            if point.date != expected:
                return [ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="series_contiguity",
                    message=f"Point {index} is dated {point.date}, expected {expected}",
                    turbine_id=turbine_id,
                    component=component,
                    actual_value=str(point.date),
                )]

        return []

    def _validate_bounds(
        self,
        turbine_id: int,
        component: str,
        series: Iterable[TimeSeriesPoint]
    ) -> List[ValidationIssue]:
        for point in series:
            if not 0.0 <= point.probability <= 1.0:
                return [ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="probability_bounds",
                    message=f"Probability on {point.date} is outside [0, 1]",
                    turbine_id=turbine_id,
                    component=component,
                    actual_value=point.probability,
                )]
        return []

    def _validate_events(
        self,
        metadata: Metadata,
        events: Sequence[Event]
    ) -> List[ValidationIssue]:
        """Event values, references and uniqueness."""
        issues = []
        known_components = set(metadata.component_keys())
        known_turbines = set(metadata.turbine_ids)

        for event in events:
            if not 0.0 <= event.value <= 1.0:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="event_value_bounds",
                    message=f"Event value on {event.date} is outside [0, 1]",
                    turbine_id=event.turbine_id,
                    component=event.component,
                    actual_value=event.value,
                ))
            if event.component.lower() not in known_components or event.turbine_id not in known_turbines:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="event_reference",
                    message="Event refers to an unknown turbine or component",
                    turbine_id=event.turbine_id,
                    component=event.component,
                ))
            if not metadata.start_date <= event.date < metadata.end_date:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="event_outside_window",
                    message=f"Event on {event.date} is outside the generated window",
                    turbine_id=event.turbine_id,
                    component=event.component,
                    actual_value=str(event.date),
                ))

        counts = Counter((e.component.lower(), e.turbine_id, e.date) for e in events)
        for (component, turbine_id, day), count in counts.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    rule_name="event_uniqueness",
                    message=f"{count} events on {day} for one component",
                    turbine_id=turbine_id,
                    component=component,
                    actual_value=count,
                ))

        turbines_with_events = {e.turbine_id for e in events}
        for turbine_id in metadata.turbine_ids:
            if turbine_id not in turbines_with_events:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    rule_name="turbine_without_events",
                    message="Turbine has no alarms or warnings in the window",
                    turbine_id=turbine_id,
                ))

        if events and not any(e.kind == EventKind.ALARM for e in events):
            issues.append(ValidationIssue(
                severity=ValidationSeverity.INFO,
                rule_name="no_alarms",
                message="The run produced warnings but no alarms",
            ))

        return issues


def validate_generation_output(
    metadata: Metadata,
    turbines: Mapping[int, TurbineSeries],
    events: Sequence[Event],
    strict: bool = False
) -> ValidationResult:
    """
    Convenience function to validate a generation result.

    Args:
        metadata: Run metadata
        turbines: Turbine id -> component series
        events: Flat event list
        strict: If True, treat warnings as errors

    Returns:
        ValidationResult
    """
    guard = SeriesGuard(strict_mode=strict)
    return guard.validate(metadata, turbines, events)
