"""Aggregation logic for station assessments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

from models.records import AlertClassification, Severity, StationAssessment


def _empty_counts() -> Dict[Severity, int]:
    return {severity: 0 for severity in Severity}


def tally_severities(alerts: Iterable[AlertClassification]) -> Dict[Severity, int]:
    """Count alerts per severity, including zero counts for absent levels."""
    counts = _empty_counts()
    for alert in alerts:
        counts[alert.severity] += 1
    return counts


@dataclass
class AssessmentSummary:
    """Computed statistics for a batch of station assessments."""

    station_count: int = 0
    min_fri: float | None = None
    max_fri: float | None = None
    mean_fri: float | None = None
    per_severity_count: Dict[Severity, int] = field(default_factory=_empty_counts)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def summarize(self, assessments: Iterable[StationAssessment]) -> AssessmentSummary:
        items = list(assessments)
        summary = AssessmentSummary(
            per_severity_count=tally_severities(item.alert for item in items),
        )
        total = 0.0

        for assessment in items:
            summary.station_count += 1
            fri = assessment.score.composite
            total += fri

            if summary.min_fri is None or fri < summary.min_fri:
                summary.min_fri = fri
            if summary.max_fri is None or fri > summary.max_fri:
                summary.max_fri = fri

        if summary.station_count:
            summary.mean_fri = total / summary.station_count

        return summary
