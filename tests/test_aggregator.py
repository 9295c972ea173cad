"""Unit tests for the aggregation logic."""

from __future__ import annotations

from models.records import AlertAction, AlertClassification, Severity
from services.aggregator import Aggregator, tally_severities
from services.scoring import assess
from tests.factories import make_reading


def test_summarize_empty_iterable_returns_zero_counts() -> None:
    aggregator = Aggregator()

    summary = aggregator.summarize([])

    assert summary.station_count == 0
    assert summary.min_fri is None
    assert summary.max_fri is None
    assert summary.mean_fri is None
    assert summary.per_severity_count == {
        Severity.LOW: 0,
        Severity.MEDIUM: 0,
        Severity.HIGH: 0,
        Severity.EXTREME: 0,
    }


def test_summarize_computes_statistics() -> None:
    aggregator = Aggregator()
    assessments = [
        assess(make_reading(station_id="a")),
        assess(make_reading(station_id="b", temperature=50, humidity=0, soil_moisture=0)),
        assess(
            make_reading(
                station_id="c", temperature=50, humidity=0, soil_moisture=0, wind_speed=30, smoke=1, co=1
            )
        ),
    ]

    summary = aggregator.summarize(assessments)

    assert summary.station_count == 3
    assert summary.min_fri == 0.0
    assert summary.max_fri == 1.0
    assert summary.mean_fri == (0.0 + 0.6 + 1.0) / 3
    assert summary.per_severity_count == {
        Severity.LOW: 1,
        Severity.MEDIUM: 0,
        Severity.HIGH: 1,
        Severity.EXTREME: 1,
    }


def test_severity_counts_sum_to_station_count() -> None:
    assessments = [
        assess(make_reading(station_id=f"s{index}", temperature=index * 2.5, humidity=100 - index * 5))
        for index in range(20)
    ]

    summary = Aggregator().summarize(assessments)

    assert sum(summary.per_severity_count.values()) == len(assessments)


def test_tally_severities_includes_absent_levels() -> None:
    alerts = [
        AlertClassification(Severity.HIGH, AlertAction.WARNING),
        AlertClassification(Severity.HIGH, AlertAction.WARNING),
        AlertClassification(Severity.LOW, AlertAction.SAFE),
    ]

    counts = tally_severities(alerts)

    assert counts == {
        Severity.LOW: 1,
        Severity.MEDIUM: 0,
        Severity.HIGH: 2,
        Severity.EXTREME: 0,
    }
    assert sum(counts.values()) == len(alerts)


def test_summarize_counts_severities_through_tally(monkeypatch) -> None:
    seen: list[list[AlertClassification]] = []

    def recording_tally(alerts):
        alerts = list(alerts)
        seen.append(alerts)
        return tally_severities(alerts)

    monkeypatch.setattr("services.aggregator.tally_severities", recording_tally)
    assessments = [
        assess(make_reading(station_id="a")),
        assess(make_reading(station_id="b", temperature=50, humidity=0, soil_moisture=0)),
    ]

    summary = Aggregator().summarize(assessments)

    assert seen == [[item.alert for item in assessments]]
    assert summary.per_severity_count[Severity.LOW] == 1
    assert summary.per_severity_count[Severity.HIGH] == 1
