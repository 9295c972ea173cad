"""Unit tests for Fire Risk Index scoring and alert classification."""

from __future__ import annotations

import math

import pytest

from models.records import AlertAction, RiskScore, Severity
from services.scoring import (
    CO_WEIGHT,
    HUMIDITY_WEIGHT,
    SMOKE_WEIGHT,
    SOIL_WEIGHT,
    TEMPERATURE_WEIGHT,
    WIND_WEIGHT,
    assess,
    classify,
    score,
)
from tests.factories import make_reading


def _risk(composite: float) -> RiskScore:
    return RiskScore(
        composite=composite, temperature=0.0, humidity=0.0, soil=0.0, wind=0.0, smoke=0.0, co=0.0
    )


def test_weights_sum_to_one() -> None:
    weights = (TEMPERATURE_WEIGHT, HUMIDITY_WEIGHT, SOIL_WEIGHT, WIND_WEIGHT, SMOKE_WEIGHT, CO_WEIGHT)
    assert math.fsum(weights) == 1.0


@pytest.mark.parametrize(
    ("temperature", "wind_speed", "co"),
    [(50, 30, 1), (65, 80, 4.5), (1000, 30.0001, 1)],
)
def test_saturated_reading_scores_exactly_one(temperature, wind_speed, co) -> None:
    reading = make_reading(
        temperature=temperature, humidity=0, soil_moisture=0, wind_speed=wind_speed, smoke=1, co=co
    )

    risk = score(reading)

    assert risk.composite == 1.0
    assert classify(risk).severity is Severity.EXTREME
    assert classify(risk).action is AlertAction.EVACUATE


def test_benign_reading_scores_exactly_zero() -> None:
    reading = make_reading(
        temperature=0, humidity=100, soil_moisture=100, wind_speed=0, smoke=0, co=0
    )

    risk = score(reading)

    assert risk.composite == 0.0
    assert classify(risk).severity is Severity.LOW
    assert classify(risk).action is AlertAction.SAFE


def test_fr_003_scenario_is_extreme(fr_003) -> None:
    risk = score(fr_003)

    assert risk.temperature == pytest.approx(0.842)
    assert risk.humidity == pytest.approx(0.82)
    assert risk.soil == pytest.approx(0.90)
    assert risk.wind == pytest.approx(0.60)
    assert risk.smoke == pytest.approx(0.95)
    assert risk.co == pytest.approx(0.60)
    assert risk.composite == pytest.approx(0.802)

    alert = classify(risk)
    assert alert.severity is Severity.EXTREME
    assert alert.action is AlertAction.EVACUATE


def test_reading_engineered_to_point_eight_is_extreme() -> None:
    reading = make_reading(
        temperature=50, humidity=0, soil_moisture=0, wind_speed=30, smoke=0, co=0.5
    )

    risk = score(reading)

    assert risk.composite == 0.8
    assert classify(risk).severity is Severity.EXTREME


def test_reading_engineered_to_point_six_is_high() -> None:
    reading = make_reading(temperature=50, humidity=0, soil_moisture=0)

    risk = score(reading)

    assert risk.composite == 0.6
    assert classify(risk).severity is Severity.HIGH


@pytest.mark.parametrize(
    ("composite", "severity", "action"),
    [
        (1.0, Severity.EXTREME, AlertAction.EVACUATE),
        (0.8, Severity.EXTREME, AlertAction.EVACUATE),
        (0.7999999, Severity.HIGH, AlertAction.WARNING),
        (0.6, Severity.HIGH, AlertAction.WARNING),
        (0.5999999, Severity.MEDIUM, AlertAction.MONITOR),
        (0.3, Severity.MEDIUM, AlertAction.MONITOR),
        (0.2999999, Severity.LOW, AlertAction.SAFE),
        (0.0, Severity.LOW, AlertAction.SAFE),
    ],
)
def test_classification_boundaries_are_inclusive(composite, severity, action) -> None:
    alert = classify(_risk(composite))

    assert alert.severity is severity
    assert alert.action is action


def test_increasing_temperature_never_lowers_score() -> None:
    previous = -1.0
    for temperature in range(-20, 80, 3):
        reading = make_reading(
            temperature=temperature, humidity=40, soil_moisture=30, wind_speed=10, smoke=0.2, co=0.1
        )
        composite = score(reading).composite
        assert composite >= previous
        previous = composite


def test_score_is_idempotent(fr_003) -> None:
    first = score(fr_003)
    second = score(fr_003)

    assert first == second
    assert first.composite.hex() == second.composite.hex()


def test_missing_fields_contribute_no_risk() -> None:
    risk = score(make_reading())

    assert risk.composite == 0.0
    assert risk.sub_scores() == {
        "temperature": 0.0,
        "humidity": 0.0,
        "soil": 0.0,
        "wind": 0.0,
        "smoke": 0.0,
        "co": 0.0,
    }


def test_missing_humidity_only_drops_that_factor() -> None:
    complete = make_reading(temperature=40, humidity=20, soil_moisture=30, wind_speed=15, smoke=0.5, co=0.5)
    partial = make_reading(temperature=40, soil_moisture=30, wind_speed=15, smoke=0.5, co=0.5)

    difference = score(complete).composite - score(partial).composite

    assert score(partial).humidity == 0.0
    assert difference == pytest.approx(0.8 * HUMIDITY_WEIGHT)


def test_nan_is_treated_as_missing() -> None:
    reading = make_reading(temperature=math.nan, humidity=math.nan, smoke=math.nan)

    risk = score(reading)

    assert risk.composite == 0.0
    assert not math.isnan(risk.composite)


def test_out_of_range_inputs_are_clamped() -> None:
    reading = make_reading(
        temperature=-15, humidity=-30, soil_moisture=140, wind_speed=-5, smoke=3.5, co=-1
    )

    risk = score(reading)

    assert risk.temperature == 0.0
    assert risk.humidity == 1.0
    assert risk.soil == 0.0
    assert risk.wind == 0.0
    assert risk.smoke == 1.0
    assert risk.co == 0.0
    assert 0.0 <= risk.composite <= 1.0
    for value in risk.sub_scores().values():
        assert 0.0 <= value <= 1.0


def test_assess_pairs_reading_with_score_and_alert(fr_003) -> None:
    assessment = assess(fr_003)

    assert assessment.reading is fr_003
    assert assessment.score == score(fr_003)
    assert assessment.alert == classify(score(fr_003))
