from __future__ import annotations

import math

import pytest

from models.records import Severity
from services.overlay import (
    SEVERITY_STYLES,
    format_fri,
    marker_label,
    polygon_center,
    risk_zone_radius,
    wind_arrow_end,
)
from services.scoring import assess


def test_polygon_center_averages_vertices() -> None:
    ring = [[0.0, 0.0], [2.0, 0.0], [2.0, 2.0], [0.0, 2.0]]

    assert polygon_center(ring) == (1.0, 1.0)


def test_polygon_center_can_drop_closing_vertex() -> None:
    ring = [[0.0, 0.0], [3.0, 0.0], [0.0, 3.0], [0.0, 0.0]]

    assert polygon_center(ring, drop_closing_vertex=True) == (1.0, 1.0)
    assert polygon_center(ring) == (0.75, 0.75)


def test_polygon_center_rejects_empty_ring() -> None:
    with pytest.raises(ValueError):
        polygon_center([])


def test_wind_arrow_points_along_bearing() -> None:
    north = wind_arrow_end(108.0, 11.0, wind_speed=0, wind_direction=0)
    east = wind_arrow_end(108.0, 11.0, wind_speed=30, wind_direction=90)

    assert north[0] == pytest.approx(108.0)
    assert north[1] == pytest.approx(11.005)
    assert east[0] == pytest.approx(108.015)
    assert east[1] == pytest.approx(11.0)


def test_wind_arrow_tolerates_missing_values() -> None:
    end = wind_arrow_end(108.0, 11.0, wind_speed=None, wind_direction=math.nan)

    assert end == pytest.approx((108.0, 11.005))


@pytest.mark.parametrize(
    ("fri", "expected"),
    [(0.0, None), (0.5999, None), (0.6, 800.0), (0.8, 900.0), (1.0, 1000.0)],
)
def test_risk_zone_radius(fri, expected) -> None:
    radius = risk_zone_radius(fri)

    if expected is None:
        assert radius is None
    else:
        assert radius == pytest.approx(expected)


def test_every_severity_has_a_style() -> None:
    assert set(SEVERITY_STYLES) == set(Severity)


def test_marker_label_includes_percentage(fr_003) -> None:
    assessment = assess(fr_003)

    label = marker_label(assessment)

    assert label.splitlines() == ["Prenn Pass Slope", "FRI: 80%", "Extreme danger"]
    assert format_fri(assessment.score.composite, decimals=1) == "80.2%"
