from __future__ import annotations

import pytest

from models.records import SensorReading
from tests.factories import make_reading


@pytest.fixture()
def fr_003() -> SensorReading:
    return make_reading(
        station_id="FR_003",
        name="Prenn Pass Slope",
        temperature=42.1,
        humidity=18,
        soil_moisture=10,
        wind_speed=18,
        wind_direction=200,
        smoke=0.95,
        co=0.6,
    )
