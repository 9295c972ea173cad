from __future__ import annotations

from typing import Iterable

from datastore.result_table import build_default_table
from services.processor import build_default_processor
from services.stations import build_default_stations
from settings import DEFAULT_STATIONS_PATH, get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


CACHES = (
    get_settings,
    build_default_table,
    build_default_processor,
    build_default_stations,
)


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    table_path = tmp_path / "db.json"
    stations_path = tmp_path / "stations.json"
    stations_path.write_text('[{"sensorId": "ENV_1", "longitude": 1, "latitude": 2}]')

    monkeypatch.setenv("RESULTS_TABLE_NAME", "custom-table")
    monkeypatch.setenv("RESULTS_PERSISTENCE_PATH", str(table_path))
    monkeypatch.setenv("FIRE_STATIONS_PATH", str(stations_path))
    monkeypatch.setenv("PROCESSOR_WORKER_COUNT", "2")
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    _clear_caches(CACHES)

    table = build_default_table()
    processor = build_default_processor()
    stations = build_default_stations()

    try:
        assert table.name == "custom-table"
        assert table.persistence_path == table_path
        assert processor.executor._max_workers == 2
        assert [reading.station_id for reading in stations] == ["ENV_1"]
        assert get_settings().log_level == "DEBUG"
    finally:
        processor.shutdown()
        _clear_caches(CACHES)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PROCESSOR_WORKER_COUNT", "-3")
    monkeypatch.setenv("RESULTS_PERSISTENCE_PATH", "  ")
    monkeypatch.setenv("FIRE_STATIONS_PATH", "")
    monkeypatch.setenv("RESULTS_TABLE_NAME", "")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.processor_workers == 4
        assert settings.table_persistence_path is None
        assert settings.stations_path == str(DEFAULT_STATIONS_PATH)
        assert settings.table_name == "fri_batches"
    finally:
        get_settings.cache_clear()
