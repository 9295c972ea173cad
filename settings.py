from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


_TABLE_NAME_ENV = "RESULTS_TABLE_NAME"
_TABLE_PATH_ENV = "RESULTS_PERSISTENCE_PATH"
_STATIONS_PATH_ENV = "FIRE_STATIONS_PATH"
_WORKER_COUNT_ENV = "PROCESSOR_WORKER_COUNT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_STATIONS_PATH = Path(__file__).resolve().parent / "data" / "fire_stations.json"


@dataclass(frozen=True)
class Settings:
    table_name: str
    table_persistence_path: Optional[str]
    stations_path: str
    processor_workers: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_worker_count(default: int) -> int:
    value = os.getenv(_WORKER_COUNT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        table_name=_read_str_env(_TABLE_NAME_ENV, "fri_batches"),
        table_persistence_path=_read_optional_env(_TABLE_PATH_ENV, "./tmp/fri_batches.json"),
        stations_path=_read_str_env(_STATIONS_PATH_ENV, str(DEFAULT_STATIONS_PATH)),
        processor_workers=_read_worker_count(4),
        log_level=_read_log_level("INFO"),
    )
