"""Shared test fixtures."""

import sqlite3
from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from healthrisk.config.defaults import DEFAULT_REGIONS
from healthrisk.config.schema import EngineConfig
from healthrisk.models.weather import (
    DailySeries,
    HourlySeries,
    WeatherSnapshot,
    WeatherSource,
)
from healthrisk.storage.database import connect, run_migrations


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    """A migrated SQLite database in a temp directory."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> EngineConfig:
    """Return default EngineConfig with default regions."""
    return EngineConfig(regions=DEFAULT_REGIONS)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "risk": {"thresholds": {"hsi": 75}},
        "sources": {"forecast_days": 3},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def make_snapshot() -> Callable[..., WeatherSnapshot]:
    """Factory for fully-populated canonical snapshots."""

    def _make(
        days: int = 7,
        temperature_max: list[float] | None = None,
        temperature_min: list[float] | None = None,
        humidity: float = 60.0,
        wind_speed: float = 10.0,
        uv_index: float = 5.0,
        precipitation: float = 0.0,
        imputed: frozenset[tuple[str, int]] = frozenset(),
        source: WeatherSource = WeatherSource.OPEN_METEO,
    ) -> WeatherSnapshot:
        tmax = temperature_max if temperature_max is not None else [25.0] * days
        tmin = temperature_min if temperature_min is not None else [15.0] * days
        hours = days * 24
        return WeatherSnapshot(
            latitude=43.7,
            longitude=-79.4,
            source=source,
            hourly=HourlySeries(
                time=[f"2026-10-{16 + h // 24:02d}T{h % 24:02d}:00" for h in range(hours)],
                temperature=[20.0] * hours,
                humidity=[humidity] * hours,
                wind_speed=[wind_speed] * hours,
                precipitation=[precipitation / 24] * hours,
            ),
            daily=DailySeries(
                time=[f"2026-10-{16 + d:02d}" for d in range(days)],
                temperature_max=tmax,
                temperature_min=tmin,
                uv_index_max=[uv_index] * days,
                precipitation_sum=[precipitation] * days,
            ),
            imputed=imputed,
        )

    return _make
