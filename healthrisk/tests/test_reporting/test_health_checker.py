"""Tests for operational health checks."""

import sqlite3
from datetime import UTC, datetime

import httpx
import respx

from healthrisk.config.schema import SourceConfig
from healthrisk.reporting.health_checker import HealthChecker, _age_minutes
from healthrisk.storage import run_repo

SOURCES = SourceConfig(
    primary_weather_url="https://meteo.test/v1/forecast",
    secondary_weather_url="https://power.test/daily",
    air_quality_url="https://aq.test/v2",
    timeout_seconds=1.0,
)


class TestHealthChecker:
    @respx.mock
    def test_all_reachable(self, db: sqlite3.Connection):
        respx.get(url__startswith="https://meteo.test/").mock(return_value=httpx.Response(200))
        # A 4xx still proves the service is up.
        respx.get(url__startswith="https://power.test/").mock(return_value=httpx.Response(422))
        respx.get(url__startswith="https://aq.test/").mock(return_value=httpx.Response(200))

        status = HealthChecker(db, SOURCES).check()

        assert status.db_connected
        assert status.primary_weather_reachable
        assert status.secondary_weather_reachable
        assert status.air_quality_reachable
        assert status.last_run_age_minutes is None
        assert status.last_run_status is None

    @respx.mock
    def test_unreachable_sources(self, db: sqlite3.Connection):
        respx.get(url__startswith="https://meteo.test/").mock(return_value=httpx.Response(503))
        respx.get(url__startswith="https://power.test/").mock(
            side_effect=httpx.ConnectError("refused")
        )
        respx.get(url__startswith="https://aq.test/").mock(return_value=httpx.Response(200))

        status = HealthChecker(db, SOURCES).check()

        assert not status.primary_weather_reachable
        assert not status.secondary_weather_reachable
        assert status.air_quality_reachable

    @respx.mock
    def test_last_run_reported(self, db: sqlite3.Connection):
        respx.get(url__startswith="https://").mock(return_value=httpx.Response(200))
        run_repo.create_run(db, "run-1", "scheduled")
        run_repo.complete_run(db, "run-1", "completed")

        status = HealthChecker(db, SOURCES).check()

        assert status.last_run_status == "completed"
        assert status.last_run_age_minutes is not None
        assert status.last_run_age_minutes < 5


    @respx.mock
    def test_closed_database_reported_not_raised(self, db: sqlite3.Connection):
        respx.get(url__startswith="https://").mock(return_value=httpx.Response(200))
        db.close()

        status = HealthChecker(db, SOURCES).check()

        assert not status.db_connected
        assert status.last_run_status is None
        assert status.primary_weather_reachable

class TestAgeMinutes:
    def test_sqlite_timestamp_treated_as_utc(self):
        now = datetime(2026, 10, 16, 12, 30, tzinfo=UTC)
        assert _age_minutes("2026-10-16 12:00:00", now) == 30.0

    def test_missing_or_invalid(self):
        assert _age_minutes(None) is None
        assert _age_minutes("not a time") is None
