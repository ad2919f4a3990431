"""Tests for the cached weather fetcher and its fallback hop."""

from datetime import date
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from healthrisk.ingest.cache import TemporalCache
from healthrisk.ingest.nasa_power_client import NasaPowerClient
from healthrisk.ingest.open_meteo_client import OpenMeteoClient
from healthrisk.ingest.weather_fetcher import WeatherFetcher, WeatherSourceError
from healthrisk.models.weather import (
    FailureReason,
    FetchOutcome,
    SourceFailure,
    WeatherSource,
)


def _failure(source: WeatherSource, status: int | None = 503) -> SourceFailure:
    return SourceFailure(
        source=source,
        reason=FailureReason.HTTP_STATUS if status else FailureReason.TRANSPORT,
        detail="boom",
        status_code=status,
    )


@pytest.fixture
def primary():
    return MagicMock(spec=OpenMeteoClient)


@pytest.fixture
def secondary():
    return MagicMock(spec=NasaPowerClient)


@pytest.fixture
def fetcher(primary, secondary):
    return WeatherFetcher(TemporalCache(ttl_minutes=15), primary, secondary)


class TestWeatherFetcher:
    def test_primary_success_skips_secondary(self, fetcher, primary, secondary, make_snapshot):
        snap = make_snapshot()
        primary.fetch.return_value = FetchOutcome.success(snap)

        assert fetcher.fetch(43.7, -79.4, 7) is snap
        primary.fetch.assert_called_once_with(43.7, -79.4, 7)
        secondary.fetch.assert_not_called()

    def test_repeat_call_served_from_cache(self, fetcher, primary, make_snapshot):
        primary.fetch.return_value = FetchOutcome.success(make_snapshot())

        first = fetcher.fetch(43.7, -79.4, 7)
        second = fetcher.fetch(43.7, -79.4, 7)

        assert first is second
        assert primary.fetch.call_count == 1

    def test_different_days_is_a_separate_entry(self, fetcher, primary, make_snapshot):
        primary.fetch.return_value = FetchOutcome.success(make_snapshot())

        fetcher.fetch(43.7, -79.4, 7)
        fetcher.fetch(43.7, -79.4, 3)

        assert primary.fetch.call_count == 2

    def test_falls_back_on_primary_failure(self, fetcher, primary, secondary, make_snapshot):
        fallback = make_snapshot(source=WeatherSource.NASA_POWER)
        primary.fetch.return_value = FetchOutcome.failed(_failure(WeatherSource.OPEN_METEO))
        secondary.fetch.return_value = FetchOutcome.success(fallback)

        assert fetcher.fetch(43.7, -79.4, 7) is fallback
        secondary.fetch.assert_called_once_with(43.7, -79.4, 7)

    def test_fallback_result_is_cached(self, fetcher, primary, secondary, make_snapshot):
        primary.fetch.return_value = FetchOutcome.failed(
            _failure(WeatherSource.OPEN_METEO, status=None)
        )
        secondary.fetch.return_value = FetchOutcome.success(
            make_snapshot(source=WeatherSource.NASA_POWER)
        )

        fetcher.fetch(43.7, -79.4, 7)
        fetcher.fetch(43.7, -79.4, 7)

        assert primary.fetch.call_count == 1
        assert secondary.fetch.call_count == 1

    def test_both_fail_raises_with_primary_failure(self, fetcher, primary, secondary):
        primary_failure = _failure(WeatherSource.OPEN_METEO, status=503)
        primary.fetch.return_value = FetchOutcome.failed(primary_failure)
        secondary.fetch.return_value = FetchOutcome.failed(
            _failure(WeatherSource.NASA_POWER, status=500)
        )

        with pytest.raises(WeatherSourceError) as excinfo:
            fetcher.fetch(43.7, -79.4, 7)

        assert excinfo.value.primary is primary_failure
        assert excinfo.value.status_code == 503
        assert excinfo.value.secondary.source == WeatherSource.NASA_POWER

    def test_failure_is_not_cached(self, fetcher, primary, secondary, make_snapshot):
        primary.fetch.side_effect = [
            FetchOutcome.failed(_failure(WeatherSource.OPEN_METEO)),
            FetchOutcome.success(make_snapshot()),
        ]
        secondary.fetch.return_value = FetchOutcome.failed(_failure(WeatherSource.NASA_POWER))

        with pytest.raises(WeatherSourceError):
            fetcher.fetch(43.7, -79.4, 7)
        fetcher.fetch(43.7, -79.4, 7)

        assert primary.fetch.call_count == 2

    def test_clear_cache(self, fetcher, primary, make_snapshot):
        primary.fetch.return_value = FetchOutcome.success(make_snapshot())

        fetcher.fetch(43.7, -79.4, 7)
        fetcher.clear_cache()
        fetcher.fetch(43.7, -79.4, 7)

        assert primary.fetch.call_count == 2


class TestFallbackOverHttp:
    @respx.mock
    def test_primary_503_served_by_nasa_power(self):
        respx.get(url__startswith="https://meteo.test/").mock(
            return_value=httpx.Response(503)
        )
        respx.get(url__startswith="https://power.test/").mock(
            return_value=httpx.Response(
                200,
                json={
                    "properties": {
                        "parameter": {
                            "T2M_MAX": {"20261016": 31.0},
                            "T2M_MIN": {"20261016": 19.0},
                            "ALLSKY_SFC_UV_INDEX": {"20261016": 7.0},
                            "PRECTOTCORR": {"20261016": 0.0},
                            "WS2M": {"20261016": 2.0},
                        }
                    }
                },
            )
        )
        fetcher = WeatherFetcher(
            TemporalCache(),
            OpenMeteoClient(base_url="https://meteo.test/v1/forecast", timeout=1.0),
            NasaPowerClient(
                base_url="https://power.test/daily", timeout=1.0,
                today=lambda: date(2026, 10, 16),
            ),
        )

        snap = fetcher.fetch(43.7, -79.4, 1)

        assert snap.source == WeatherSource.NASA_POWER
        assert snap.daily.temperature_max == [31.0]
        assert snap.hourly.temperature[12] == 25.0

    @respx.mock
    def test_unparseable_primary_body_falls_back(self):
        respx.get(url__startswith="https://meteo.test/").mock(
            return_value=httpx.Response(
                200,
                json={"daily": {"time": ["2026-10-16"], "temperature_2m_max": ["bad"]}},
            )
        )
        power = respx.get(url__startswith="https://power.test/").mock(
            return_value=httpx.Response(
                200, json={"properties": {"parameter": {"T2M_MAX": {"20261016": 28.0}}}}
            )
        )

        snap = self._fetcher().fetch(43.7, -79.4, 1)

        assert power.called
        assert snap.source == WeatherSource.NASA_POWER
        assert snap.daily.temperature_max == [28.0]

    @respx.mock
    def test_unparseable_secondary_value_keeps_primary_error(self):
        respx.get(url__startswith="https://meteo.test/").mock(
            return_value=httpx.Response(503)
        )
        respx.get(url__startswith="https://power.test/").mock(
            return_value=httpx.Response(
                200, json={"properties": {"parameter": {"T2M_MAX": {"20261016": "n/a"}}}}
            )
        )

        snap = self._fetcher().fetch(43.7, -79.4, 1)

        assert snap.source == WeatherSource.NASA_POWER
        assert not snap.is_observed("daily.temperature_max", 0)

    @respx.mock
    def test_both_unusable_raises_primary_error(self):
        respx.get(url__startswith="https://meteo.test/").mock(
            return_value=httpx.Response(503)
        )
        respx.get(url__startswith="https://power.test/").mock(
            return_value=httpx.Response(200, json={"properties": {"parameter": "n/a"}})
        )

        with pytest.raises(WeatherSourceError) as excinfo:
            self._fetcher().fetch(43.7, -79.4, 1)

        assert excinfo.value.status_code == 503
        assert excinfo.value.secondary.reason == FailureReason.MALFORMED

    @staticmethod
    def _fetcher() -> WeatherFetcher:
        return WeatherFetcher(
            TemporalCache(),
            OpenMeteoClient(base_url="https://meteo.test/v1/forecast", timeout=1.0),
            NasaPowerClient(
                base_url="https://power.test/daily", timeout=1.0,
                today=lambda: date(2026, 10, 16),
            ),
        )
