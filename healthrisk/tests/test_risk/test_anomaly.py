"""Tests for the temperature anomaly z-score."""

import pytest

from healthrisk.risk.anomaly import temperature_anomaly


class TestTemperatureAnomaly:
    def test_short_history_is_zero(self):
        assert temperature_anomaly(35.0, []) == 0.0
        assert temperature_anomaly(35.0, [20.0, 21.0]) == 0.0

    def test_flat_history_is_zero(self):
        assert temperature_anomaly(25.0, [20.0, 20.0, 20.0]) == 0.0

    def test_population_std(self):
        # mean 20, population std sqrt(200/3)
        assert temperature_anomaly(28.0, [10.0, 20.0, 30.0]) == pytest.approx(0.9798, abs=1e-4)

    def test_below_mean_is_negative(self):
        assert temperature_anomaly(12.0, [10.0, 20.0, 30.0]) < 0
