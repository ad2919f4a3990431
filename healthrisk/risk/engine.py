"""Risk engine: fuses weather, air quality and vulnerability into scores.

Everything here is a pure function of its arguments; the risk config is
passed on every call.
"""

from collections.abc import Sequence

from healthrisk.config.schema import RiskConfig, VulnerabilityConfig, VulnerabilityInputs
from healthrisk.models.air_quality import AirQualitySnapshot
from healthrisk.models.risk import (
    POLLUTANT_INPUTS,
    WEATHER_INPUTS,
    RiskInputs,
    RiskResult,
)
from healthrisk.models.weather import HOURS_PER_DAY, WeatherSnapshot
from healthrisk.risk.anomaly import MIN_HISTORY, temperature_anomaly
from healthrisk.risk.indices import air_quality, cold, heat
from healthrisk.risk.normalize import clamp_score

# Snapshot field backing each weather input, and whether it is hourly.
_WEATHER_FIELDS = {
    "temperature_max": ("daily.temperature_max", False),
    "temperature_min": ("daily.temperature_min", False),
    "uv_index": ("daily.uv_index_max", False),
    "precipitation": ("daily.precipitation_sum", False),
    "humidity": ("hourly.humidity", True),
    "wind_speed": ("hourly.wind_speed", True),
}

REQUIRED_INPUTS = len(WEATHER_INPUTS) + len(POLLUTANT_INPUTS)


class InvalidSnapshotError(ValueError):
    """The weather snapshot lacks the structure needed for scoring."""


def extract_inputs(
    snapshot: WeatherSnapshot,
    aq: AirQualitySnapshot,
    day_index: int = 0,
    vulnerability_multiplier: float = 1.0,
    history: Sequence[float] | None = None,
    snow_cover: float = 0.0,
) -> RiskInputs:
    """Pick one day's scoring inputs out of a canonical snapshot.

    Humidity and wind come from the first hour of the requested day. When no
    ``history`` is given the anomaly is measured against the other days'
    max temperatures in the snapshot (see ``default_history``).
    """
    daily, hourly = snapshot.daily, snapshot.hourly
    if daily is None or hourly is None or len(daily) == 0 or len(hourly) == 0:
        raise InvalidSnapshotError("Invalid weather data structure")
    if not 0 <= day_index < len(daily):
        raise InvalidSnapshotError(
            f"Day index {day_index} outside forecast of {len(daily)} day(s)"
        )

    hour_index = min(day_index * HOURS_PER_DAY, len(hourly) - 1)
    temperature_max = daily.temperature_max[day_index]
    temperature_min = daily.temperature_min[day_index]
    wind_speed = hourly.wind_speed[hour_index]

    observed = frozenset(
        name
        for name, (field_name, is_hourly) in _WEATHER_FIELDS.items()
        if snapshot.is_observed(field_name, hour_index if is_hourly else day_index)
    )

    if history is None:
        history = default_history(daily.temperature_max, day_index)

    return RiskInputs(
        temperature_max=temperature_max,
        temperature_min=temperature_min,
        humidity=hourly.humidity[hour_index],
        wind_speed=wind_speed,
        uv_index=daily.uv_index_max[day_index],
        precipitation=daily.precipitation_sum[day_index],
        wind_chill=cold.wind_chill(temperature_min, wind_speed),
        air_quality=aq,
        temperature_anomaly=temperature_anomaly(temperature_max, history),
        snow_cover=snow_cover,
        vulnerability_multiplier=vulnerability_multiplier,
        observed_weather=observed,
    )


def default_history(daily_max: Sequence[float], day_index: int) -> list[float]:
    """Days before ``day_index``; every other day if fewer than three precede it."""
    preceding = list(daily_max[:day_index])
    if len(preceding) >= MIN_HISTORY:
        return preceding
    return [t for i, t in enumerate(daily_max) if i != day_index]


def vulnerability_multiplier(
    inputs: VulnerabilityInputs, config: VulnerabilityConfig
) -> float:
    """Scale factor >= 1 from the senior share and population size."""
    senior_fraction = inputs.senior_percent / 100.0
    density = min(inputs.population / config.population_reference, 1.0)
    return 1.0 + config.senior_weight * senior_fraction + config.density_weight * density


def confidence(inputs: RiskInputs) -> float:
    """Fraction of required inputs that were observed rather than defaulted."""
    aq = inputs.air_quality
    pollutants_present = sum(
        1 for v in (aq.pm25, aq.pm10, aq.no2) if v is not None
    )
    weather_observed = len(inputs.observed_weather & set(WEATHER_INPUTS))
    return (weather_observed + pollutants_present) / REQUIRED_INPUTS


def calculate_risk(inputs: RiskInputs, config: RiskConfig) -> RiskResult:
    hsi = heat.score(inputs.temperature_max, inputs.humidity, inputs.temperature_anomaly)
    csi = cold.score(inputs.temperature_min, inputs.wind_chill, inputs.snow_cover)
    aqri = air_quality.score(inputs.air_quality)

    weights = config.weights
    composite = clamp_score(
        (hsi * weights.heat + csi * weights.cold + aqri * weights.air)
        * inputs.vulnerability_multiplier
    )
    # Scores stay unrounded; formatters round for display.
    return RiskResult(
        hsi=hsi,
        csi=csi,
        aqri=aqri,
        composite=composite,
        confidence=round(confidence(inputs), 3),
    )
