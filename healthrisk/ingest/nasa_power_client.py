"""NASA POWER daily point client: the secondary weather source.

POWER only publishes daily values, so the hourly series is synthesized from
each day's aggregates to keep the canonical snapshot shape uniform.
"""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta

from healthrisk.ingest.http import fetch_json
from healthrisk.ingest.open_meteo_client import DAILY_DEFAULTS, DEFAULT_USER_AGENT
from healthrisk.models.weather import (
    HOURS_PER_DAY,
    DailySeries,
    FailureReason,
    FetchOutcome,
    HourlySeries,
    SourceFailure,
    WeatherSnapshot,
    WeatherSource,
)

logger = logging.getLogger(__name__)

NASA_POWER_URL = "https://power.larc.nasa.gov/api/temporal/daily/point"

PARAMETERS = {
    "T2M_MAX": "temperature_max",
    "T2M_MIN": "temperature_min",
    "ALLSKY_SFC_UV_INDEX": "uv_index_max",
    "PRECTOTCORR": "precipitation_sum",
    "WS2M": "wind_speed",
}
FILL_VALUE = -999.0
SYNTHETIC_HUMIDITY = 50.0
DEFAULT_WIND_KMH = 10.0
MS_TO_KMH = 3.6


def _today_utc() -> date:
    return datetime.now(UTC).date()


class NasaPowerClient:
    def __init__(
        self,
        base_url: str = NASA_POWER_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        today: Callable[[], date] = _today_utc,
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self._today = today

    def fetch(self, latitude: float, longitude: float, days: int) -> FetchOutcome:
        if days < 1:
            raise ValueError(f"days must be at least 1, got {days}")
        start = self._today()
        dates = [start + timedelta(days=i) for i in range(days)]
        params = {
            "parameters": ",".join(PARAMETERS),
            "community": "RE",
            "latitude": latitude,
            "longitude": longitude,
            "start": dates[0].strftime("%Y%m%d"),
            "end": dates[-1].strftime("%Y%m%d"),
            "format": "JSON",
        }
        logger.info(
            "Fetching NASA POWER daily data lat=%s lon=%s %s..%s",
            latitude, longitude, params["start"], params["end"],
        )
        payload, failure = fetch_json(
            WeatherSource.NASA_POWER, self.base_url, params, self.timeout, self.user_agent
        )
        if failure is not None:
            return FetchOutcome.failed(failure)

        properties = payload.get("properties") if isinstance(payload, dict) else None
        parameter = properties.get("parameter") if isinstance(properties, dict) else None
        if not isinstance(parameter, dict):
            return FetchOutcome.failed(
                SourceFailure(
                    source=WeatherSource.NASA_POWER,
                    reason=FailureReason.MALFORMED,
                    detail="Missing properties.parameter object",
                )
            )
        return FetchOutcome.success(
            build_snapshot(parameter, dates, latitude, longitude)
        )


def build_snapshot(
    parameter: dict, dates: list[date], latitude: float, longitude: float
) -> WeatherSnapshot:
    """Build a canonical snapshot from POWER's per-parameter, per-date values."""
    imputed: set[tuple[str, int]] = set()
    daily_values: dict[str, list[float]] = {name: [] for name in PARAMETERS.values()}

    for day, d in enumerate(dates):
        key = d.strftime("%Y%m%d")
        for api_name, name in PARAMETERS.items():
            series = parameter.get(api_name)
            value = _reading(series.get(key) if isinstance(series, dict) else None)
            if value is None:
                imputed.add((f"daily.{name}", day))
                value = DEFAULT_WIND_KMH if name == "wind_speed" else DAILY_DEFAULTS[name]
            elif name == "wind_speed":
                value *= MS_TO_KMH
            daily_values[name].append(value)

    daily = DailySeries(
        time=[d.isoformat() for d in dates],
        temperature_max=daily_values["temperature_max"],
        temperature_min=daily_values["temperature_min"],
        uv_index_max=daily_values["uv_index_max"],
        precipitation_sum=daily_values["precipitation_sum"],
    )
    hourly = _synthesize_hourly(daily, dates, daily_values["wind_speed"], imputed)
    return WeatherSnapshot(
        latitude=latitude,
        longitude=longitude,
        source=WeatherSource.NASA_POWER,
        hourly=hourly,
        daily=daily,
        imputed=frozenset(imputed),
    )


def _reading(raw) -> float | None:
    """A POWER value as a float, or None when absent, fill or unparseable."""
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return None if value == FILL_VALUE else value


def _synthesize_hourly(
    daily: DailySeries,
    dates: list[date],
    wind: list[float],
    imputed: set[tuple[str, int]],
) -> HourlySeries:
    times: list[str] = []
    temperature: list[float] = []
    humidity: list[float] = []
    wind_speed: list[float] = []
    precipitation: list[float] = []

    for day, d in enumerate(dates):
        day_temp = round((daily.temperature_max[day] + daily.temperature_min[day]) / 2, 1)
        day_precip = round(daily.precipitation_sum[day] / HOURS_PER_DAY, 3)
        wind_missing = ("daily.wind_speed", day) in imputed
        for hour in range(HOURS_PER_DAY):
            idx = day * HOURS_PER_DAY + hour
            times.append(f"{d.isoformat()}T{hour:02d}:00")
            temperature.append(day_temp)
            humidity.append(SYNTHETIC_HUMIDITY)
            wind_speed.append(wind[day])
            precipitation.append(day_precip)
            # POWER reports no humidity.
            imputed.add(("hourly.humidity", idx))
            if wind_missing:
                imputed.add(("hourly.wind_speed", idx))

    return HourlySeries(
        time=times,
        temperature=temperature,
        humidity=humidity,
        wind_speed=wind_speed,
        precipitation=precipitation,
    )
