"""Open-Meteo forecast client: the primary hourly + daily weather source."""

import logging
from typing import Any

from healthrisk.ingest.http import fetch_json
from healthrisk.models.weather import (
    DailySeries,
    FailureReason,
    FetchOutcome,
    HourlySeries,
    SourceFailure,
    WeatherSnapshot,
    WeatherSource,
)

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_USER_AGENT = "healthrisk-engine/0.1.0"

HOURLY_FIELDS = {
    "temperature_2m": "temperature",
    "relative_humidity_2m": "humidity",
    "wind_speed_10m": "wind_speed",
    "precipitation": "precipitation",
}
DAILY_FIELDS = {
    "temperature_2m_max": "temperature_max",
    "temperature_2m_min": "temperature_min",
    "uv_index_max": "uv_index_max",
    "precipitation_sum": "precipitation_sum",
}

DAILY_DEFAULTS = {
    "temperature_max": 25.0,
    "temperature_min": 15.0,
    "uv_index_max": 5.0,
    "precipitation_sum": 0.0,
}
HOURLY_DEFAULTS = {
    "humidity": 50.0,
    "wind_speed": 10.0,
    "precipitation": 0.0,
}


class OpenMeteoClient:
    def __init__(
        self,
        base_url: str = OPEN_METEO_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout

    def fetch(self, latitude: float, longitude: float, days: int) -> FetchOutcome:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "hourly": ",".join(HOURLY_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "forecast_days": days,
            "timezone": "auto",
        }
        logger.info(
            "Fetching Open-Meteo forecast lat=%s lon=%s days=%d",
            latitude, longitude, days,
        )
        payload, failure = fetch_json(
            WeatherSource.OPEN_METEO, self.base_url, params, self.timeout, self.user_agent
        )
        if failure is not None:
            return FetchOutcome.failed(failure)
        if not isinstance(payload, dict):
            return FetchOutcome.failed(
                SourceFailure(
                    source=WeatherSource.OPEN_METEO,
                    reason=FailureReason.MALFORMED,
                    detail="Response body is not a JSON object",
                )
            )
        try:
            snapshot = parse_forecast(payload, latitude, longitude)
        except (TypeError, ValueError) as e:
            return FetchOutcome.failed(
                SourceFailure(
                    source=WeatherSource.OPEN_METEO,
                    reason=FailureReason.MALFORMED,
                    detail=f"Unparseable forecast values: {e}",
                    error=e,
                )
            )
        return FetchOutcome.success(snapshot)


def parse_forecast(payload: dict, latitude: float, longitude: float) -> WeatherSnapshot:
    """Convert an Open-Meteo response into a canonical snapshot.

    Absent ``hourly`` or ``daily`` objects stay ``None``; the risk engine
    rejects such snapshots. Null or missing values inside the arrays are
    replaced with defaults and recorded as imputed. Non-numeric values raise
    ValueError or TypeError.
    """
    imputed: set[tuple[str, int]] = set()
    daily = _parse_daily(payload.get("daily"), imputed)
    hourly = _parse_hourly(payload.get("hourly"), daily, imputed)
    return WeatherSnapshot(
        latitude=_coordinate(payload.get("latitude"), latitude),
        longitude=_coordinate(payload.get("longitude"), longitude),
        source=WeatherSource.OPEN_METEO,
        hourly=hourly,
        daily=daily,
        imputed=frozenset(imputed),
    )


def _coordinate(raw: Any, requested: float) -> float:
    return requested if raw is None else float(raw)


def _parse_daily(raw: Any, imputed: set[tuple[str, int]]) -> DailySeries | None:
    if not isinstance(raw, dict) or not raw.get("time"):
        return None
    times = [str(t) for t in raw["time"]]
    values: dict[str, list[float]] = {}
    for api_name, name in DAILY_FIELDS.items():
        values[name] = _fill(
            raw.get(api_name), len(times), DAILY_DEFAULTS[name], f"daily.{name}", imputed
        )
    return DailySeries(time=times, **values)


def _parse_hourly(
    raw: Any, daily: DailySeries | None, imputed: set[tuple[str, int]]
) -> HourlySeries | None:
    if not isinstance(raw, dict) or not raw.get("time"):
        return None
    times = [str(t) for t in raw["time"]]
    values: dict[str, list[float]] = {}
    for api_name, name in HOURLY_FIELDS.items():
        if name == "temperature":
            continue
        values[name] = _fill(
            raw.get(api_name), len(times), HOURLY_DEFAULTS[name], f"hourly.{name}", imputed
        )

    # Missing hourly temperatures take the mean of that day's max/min.
    temps: list[float] = []
    raw_temps = raw.get("temperature_2m") or []
    for i in range(len(times)):
        v = raw_temps[i] if i < len(raw_temps) else None
        if v is None:
            imputed.add(("hourly.temperature", i))
            temps.append(_day_mean(daily, i // 24))
        else:
            temps.append(float(v))
    return HourlySeries(time=times, temperature=temps, **values)


def _fill(
    raw: Any,
    length: int,
    default: float,
    field_name: str,
    imputed: set[tuple[str, int]],
) -> list[float]:
    seq = raw if isinstance(raw, list) else []
    out: list[float] = []
    for i in range(length):
        v = seq[i] if i < len(seq) else None
        if v is None:
            imputed.add((field_name, i))
            out.append(default)
        else:
            out.append(float(v))
    return out


def _day_mean(daily: DailySeries | None, day: int) -> float:
    if daily is None or day >= len(daily):
        day_max, day_min = DAILY_DEFAULTS["temperature_max"], DAILY_DEFAULTS["temperature_min"]
    else:
        day_max, day_min = daily.temperature_max[day], daily.temperature_min[day]
    return round((day_max + day_min) / 2, 1)
