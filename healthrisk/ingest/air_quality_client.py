"""OpenAQ resolver: nearest station's latest pollutant readings, or no data."""

import logging
import os

from healthrisk.ingest.cache import CacheKey, TemporalCache
from healthrisk.ingest.geo import haversine_km
from healthrisk.ingest.http import fetch_json
from healthrisk.models.air_quality import AirQualitySnapshot, Station

logger = logging.getLogger(__name__)

OPENAQ_URL = "https://api.openaq.org/v2"
DEFAULT_USER_AGENT = "healthrisk-engine/0.1.0"
SOURCE_TAG = "openaq"
CACHE_TAG = "airquality"
POLLUTANTS = ("pm25", "pm10", "no2")


class AirQualityClient:
    def __init__(
        self,
        cache: TemporalCache[AirQualitySnapshot],
        base_url: str = OPENAQ_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        api_key: str | None = None,
    ):
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.api_key = api_key if api_key is not None else os.environ.get("OPENAQ_API_KEY", "")

    def fetch(
        self, latitude: float, longitude: float, radius_m: int = 50_000
    ) -> AirQualitySnapshot:
        """Latest readings from the nearest station within ``radius_m``.

        Never raises: any failure yields ``AirQualitySnapshot.no_data()``,
        which is not cached.
        """
        key = CacheKey.for_point(CACHE_TAG, latitude, longitude, radius_m=radius_m)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Air quality cache hit for %s", key)
            return cached

        try:
            snapshot = self._resolve(latitude, longitude, radius_m)
        except Exception:
            logger.exception(
                "Air quality lookup failed for lat=%s lon=%s", latitude, longitude
            )
            return AirQualitySnapshot.no_data()

        if snapshot.station is not None:
            self.cache.set(key, snapshot)
        return snapshot

    def _resolve(
        self, latitude: float, longitude: float, radius_m: int
    ) -> AirQualitySnapshot:
        stations = self.list_stations(latitude, longitude, radius_m)
        if not stations:
            logger.warning(
                "No air quality stations within %dm of lat=%s lon=%s",
                radius_m, latitude, longitude,
            )
            return AirQualitySnapshot.no_data()

        station, distance = nearest_station(latitude, longitude, stations)

        payload, failure = self._get(
            "/measurements",
            {
                "limit": 100,
                "page": 1,
                "offset": 0,
                "sort": "desc",
                "location_id": station.id,
                "order_by": "datetime",
            },
        )
        if failure is not None:
            logger.warning("OpenAQ measurements unavailable: %s", failure.detail)
            return AirQualitySnapshot.no_data()

        readings = extract_pollutants(payload.get("results") or [])
        return AirQualitySnapshot(
            pm25=readings["pm25"],
            pm10=readings["pm10"],
            no2=readings["no2"],
            station=station.name,
            distance_km=distance,
        )

    def list_stations(
        self, latitude: float, longitude: float, radius_m: int
    ) -> list[Station]:
        payload, failure = self._get(
            "/locations",
            {
                "limit": 100,
                "page": 1,
                "offset": 0,
                "sort": "desc",
                "coordinates": f"{latitude},{longitude}",
                "radius": radius_m,
                "order_by": "lastUpdated",
            },
        )
        if failure is not None:
            logger.warning("OpenAQ locations unavailable: %s", failure.detail)
            return []

        stations: list[Station] = []
        for raw in payload.get("results") or []:
            coords = raw.get("coordinates") or {}
            if coords.get("latitude") is None or coords.get("longitude") is None:
                continue
            stations.append(
                Station(
                    id=int(raw["id"]),
                    name=str(raw.get("name", "")),
                    latitude=float(coords["latitude"]),
                    longitude=float(coords["longitude"]),
                )
            )
        return stations

    def _get(self, path: str, params: dict):
        headers = {"X-API-Key": self.api_key} if self.api_key else None
        return fetch_json(
            SOURCE_TAG,
            f"{self.base_url}{path}",
            params,
            self.timeout,
            self.user_agent,
            headers=headers,
        )


def nearest_station(
    latitude: float, longitude: float, stations: list[Station]
) -> tuple[Station, float]:
    """Minimum great-circle distance wins; on ties the first listed is kept."""
    best = stations[0]
    best_distance = haversine_km(latitude, longitude, best.latitude, best.longitude)
    for station in stations[1:]:
        distance = haversine_km(latitude, longitude, station.latitude, station.longitude)
        if distance < best_distance:
            best, best_distance = station, distance
    return best, best_distance


def extract_pollutants(measurements: list[dict]) -> dict[str, float | None]:
    """First reading of each pollutant; results are assumed newest-first."""
    readings: dict[str, float | None] = {p: None for p in POLLUTANTS}
    for m in measurements:
        parameter = m.get("parameter")
        if parameter in readings and readings[parameter] is None and m.get("value") is not None:
            readings[parameter] = float(m["value"])
    return readings
