"""On-demand risk queries for a coordinate or a named region."""

import logging

from healthrisk.config.schema import EngineConfig, RegionConfig, RiskConfig, VulnerabilityInputs
from healthrisk.ingest.air_quality_client import AirQualityClient
from healthrisk.ingest.cache import TemporalCache
from healthrisk.ingest.geo import vertex_centroid
from healthrisk.ingest.nasa_power_client import NasaPowerClient
from healthrisk.ingest.open_meteo_client import OpenMeteoClient
from healthrisk.ingest.region_store import ConfigRegionStore
from healthrisk.ingest.weather_fetcher import WeatherFetcher
from healthrisk.models.air_quality import AirQualitySnapshot
from healthrisk.models.risk import RegionRisk, RiskResult
from healthrisk.models.weather import WeatherSnapshot
from healthrisk.risk.engine import calculate_risk, extract_inputs, vulnerability_multiplier

logger = logging.getLogger(__name__)


class RegionNotFoundError(KeyError):
    """No region with the requested name is known to the region store."""


class RiskQuery:
    """Fetches inputs for one point and scores them.

    Weather failures and invalid snapshots propagate to the caller so a
    failed computation is never mistaken for a low score.
    """

    def __init__(
        self,
        config: EngineConfig,
        weather: WeatherFetcher,
        air_quality: AirQualityClient,
        regions=None,
    ):
        self.config = config
        self.weather = weather
        self.air_quality = air_quality
        self.regions = regions if regions is not None else ConfigRegionStore(config)

    def assess(
        self,
        target: str | tuple[float, float],
        day_index: int = 0,
        risk_config: RiskConfig | None = None,
    ) -> RiskResult:
        """Score a region by name, or a (lat, lon) coordinate."""
        if isinstance(target, str):
            return self.assess_region(self.find_region(target), day_index, risk_config).result
        latitude, longitude = target
        return self.assess_point(latitude, longitude, day_index, risk_config).result

    def find_region(self, name: str) -> RegionConfig:
        for region in self.regions.list_regions():
            if region.name.lower() == name.lower():
                return region
        raise RegionNotFoundError(name)

    def assess_region(
        self,
        region: RegionConfig,
        day_index: int = 0,
        risk_config: RiskConfig | None = None,
    ) -> RegionRisk:
        latitude, longitude = vertex_centroid(region.polygon)
        return self.assess_point(
            latitude,
            longitude,
            day_index,
            risk_config,
            vulnerability=region.vulnerability,
            region_name=region.name,
        )

    def assess_point(
        self,
        latitude: float,
        longitude: float,
        day_index: int = 0,
        risk_config: RiskConfig | None = None,
        vulnerability: VulnerabilityInputs | None = None,
        region_name: str = "",
    ) -> RegionRisk:
        risk_config = risk_config or self.config.risk
        weather: WeatherSnapshot = self.weather.fetch(
            latitude, longitude, self.config.sources.forecast_days
        )
        aq: AirQualitySnapshot = self.air_quality.fetch(
            latitude, longitude, self.config.sources.air_quality_radius_m
        )
        multiplier = vulnerability_multiplier(
            vulnerability or VulnerabilityInputs(), risk_config.vulnerability
        )
        inputs = extract_inputs(weather, aq, day_index, multiplier)
        result = calculate_risk(inputs, risk_config)
        logger.info(
            "%s: HSI=%.1f CSI=%.1f AQRI=%.1f composite=%.1f confidence=%.2f",
            region_name or f"({latitude:.4f}, {longitude:.4f})",
            result.hsi, result.csi, result.aqri, result.composite, result.confidence,
        )
        return RegionRisk(
            region_name=region_name,
            latitude=latitude,
            longitude=longitude,
            day_index=day_index,
            result=result,
        )


def build_risk_query(config: EngineConfig, regions=None) -> RiskQuery:
    """Assemble the source clients around one cache per payload type."""
    sources = config.sources
    weather_cache: TemporalCache[WeatherSnapshot] = TemporalCache(sources.cache_ttl_minutes)
    aq_cache: TemporalCache[AirQualitySnapshot] = TemporalCache(sources.cache_ttl_minutes)

    weather = WeatherFetcher(
        weather_cache,
        OpenMeteoClient(
            sources.primary_weather_url, sources.user_agent, sources.timeout_seconds
        ),
        NasaPowerClient(
            sources.secondary_weather_url, sources.user_agent, sources.timeout_seconds
        ),
    )
    air_quality = AirQualityClient(
        aq_cache, sources.air_quality_url, sources.user_agent, sources.timeout_seconds
    )
    return RiskQuery(config, weather, air_quality, regions)
