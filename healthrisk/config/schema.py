"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, field_validator


class RiskWeights(BaseModel):
    model_config = {"extra": "forbid"}

    heat: float = Field(default=0.4, ge=0.0, le=1.0)
    cold: float = Field(default=0.3, ge=0.0, le=1.0)
    air: float = Field(default=0.3, ge=0.0, le=1.0)


class RiskThresholds(BaseModel):
    model_config = {"extra": "forbid"}

    hsi: float = Field(default=70.0, ge=0.0, le=100.0)
    csi: float = Field(default=60.0, ge=0.0, le=100.0)
    aqri: float = Field(default=65.0, ge=0.0, le=100.0)


class VulnerabilityConfig(BaseModel):
    model_config = {"extra": "forbid"}

    senior_weight: float = Field(default=0.5, ge=0.0)
    density_weight: float = Field(default=0.2, ge=0.0)
    population_reference: int = Field(default=100_000, gt=0)


class RiskConfig(BaseModel):
    model_config = {"extra": "forbid"}

    weights: RiskWeights = RiskWeights()
    thresholds: RiskThresholds = RiskThresholds()
    vulnerability: VulnerabilityConfig = VulnerabilityConfig()


class SourceConfig(BaseModel):
    model_config = {"extra": "forbid"}

    primary_weather_url: str = "https://api.open-meteo.com/v1/forecast"
    secondary_weather_url: str = "https://power.larc.nasa.gov/api/temporal/daily/point"
    air_quality_url: str = "https://api.openaq.org/v2"
    demographics_url: str = "https://api.worldbank.org/v2"
    user_agent: str = "healthrisk-engine/0.1.0"
    timeout_seconds: float = Field(default=10.0, gt=0.0)
    cache_ttl_minutes: int = Field(default=15, ge=1)
    forecast_days: int = Field(default=7, ge=1, le=16)
    air_quality_radius_m: int = Field(default=50_000, gt=0, le=100_000)


class BatchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    max_workers: int = Field(default=4, ge=1, le=32)
    day_index: int = Field(default=0, ge=0)
    extreme_region_count: int = Field(default=3, ge=1)
    serialize_runs: bool = False


class AlertConfig(BaseModel):
    model_config = {"extra": "forbid"}

    dedup_window_hours: float = Field(default=24.0, ge=0.0)


class VulnerabilityInputs(BaseModel):
    model_config = {"extra": "forbid"}

    population: int = Field(default=0, ge=0)
    senior_percent: float = Field(default=0.0, ge=0.0, le=100.0)


class RegionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    # GeoJSON polygon rings, each vertex as [lon, lat]
    polygon: list[list[tuple[float, float]]]
    vulnerability: VulnerabilityInputs = VulnerabilityInputs()
    enabled: bool = True

    @field_validator("polygon")
    @classmethod
    def _has_vertices(cls, v: list[list[tuple[float, float]]]) -> list[list[tuple[float, float]]]:
        if not any(ring for ring in v):
            raise ValueError("polygon must contain at least one vertex")
        return v


class EngineConfig(BaseModel):
    model_config = {"extra": "forbid"}

    risk: RiskConfig = RiskConfig()
    sources: SourceConfig = SourceConfig()
    batch: BatchConfig = BatchConfig()
    alerts: AlertConfig = AlertConfig()
    regions: list[RegionConfig] = []
