"""Risk scoring, per-region results and alert models."""

from dataclasses import dataclass, field
from enum import StrEnum

from healthrisk.models.air_quality import AirQualitySnapshot


class IndexKind(StrEnum):
    HEAT = "heat"
    COLD = "cold"
    AIR_QUALITY = "air_quality"


class Severity(StrEnum):
    HIGH = "high"
    EXTREME = "extreme"


# Weather inputs counted towards confidence, alongside the three pollutants.
WEATHER_INPUTS = (
    "temperature_max",
    "temperature_min",
    "uv_index",
    "precipitation",
    "humidity",
    "wind_speed",
)
POLLUTANT_INPUTS = ("pm25", "pm10", "no2")


@dataclass(frozen=True)
class RiskInputs:
    temperature_max: float
    temperature_min: float
    humidity: float
    wind_speed: float
    uv_index: float
    precipitation: float
    wind_chill: float
    air_quality: AirQualitySnapshot
    temperature_anomaly: float = 0.0
    snow_cover: float = 0.0
    vulnerability_multiplier: float = 1.0
    observed_weather: frozenset[str] = field(
        default_factory=lambda: frozenset(WEATHER_INPUTS)
    )


@dataclass(frozen=True)
class RiskResult:
    hsi: float
    csi: float
    aqri: float
    composite: float
    confidence: float

    def index_score(self, kind: IndexKind) -> float:
        if kind == IndexKind.HEAT:
            return self.hsi
        if kind == IndexKind.COLD:
            return self.csi
        return self.aqri


@dataclass(frozen=True)
class RegionRisk:
    region_name: str
    latitude: float
    longitude: float
    day_index: int
    result: RiskResult


@dataclass(frozen=True)
class AlertCandidate:
    kind: IndexKind
    region_names: list[str]
    severity: Severity
    threshold: float

    @property
    def message(self) -> str:
        label = {
            IndexKind.HEAT: ("High heat stress", "Heat Stress Index"),
            IndexKind.COLD: ("High cold stress", "Cold Stress Index"),
            IndexKind.AIR_QUALITY: ("Poor air quality", "Air Quality Risk Index"),
        }[self.kind]
        return (
            f"{label[0]} detected in {len(self.region_names)} region(s). "
            f"{label[1]} above {self.threshold:g}."
        )


@dataclass(frozen=True)
class AlertRecord:
    id: str
    kind: IndexKind
    severity: Severity
    region_names: list[str]
    message: str
    created_at: str
